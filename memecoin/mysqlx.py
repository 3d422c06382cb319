"""MySQL engine creation from the service configuration."""

from __future__ import annotations

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from memecoin import errors
from memecoin.conf import Config

_TIMEOUT_SECONDS = "30"


def build_url(config: Config) -> URL:
    """Return the connection URL for the configured MySQL database."""
    mysql = config.mysql
    return URL.create(
        drivername="mysql+pymysql",
        username=mysql.username,
        password=mysql.password,
        host=mysql.host,
        port=mysql.port,
        database=mysql.database,
        query={
            "charset": "utf8",
            "read_timeout": _TIMEOUT_SECONDS,
            "write_timeout": _TIMEOUT_SECONDS,
        },
    )


def create_client(config: Config) -> Engine:
    """Create a pooled engine and check that the database answers."""
    mysql = config.mysql
    pool_size = min(mysql.max_idle, mysql.max_open)
    try:
        engine = create_engine(
            build_url(config),
            pool_size=pool_size,
            max_overflow=max(mysql.max_open - pool_size, 0),
        )
    except (SQLAlchemyError, ImportError) as exc:
        raise errors.wrap(exc, "failed to connect to database") from exc

    if mysql.max_idle == 0 or mysql.max_open == 0:
        engine.dispose()
        raise ValueError("missing maxIdle or maxOpen")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        engine.dispose()
        raise errors.wrap(exc, "error pinging database") from exc
    return engine