"""Versioned SQL migrations recorded in a ``migrations`` table."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import Column, MetaData, String, Table, insert, select
from sqlalchemy.engine import Connection, Engine

DEFAULT_BASE_DIR = "migrations"

_metadata = MetaData()
_migrations_table = Table(
    "migrations", _metadata, Column("id", String(255), primary_key=True)
)


@dataclass(frozen=True)
class Migration:
    """One schema change with its way back."""

    id: str
    migrate: Callable[[Connection], None]
    rollback: Callable[[Connection], None]


def _sql_step(path: Path) -> Callable[[Connection], None]:
    def run(conn: Connection) -> None:
        conn.exec_driver_sql(path.read_text(encoding="utf-8"))

    return run


def get_migrations(base_dir: str | os.PathLike = DEFAULT_BASE_DIR) -> list[Migration]:
    """Return the known migrations, reading their SQL from ``base_dir``."""
    base = Path(base_dir)
    create_meme_coin = "20240215_create_meme_coin_table"
    return [
        Migration(
            id=create_meme_coin,
            migrate=_sql_step(base / f"{create_meme_coin}.up.sql"),
            rollback=_sql_step(base / f"{create_meme_coin}.down.sql"),
        ),
    ]


def _run(engine: Engine, migrations: Sequence[Migration]) -> None:
    if not migrations:
        raise ValueError("no migration defined")
    seen: set[str] = set()
    for migration in migrations:
        if migration.id in seen:
            raise ValueError(f"duplicated migration ID: {migration.id}")
        seen.add(migration.id)

    _migrations_table.create(engine, checkfirst=True)
    with engine.connect() as conn:
        applied = set(conn.execute(select(_migrations_table.c.id)).scalars())

    for migration in migrations:
        if migration.id in applied:
            continue
        with engine.begin() as conn:
            migration.migrate(conn)
            conn.execute(insert(_migrations_table).values(id=migration.id))


def auto_migrate(engine: Engine, base_dir: str | os.PathLike = DEFAULT_BASE_DIR) -> None:
    """Apply every migration not yet recorded as applied."""
    _run(engine, get_migrations(base_dir))