"""Wiring of configuration, logging, storage and services."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.orm import sessionmaker

from memecoin import snowflake
from memecoin.app_service import MemeCoinAppService
from memecoin.conf import Config, load_config
from memecoin.dao import MemeCoinDao
from memecoin.database import SessionTransactionManager
from memecoin.domain_service import MemeCoinDomainService
from memecoin.logs import Logger, parse_level
from memecoin.migration import auto_migrate
from memecoin.mysqlx import create_client
from memecoin.repository import DaoMemeCoinRepository


@dataclass
class Injection:
    """The service's assembled dependencies."""

    config: Config
    logger: Logger
    meme_coin_app_service: MemeCoinAppService


def build_injection(config_dir: str | os.PathLike = "config") -> Injection:
    """Load configuration, connect and migrate the database, and build the services."""
    dotenv = Path(".env")
    if dotenv.is_file():
        load_dotenv(dotenv)

    config = load_config(config_dir)
    logger = Logger(
        service_name=config.server.name,
        level=parse_level(config.log.level),
        show_caller=True,
    )

    snowflake.init(logger)
    try:
        engine = create_client(config)
    except Exception as exc:
        logger.emergency("failed to initialize mysql client: %s", exc)
        raise
    logger.info("mysql client initialized")

    try:
        auto_migrate(engine)
    except Exception:
        logger.emergency("failed to auto migrate")
        raise

    txm = SessionTransactionManager(sessionmaker(bind=engine))
    repository = DaoMemeCoinRepository(MemeCoinDao(txm))
    domain_service = MemeCoinDomainService(logger, repository, txm)
    app_service = MemeCoinAppService(logger, domain_service)
    return Injection(config=config, logger=logger, meme_coin_app_service=app_service)