"""Centralized logger configuration.

Usage:
    from sleeptracker.utils.logger import get_logger
    logger = get_logger(__name__)

The app root calls configure_logging(settings) once at startup; modules only
ask for named loggers. SQL statement echo goes through the
"sqlalchemy.engine" logger rather than create_engine(echo=...), so it shares
the same handler and format.
"""
import logging
from typing import Optional

from sleeptracker.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SQL_LOGGER = "sqlalchemy.engine"


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or Settings()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(_level(settings.log_level))
    logging.getLogger(SQL_LOGGER).setLevel(
        logging.INFO if settings.echo_sql else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)
