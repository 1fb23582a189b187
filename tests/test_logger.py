import logging

import pytest

from sleeptracker.config import Settings
from sleeptracker.utils.logger import SQL_LOGGER, configure_logging, get_logger


@pytest.fixture()
def restore_levels():
    root = logging.getLogger()
    sql = logging.getLogger(SQL_LOGGER)
    saved = (root.level, sql.level)
    try:
        yield
    finally:
        root.setLevel(saved[0])
        sql.setLevel(saved[1])


def test_level_comes_from_settings(restore_levels):
    configure_logging(Settings(log_level="debug"))
    assert logging.getLogger().level == logging.DEBUG

    configure_logging(Settings(log_level="not-a-level"))
    assert logging.getLogger().level == logging.INFO


def test_sql_echo_toggles_engine_logger(restore_levels):
    configure_logging(Settings(echo_sql=True))
    assert logging.getLogger(SQL_LOGGER).level == logging.INFO

    configure_logging(Settings(echo_sql=False))
    assert logging.getLogger(SQL_LOGGER).level == logging.WARNING


def test_get_logger_returns_named_logger():
    assert get_logger("sleeptracker.test").name == "sleeptracker.test"
    assert logging.getLogger().handlers
