"""Database engine and session helpers.

This centralizes engine creation so both the app and tests can share the
same configuration. By default we store the SQLite database under the
project root in `data/sleep_history_database.db`.

There is no module-level engine: the app root creates one SleepDatabase
and passes it to whatever needs storage.
"""

import os
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sleeptracker.config import PROJECT_ROOT
from sleeptracker.utils.logger import get_logger

from .models import Base
from .store import SleepNightStore

logger = get_logger(__name__)

DB_PATH = os.path.join(PROJECT_ROOT, "data", "sleep_history_database.db")


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Return a SQLAlchemy engine, creating data dir as needed."""
    url = database_url or f"sqlite:///{DB_PATH}"
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection so worker threads see the same in-memory DB.
        return create_engine(
            url,
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if url.startswith("sqlite:///"):
        db_location = url.replace("sqlite:///", "")
        if db_location:
            os.makedirs(os.path.dirname(os.path.abspath(db_location)), exist_ok=True)
    return create_engine(url, future=True)


def init_db(eng: Engine) -> None:
    """Create tables, recreating any whose columns no longer match the model.

    There is no migration path: a table with a stale schema is dropped and
    rebuilt, losing its rows.
    """
    _drop_stale_tables(eng)
    Base.metadata.create_all(eng)


def _drop_stale_tables(eng: Engine) -> None:
    inspector = inspect(eng)
    existing = set(inspector.get_table_names())

    for table in Base.metadata.sorted_tables:
        if table.name not in existing:
            continue
        # get_columns: [{"name": ..., "type": ..., ...}, ...]
        on_disk = {col["name"] for col in inspector.get_columns(table.name)}
        expected = {col.name for col in table.columns}
        if on_disk != expected:
            logger.warning(
                "Schema of %s changed (%s -> %s); recreating table",
                table.name,
                sorted(on_disk),
                sorted(expected),
            )
            table.drop(eng)


class SleepDatabase:
    """Owns the engine, the session factory and the night store.

    Create one per process (the app root does this) and share it.
    """

    def __init__(self, database_url: Optional[str] = None):
        self.engine = get_engine(database_url)
        init_db(self.engine)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False
        )
        self.store = SleepNightStore(self.SessionLocal)
        logger.info("Opened sleep database at %s", self.engine.url)

    def dispose(self) -> None:
        self.engine.dispose()
