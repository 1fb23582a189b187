"""Centralized configuration loading.

Loads environment variables once and provides a typed Settings object
for the rest of the codebase. Entry points build one Settings instance and
hand it to the app root; nothing else reads the environment directly.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv


# Load .env once at import time
load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))


@dataclass
class Settings:
    # Database (root-level data directory by default)
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///"
        + os.path.join(PROJECT_ROOT, "data", "sleep_history_database.db"),
    )

    # Background I/O pool used for storage calls
    io_workers: int = int(os.getenv("ST_IO_WORKERS", "1"))

    # Logging
    log_level: str = os.getenv("ST_LOG_LEVEL", "INFO")
    echo_sql: bool = os.getenv("ST_ECHO_SQL", "0") == "1"


def get_settings() -> Settings:
    """Return a new Settings instance (cheap dataclass construction)."""
    return Settings()
