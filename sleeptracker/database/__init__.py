"""Database models and session management."""
from .engine import DB_PATH, SleepDatabase, get_engine, init_db
from .models import Base, SleepNightRecord
from .store import SleepNightStore, Subscription

__all__ = [
    "DB_PATH",
    "SleepDatabase",
    "get_engine",
    "init_db",
    "Base",
    "SleepNightRecord",
    "SleepNightStore",
    "Subscription",
]
