"""
Sleep Tracker - start, stop and rate your nights.

Core package: configuration, the night model and the SQLite-backed store.
"""

__version__ = "1.0.0"

from .models.night import SleepNight

__all__ = [
    "SleepNight",
]
