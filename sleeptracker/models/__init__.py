"""Data schemas and validation."""
from .night import (
    MAX_QUALITY,
    MIN_QUALITY,
    UNRATED_QUALITY,
    SleepNight,
    now_millis,
)

__all__ = [
    "SleepNight",
    "UNRATED_QUALITY",
    "MIN_QUALITY",
    "MAX_QUALITY",
    "now_millis",
]
