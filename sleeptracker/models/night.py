"""Pydantic model for a tracked sleep night.

Instances are plain values: the store converts table rows into SleepNight
objects on the way out and copies their fields back in on write, so no
SQLAlchemy session is ever held by callers.
"""
import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

UNRATED_QUALITY = -1
MIN_QUALITY = 0
MAX_QUALITY = 5


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class SleepNight(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    night_id: int = Field(default=0, ge=0)
    start_time_milli: int = Field(default_factory=now_millis, ge=0)
    end_time_milli: int = Field(default=-1)
    sleep_quality: int = Field(default=UNRATED_QUALITY, ge=UNRATED_QUALITY, le=MAX_QUALITY)

    @model_validator(mode="before")
    @classmethod
    def default_end_to_start(cls, data: Any) -> Any:
        # A fresh night is open: its end equals its start.
        if isinstance(data, dict) and data.get("end_time_milli") is None:
            data = dict(data)
            data.pop("end_time_milli", None)
            if "start_time_milli" not in data:
                data["start_time_milli"] = now_millis()
            data["end_time_milli"] = data["start_time_milli"]
        return data

    @model_validator(mode="after")
    def end_not_before_start(self) -> "SleepNight":
        if self.end_time_milli < self.start_time_milli:
            raise ValueError("end_time_milli must be >= start_time_milli")
        return self

    @property
    def is_open(self) -> bool:
        """True while tracking is in progress."""
        return self.end_time_milli == self.start_time_milli

    @property
    def is_rated(self) -> bool:
        return self.sleep_quality != UNRATED_QUALITY

    @property
    def duration_milli(self) -> int:
        return self.end_time_milli - self.start_time_milli
