"""Exception types raised by the sleep tracker core.

Lookups that find nothing return ``None``; the errors below cover storage
failures and operations the caller should not have issued.
"""


class SleepTrackerError(Exception):
    """Base class for sleep tracker errors."""


class StorageError(SleepTrackerError):
    """The underlying database failed to read or write."""


class NightNotFoundError(SleepTrackerError):
    """An operation needed a night that is not in the store."""

    def __init__(self, night_id: int):
        super().__init__(f"No sleep night with id {night_id}")
        self.night_id = night_id


class SessionAlreadyOpenError(SleepTrackerError):
    """Tracking was started while another night is still open."""

    def __init__(self, night_id: int):
        super().__init__(f"Night {night_id} is still being tracked")
        self.night_id = night_id


class InvalidQualityError(SleepTrackerError, ValueError):
    """A quality rating outside the accepted scale."""


class ScopeCancelledError(SleepTrackerError, RuntimeError):
    """Work was launched on a task scope that has already been cancelled."""


class NightNotRateableError(SleepTrackerError):
    """A rating was given for a night that is still open or already rated."""

    def __init__(self, night_id: int, reason: str):
        super().__init__(f"Night {night_id} cannot be rated: {reason}")
        self.night_id = night_id
        self.reason = reason
