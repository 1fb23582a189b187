"""Thin repository helpers for sleep nights.

These functions provide a small abstraction over SQLAlchemy sessions so the
store can persist nights deterministically. They commit their own writes.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from sleeptracker.models.night import SleepNight

from .models import SleepNightRecord


def insert_night(session: Session, night: SleepNight) -> SleepNightRecord:
    """Insert a new row; the database assigns the id.

    Returns the persisted SleepNightRecord instance.
    """
    record = SleepNightRecord(
        start_time_milli=night.start_time_milli,
        end_time_milli=night.end_time_milli,
        sleep_quality=night.sleep_quality,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def update_night(session: Session, night: SleepNight) -> bool:
    """Overwrite every column of the row matching night.night_id.

    Returns False if there is no such row.
    """
    record = session.get(SleepNightRecord, night.night_id)
    if record is None:
        return False
    record.start_time_milli = night.start_time_milli
    record.end_time_milli = night.end_time_milli
    record.sleep_quality = night.sleep_quality
    session.commit()
    return True


def get_night(session: Session, night_id: int) -> Optional[SleepNightRecord]:
    return session.get(SleepNightRecord, night_id)


def get_latest_night(session: Session) -> Optional[SleepNightRecord]:
    """Return the night with the largest id, or None on an empty table."""
    return (
        session.query(SleepNightRecord)
        .order_by(SleepNightRecord.night_id.desc())
        .limit(1)
        .first()
    )


def get_all_nights(session: Session) -> List[SleepNightRecord]:
    """Return every night, newest first."""
    return (
        session.query(SleepNightRecord)
        .order_by(SleepNightRecord.night_id.desc())
        .all()
    )


def delete_all_nights(session: Session) -> int:
    deleted = session.query(SleepNightRecord).delete()
    session.commit()
    return deleted
