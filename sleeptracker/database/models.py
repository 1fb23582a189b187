from sqlalchemy import BigInteger, Column, Integer
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SleepNightRecord(Base):
    """One row per tracked night.

    Columns:
        nightId: generated on insert, never reused (AUTOINCREMENT)
        start_time_milli: epoch ms captured when tracking started
        end_time_milli: epoch ms when tracking stopped; equals start while open
        quality_rating: 0-5 once rated, -1 before that
    """

    __tablename__ = "daily_sleep_quality_table"
    __table_args__ = {"sqlite_autoincrement": True}

    night_id = Column("nightId", Integer, primary_key=True, autoincrement=True)
    start_time_milli = Column(BigInteger, nullable=False)
    end_time_milli = Column(BigInteger, nullable=False)
    sleep_quality = Column("quality_rating", Integer, nullable=False, default=-1)

    def __repr__(self) -> str:  # pragma: no cover - repr utility
        return (
            f"SleepNightRecord(id={self.night_id}, start={self.start_time_milli}, "
            f"end={self.end_time_milli}, quality={self.sleep_quality})"
        )
