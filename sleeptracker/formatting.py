"""Text helpers for showing nights in the history view."""
from datetime import datetime
from typing import Iterable, Optional

from sleeptracker.models.night import SleepNight

HISTORY_TITLE = "Here is your sleep data"

QUALITY_LABELS = {
    0: "Very bad",
    1: "Poor",
    2: "So-so",
    3: "OK",
    4: "Pretty good",
    5: "Excellent",
}


def quality_label(quality: int) -> str:
    """Human label for a 0-5 rating; "--" when unrated or out of range."""
    return QUALITY_LABELS.get(quality, "--")


def format_timestamp(millis: int, tz: Optional[object] = None) -> str:
    return datetime.fromtimestamp(millis / 1000, tz=tz).strftime("%A %b-%d-%Y Time: %H:%M")


def format_duration(millis: int) -> str:
    """h:mm:ss for a non-negative duration."""
    seconds = max(millis, 0) // 1000
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours}:{minutes:02d}:{seconds:02d}"


def format_night(night: SleepNight, tz: Optional[object] = None) -> str:
    lines = [f"Start: {format_timestamp(night.start_time_milli, tz)}"]
    if night.is_open:
        lines.append("End: (tracking)")
    else:
        lines.append(f"End: {format_timestamp(night.end_time_milli, tz)}")
        lines.append(f"Hours:Minutes:Seconds: {format_duration(night.duration_milli)}")
    lines.append(f"Quality: {quality_label(night.sleep_quality)}")
    return "\n".join(lines)


def format_nights(nights: Iterable[SleepNight], tz: Optional[object] = None) -> str:
    """Render the history listing, one blank-line separated block per night."""
    body = "\n\n".join(format_night(n, tz) for n in nights)
    return f"{HISTORY_TITLE}\n\n{body}" if body else HISTORY_TITLE
