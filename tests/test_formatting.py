from datetime import timezone

from sleeptracker.formatting import (
    HISTORY_TITLE,
    format_duration,
    format_night,
    format_nights,
    quality_label,
)
from sleeptracker.models.night import SleepNight


def test_quality_labels():
    assert quality_label(0) == "Very bad"
    assert quality_label(5) == "Excellent"
    assert quality_label(-1) == "--"


def test_format_duration():
    assert format_duration(0) == "0:00:00"
    assert format_duration((7 * 3600 + 5 * 60 + 9) * 1000) == "7:05:09"


def test_open_night_has_no_duration():
    text = format_night(SleepNight(start_time_milli=0), tz=timezone.utc)
    assert "Thursday Jan-01-1970 Time: 00:00" in text
    assert "(tracking)" in text
    assert "Hours" not in text


def test_history_lists_nights_in_given_order():
    nights = [
        SleepNight(night_id=2, start_time_milli=86_400_000, end_time_milli=86_400_000 + 3_600_000, sleep_quality=3),
        SleepNight(night_id=1, start_time_milli=0, end_time_milli=60_000, sleep_quality=1),
    ]
    text = format_nights(nights, tz=timezone.utc)

    assert text.startswith(HISTORY_TITLE)
    assert text.index("OK") < text.index("Poor")
    assert "1:00:00" in text
    assert format_nights([]) == HISTORY_TITLE
