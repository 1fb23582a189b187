import pytest
from pydantic import ValidationError

from sleeptracker.models.night import UNRATED_QUALITY, SleepNight, now_millis


def test_new_night_is_open_and_unrated():
    before = now_millis()
    night = SleepNight()

    assert night.night_id == 0
    assert night.start_time_milli >= before
    assert night.end_time_milli == night.start_time_milli
    assert night.sleep_quality == UNRATED_QUALITY
    assert night.is_open
    assert not night.is_rated
    assert night.duration_milli == 0


def test_explicit_start_defaults_end():
    night = SleepNight(start_time_milli=1000)
    assert night.end_time_milli == 1000


def test_end_before_start_rejected():
    with pytest.raises(ValueError):
        SleepNight(start_time_milli=1000, end_time_milli=500)


def test_quality_out_of_range_rejected():
    with pytest.raises(ValidationError):
        SleepNight(start_time_milli=1, sleep_quality=6)
    with pytest.raises(ValidationError):
        SleepNight(start_time_milli=1, sleep_quality=-2)


def test_closed_night_properties():
    night = SleepNight(night_id=3, start_time_milli=1000, end_time_milli=5000, sleep_quality=2)
    assert not night.is_open
    assert night.is_rated
    assert night.duration_milli == 4000
