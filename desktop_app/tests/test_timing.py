from __future__ import annotations

import math
import time

import pytest

from schedule_desktop.models import TimeSettings, Trip
from schedule_desktop.timing import (EMPTY_DURATION, assignment_warning, format_duration, get_actual_end,
                                     get_duration, parse_punctuality)


@pytest.mark.parametrize(
    "end_time, punctuality, expected",
    [
        ("2024-01-01T10:00", 15, "10:15"),
        ("2024-01-01T10:00", "+15", "10:15"),
        ("2024-01-01 10:00", None, "10:00"),
        ("2024-01-01 10:00", "late", "10:00"),
        ("Shift 10:00", "5", "10:05"),
        ("2024-01-01 23:50", 20, "00:10"),
        (None, 5, ""),
        ("garbage", 5, ""),
    ],
)
def test_get_actual_end(end_time, punctuality, expected):
    assert get_actual_end(end_time, punctuality) == expected


def test_parse_punctuality():
    assert parse_punctuality(None) == 0
    assert parse_punctuality("abc") == 0
    assert parse_punctuality("12.7") == 12
    assert parse_punctuality("-10") == -10
    assert parse_punctuality(True) == 0


def test_left_duration_uses_actual_end():
    trip = Trip("1", start_time="Shift 08:00", end_time="2024-01-01T10:00", punctuality=-10)
    assert get_duration(trip, is_left=True) == 110
    assert format_duration(get_duration(trip, is_left=True)) == "01:50"


def test_right_duration_uses_scheduled_end():
    trip = Trip("1", start_time="2024-01-02 08:00", end_time="2024-01-02 10:00", punctuality=30)
    assert get_duration(trip, is_left=False) == 120


def test_duration_is_nan_when_unparseable():
    trip = Trip("1", start_time="", end_time="2024-01-02 10:00")
    assert math.isnan(get_duration(trip, is_left=False))
    assert format_duration(get_duration(trip, is_left=False)) == EMPTY_DURATION


def test_format_duration():
    assert format_duration(0) == "00:00"
    assert format_duration(1505) == "25:05"
    assert format_duration(59.6) == "01:00"
    assert format_duration(-30) == "-00:30"
    assert format_duration(math.nan) == "--:--"


def _trips(left_end: str, right_start: str):
    return Trip("l", end_time=left_end), Trip("r", start_time=right_start)


def test_rest_warning():
    settings = TimeSettings()
    left, right = _trips("2024-01-01 21:00", "2024-01-02 06:00")
    assert assignment_warning(left, right, settings) == settings.rest_message


def test_early_warning():
    settings = TimeSettings()
    left, right = _trips("2024-01-01 16:00", "2024-01-02 10:00")
    assert assignment_warning(left, right, settings) == settings.early_message


def test_no_warning_inside_thresholds():
    left, right = _trips("2024-01-01 18:00", "2024-01-02 08:00")
    assert assignment_warning(left, right, TimeSettings()) == ""


def test_warnings_can_be_disabled():
    settings = TimeSettings(enable_rest_warning=False, enable_early_warning=False)
    left, right = _trips("2024-01-01 21:00", "2024-01-02 06:00")
    assert assignment_warning(left, right, settings) == ""
    assert assignment_warning(None, right, TimeSettings()) == ""


@pytest.fixture()
def utc_local_time(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available")
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_actual_end_converts_offsets_to_local_time(utc_local_time):
    assert get_actual_end("2024-01-01T10:00:00+05:00", 0) == "05:00"
    assert get_actual_end("2024-01-01T10:00:00+05:00", 15) == "05:15"
    assert get_actual_end("2024-01-01T10:00:00", 0) == "10:00"
