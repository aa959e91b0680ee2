"""Tests for timezone lookups and display formatting."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from market_calendar.timezones import (
    INVALID_DATE,
    INVALID_DATETIME,
    INVALID_TIME,
    TIMEZONES,
    FormatOptions,
    compute_timezone_offset_minutes,
    current_time_in_calendar_timezone,
    format_date_et,
    format_in_timezone,
    format_time_et,
    get_timezone_config,
    is_valid_timezone,
    resolve_timezone,
)


def test_every_allow_listed_zone_loads():
    for tz in TIMEZONES:
        assert ZoneInfo(tz.value) is not None


def test_frankfurt_is_served_by_berlin_zone():
    config = get_timezone_config("Europe/Berlin")
    assert config is not None
    assert "Frankfurt" in config.label


def test_allow_list_lookups():
    assert is_valid_timezone("Asia/Tokyo")
    assert not is_valid_timezone("Mars/Olympus_Mons")
    assert get_timezone_config("Mars/Olympus_Mons") is None


def test_resolve_timezone_falls_back_to_default():
    assert resolve_timezone("Asia/Tokyo") == "Asia/Tokyo"
    assert resolve_timezone("Mars/Olympus_Mons") == "UTC"
    assert resolve_timezone(None, "America/New_York") == "America/New_York"


# ---- ET formatting ----


def test_format_time_et_winter_midnight():
    """05:00Z in January is midnight EST."""
    assert format_time_et("2024-01-15T05:00:00Z") == "00:00"


def test_format_time_et_summer_midnight():
    """04:00Z in July is midnight EDT."""
    assert format_time_et("2024-07-15T04:00:00Z") == "00:00"


def test_format_time_et_naive_string_is_utc():
    assert format_time_et("2024-01-15T05:00:00") == "00:00"


def test_format_date_et_long_form():
    assert format_date_et("2025-08-29T16:00:00Z") == "Friday, August 29, 2025"


def test_format_date_et_uses_eastern_calendar_day():
    assert format_date_et("2025-08-30T02:00:00Z") == "Friday, August 29, 2025"


# ---- format_in_timezone ----


def test_format_in_timezone_defaults():
    result = format_in_timezone("2024-01-15T17:30:00Z", "America/New_York")
    assert result.date == "Mon, Jan 15"
    assert result.time == "12:30 PM EST"
    assert result.datetime == "Mon, Jan 15, 12:30 PM EST"


def test_format_in_timezone_24_hour_without_zone():
    result = format_in_timezone(
        "2024-01-15T09:05:00Z", "Asia/Tokyo", FormatOptions(hour12=False, show_zone=False)
    )
    assert result.time == "18:05"


def test_format_in_timezone_midnight_in_12_hour_clock():
    assert format_in_timezone("2024-01-15T00:00:00Z", "UTC").time == "12:00 AM UTC"


def test_format_in_timezone_invalid_input_returns_sentinels():
    result = format_in_timezone("invalid-date", "UTC")
    assert (result.date, result.time, result.datetime) == (INVALID_DATE, INVALID_TIME, INVALID_DATETIME)
    assert format_time_et(None) == INVALID_TIME
    assert format_date_et("") == INVALID_DATE


def test_format_in_timezone_out_of_range_returns_sentinels():
    """Year 1 parses in UTC but cannot be projected west of Greenwich."""
    result = format_in_timezone("0001-01-01T00:00:00Z", "America/New_York")
    assert (result.date, result.time, result.datetime) == (INVALID_DATE, INVALID_TIME, INVALID_DATETIME)
    assert format_time_et("9999-12-31T23:00:00-05:00") == INVALID_TIME


def test_format_in_timezone_unknown_zone_renders_utc():
    result = format_in_timezone(
        "2024-01-15T05:00:00Z", "Mars/Olympus_Mons", FormatOptions(hour12=False, show_zone=False)
    )
    assert result.time == "05:00"


# ---- offsets and current time ----


@pytest.mark.parametrize(
    ("tz_name", "at", "expected"),
    [
        ("America/New_York", datetime(2024, 1, 15, tzinfo=timezone.utc), -300),
        ("America/New_York", datetime(2024, 7, 15, tzinfo=timezone.utc), -240),
        ("Asia/Tokyo", datetime(2024, 7, 15, tzinfo=timezone.utc), 540),
        ("UTC", datetime(2024, 7, 15, tzinfo=timezone.utc), 0),
    ],
)
def test_compute_timezone_offset_minutes(tz_name, at, expected):
    assert compute_timezone_offset_minutes(tz_name, at=at) == expected


def test_compute_timezone_offset_for_local_date():
    assert compute_timezone_offset_minutes("Australia/Sydney", local_date=date(2024, 1, 1)) == 660


def test_compute_timezone_offset_unknown_zone():
    assert compute_timezone_offset_minutes("Mars/Olympus_Mons") is None


def test_current_time_in_calendar_timezone_keeps_instant():
    now = datetime(2024, 1, 15, 5, 0, tzinfo=timezone.utc)
    current = current_time_in_calendar_timezone(now=now)
    assert current == now
    assert current.hour == 0
    assert current.tzinfo == ZoneInfo("America/New_York")
