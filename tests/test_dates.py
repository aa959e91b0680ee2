"""Tests for calendar range helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from market_calendar.dates import (
    APIDateRange,
    InvalidDateError,
    add_months,
    calendar_date,
    compute_day_range,
    compute_week_range,
    day_range,
    get_week_start_date,
    month_range,
    parse_instant,
    today_in,
    try_parse_instant,
    week_range,
)


# ---------------------------------------------------------------------------
# parse_instant tests
# ---------------------------------------------------------------------------


def test_parse_instant_reads_zulu_suffix():
    assert parse_instant("2024-08-15T12:30:00Z") == datetime(2024, 8, 15, 12, 30, tzinfo=timezone.utc)


def test_parse_instant_treats_naive_values_as_utc():
    """Strings without an offset and naive datetimes are UTC, not host-local."""
    assert parse_instant("2024-08-15T12:30:00") == datetime(2024, 8, 15, 12, 30, tzinfo=timezone.utc)
    assert parse_instant(datetime(2024, 8, 15, 12, 30)).tzinfo == timezone.utc
    assert parse_instant("2024-08-15") == datetime(2024, 8, 15, tzinfo=timezone.utc)


def test_parse_instant_converts_offsets_to_utc():
    result = parse_instant("2024-08-15T20:00:00-04:00")
    assert result == datetime(2024, 8, 16, 0, 0, tzinfo=timezone.utc)
    assert result.utcoffset().total_seconds() == 0


@pytest.mark.parametrize("value", ["invalid-date", "", "   ", None, 12345])
def test_parse_instant_rejects_garbage(value):
    with pytest.raises(InvalidDateError):
        parse_instant(value)


def test_invalid_date_error_is_value_error():
    with pytest.raises(ValueError):
        compute_week_range("invalid-date")


def test_try_parse_instant_returns_none_for_garbage():
    assert try_parse_instant("not a date") is None
    assert try_parse_instant({"date": "2024-08-15"}) is None


# ---------------------------------------------------------------------------
# Week ranges
# ---------------------------------------------------------------------------


def test_week_range_midweek():
    """A Thursday maps to Monday..Sunday of the same week."""
    assert compute_week_range("2024-08-15") == APIDateRange(from_date="2024-08-12", to_date="2024-08-18")


def test_week_range_sunday_belongs_to_preceding_monday():
    assert compute_week_range("2024-08-18T22:00:00Z").from_date == "2024-08-12"


def test_week_range_monday_is_its_own_start():
    assert get_week_start_date("2024-08-12T00:00:00Z") == "2024-08-12"


def test_week_range_boundaries_are_utc_day_edges():
    result = week_range("2024-08-15T09:00:00Z")
    assert result.start == datetime(2024, 8, 12, 0, 0, 0, tzinfo=timezone.utc)
    assert result.end == datetime(2024, 8, 18, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_week_range_spanning_new_year():
    assert compute_week_range("2025-01-01") == APIDateRange(from_date="2024-12-30", to_date="2025-01-05")


def test_week_range_projects_into_timezone_first():
    """Monday 02:00Z is still Sunday evening in New York."""
    assert compute_week_range("2024-08-19T02:00:00Z").from_date == "2024-08-19"
    assert compute_week_range("2024-08-19T02:00:00Z", "America/New_York").from_date == "2024-08-12"


def test_api_dates_have_no_time_component():
    result = compute_week_range("2024-08-15T23:59:59Z")
    for value in (result.from_date, result.to_date):
        assert "T" not in value
        assert "Z" not in value
        assert len(value) == 10


def test_as_params_uses_upstream_names():
    assert compute_day_range("2024-08-15").as_params() == {"fromDate": "2024-08-15", "toDate": "2024-08-15"}


# ---------------------------------------------------------------------------
# Day and month ranges
# ---------------------------------------------------------------------------


def test_day_range_uses_calendar_date_in_timezone():
    instant = "2024-08-16T03:30:00Z"
    assert compute_day_range(instant).from_date == "2024-08-16"
    assert compute_day_range(instant, "America/New_York").from_date == "2024-08-15"


def test_day_range_covers_whole_day():
    result = day_range(date(2024, 8, 15))
    assert result.start == datetime(2024, 8, 15, tzinfo=timezone.utc)
    assert result.end == datetime(2024, 8, 15, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_month_range_leap_february():
    result = month_range("2024-02-10")
    assert result.start.date() == date(2024, 2, 1)
    assert result.end.date() == date(2024, 2, 29)


def test_month_range_december():
    result = month_range("2023-12-31T12:00:00Z")
    assert result.start.date() == date(2023, 12, 1)
    assert result.end.date() == date(2023, 12, 31)


@pytest.mark.parametrize(
    ("start", "months", "expected"),
    [
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2023, 1, 31), 1, date(2023, 2, 28)),
        (date(2024, 12, 15), 1, date(2025, 1, 15)),
        (date(2024, 1, 15), -1, date(2023, 12, 15)),
    ],
)
def test_add_months_clamps_day(start, months, expected):
    assert add_months(start, months) == expected


# ---------------------------------------------------------------------------
# calendar_date / today_in
# ---------------------------------------------------------------------------


def test_calendar_date_returns_plain_dates_unchanged():
    assert calendar_date(date(2024, 8, 15), "Asia/Tokyo") == date(2024, 8, 15)


def test_calendar_date_unknown_timezone_raises():
    with pytest.raises(ValueError):
        calendar_date("2024-08-15", "Mars/Olympus_Mons")


def test_today_in_uses_injected_now():
    now = datetime(2024, 8, 16, 1, 0, tzinfo=timezone.utc)
    assert today_in("UTC", now) == date(2024, 8, 16)
    assert today_in("America/New_York", now) == date(2024, 8, 15)


@pytest.mark.parametrize("day", ["2024-08-12", "2024-08-13", "2024-08-14", "2024-08-15", "2024-08-16", "2024-08-17", "2024-08-18"])
def test_every_day_of_week_shares_week_start(day):
    assert get_week_start_date(day) == "2024-08-12"


def test_week_range_shape_across_a_year():
    """Monday start, Sunday end, and Sunday shares the week of the Monday six days earlier."""
    start = date(2024, 1, 1)
    for offset in range(366):
        day = start + timedelta(days=offset)
        result = week_range(day)
        assert result.start.isoweekday() == 1
        assert result.end.isoweekday() == 7
        assert result.end - result.start == timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)
        if day.isoweekday() == 7:
            assert week_range(day - timedelta(days=6)) == result


@pytest.mark.parametrize("value", ["9999-12-31T23:00:00-05:00", "0001-01-01T00:00:00+01:00"])
def test_parse_instant_out_of_range_offsets_are_invalid(value):
    with pytest.raises(InvalidDateError):
        parse_instant(value)
    assert try_parse_instant(value) is None


def test_calendar_date_out_of_range_projection_is_invalid():
    with pytest.raises(InvalidDateError):
        calendar_date("0001-01-01T00:00:00Z", "America/New_York")
