"""Calendar day, week and month ranges.

Every instant is normalised to an aware UTC ``datetime`` on the way in:
strings without an offset (including bare ``YYYY-MM-DD`` dates) and naive
datetimes are read as UTC, never as the host's local time. When a timezone
is supplied, the instant is first projected into that zone to find its
calendar date; the resulting boundaries are then expressed in UTC on that
calendar date, so ``format_range_for_api`` always yields the projected date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
import calendar
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


InstantLike = Union[datetime, date, str]

DAY_START = time(0, 0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


class InvalidDateError(ValueError):
    """Raised when a reference instant cannot be parsed."""

    def __init__(self, value: object):
        super().__init__(f"Invalid date provided: {value!r}")
        self.value = value


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class APIDateRange:
    from_date: str
    to_date: str

    def as_params(self) -> dict[str, str]:
        return {"fromDate": self.from_date, "toDate": self.to_date}


def parse_instant(value: InstantLike) -> datetime:
    """Return ``value`` as an aware UTC datetime or raise InvalidDateError."""

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, DAY_START)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            raise InvalidDateError(value)
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidDateError(value) from exc
    else:
        raise InvalidDateError(value)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except (OverflowError, ValueError) as exc:
        raise InvalidDateError(value) from exc


def try_parse_instant(value: object) -> Optional[datetime]:
    try:
        return parse_instant(value)  # type: ignore[arg-type]
    except InvalidDateError:
        return None


def _zone(tz_name: Optional[str]):
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {tz_name}") from exc


def calendar_date(value: InstantLike, tz_name: Optional[str] = None) -> date:
    """Calendar date the instant falls on in ``tz_name`` (UTC when omitted).

    A plain ``date`` is already a calendar date and is returned unchanged.
    """

    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    zone = _zone(tz_name)
    instant = parse_instant(value)
    try:
        return instant.astimezone(zone).date()
    except OverflowError as exc:
        raise InvalidDateError(value) from exc


def today_in(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    return calendar_date(now or datetime.now(timezone.utc), tz_name)


def date_span(first: date, last: date) -> DateRange:
    return DateRange(
        start=datetime.combine(first, DAY_START, tzinfo=timezone.utc),
        end=datetime.combine(last, DAY_END, tzinfo=timezone.utc),
    )


def day_range(value: InstantLike, tz_name: Optional[str] = None) -> DateRange:
    day = calendar_date(value, tz_name)
    return date_span(day, day)


def week_range(value: InstantLike, tz_name: Optional[str] = None) -> DateRange:
    """Monday 00:00:00.000 to Sunday 23:59:59.999 around the instant.

    Sunday is day 7 of the week that started on the preceding Monday.
    """

    day = calendar_date(value, tz_name)
    monday = day + timedelta(days=1 - day.isoweekday())
    return date_span(monday, monday + timedelta(days=6))


def month_range(value: InstantLike, tz_name: Optional[str] = None) -> DateRange:
    day = calendar_date(value, tz_name)
    last_day = calendar.monthrange(day.year, day.month)[1]
    return date_span(day.replace(day=1), day.replace(day=last_day))


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's length."""

    index = day.month - 1 + months
    year, month = day.year + index // 12, index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def format_range_for_api(value: DateRange) -> APIDateRange:
    return APIDateRange(
        from_date=value.start.astimezone(timezone.utc).date().isoformat(),
        to_date=value.end.astimezone(timezone.utc).date().isoformat(),
    )


def compute_week_range(value: InstantLike, tz_name: Optional[str] = None) -> APIDateRange:
    return format_range_for_api(week_range(value, tz_name))


def compute_day_range(value: InstantLike, tz_name: Optional[str] = None) -> APIDateRange:
    return format_range_for_api(day_range(value, tz_name))


def get_week_start_date(value: InstantLike, tz_name: Optional[str] = None) -> str:
    return compute_week_range(value, tz_name).from_date
