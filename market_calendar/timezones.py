"""Timezone allow-list and display formatting."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from .dates import InstantLike, try_parse_instant


@dataclass(frozen=True)
class TimezoneConfig:
    value: str
    label: str
    abbreviation: str
    offset: str


TIMEZONES: tuple[TimezoneConfig, ...] = (
    TimezoneConfig("UTC", "UTC (Coordinated Universal Time)", "UTC", "+00:00"),
    TimezoneConfig("America/New_York", "Eastern Time (US & Canada)", "ET", "UTC-5/-4"),
    TimezoneConfig("America/Chicago", "Central Time (US & Canada)", "CT", "UTC-6/-5"),
    TimezoneConfig("America/Denver", "Mountain Time (US & Canada)", "MT", "UTC-7/-6"),
    TimezoneConfig("America/Los_Angeles", "Pacific Time (US & Canada)", "PT", "UTC-8/-7"),
    TimezoneConfig("Europe/London", "Greenwich Mean Time (London)", "GMT", "UTC+0/+1"),
    TimezoneConfig("Europe/Berlin", "Central European Time (Frankfurt)", "CET", "UTC+1/+2"),
    TimezoneConfig("Asia/Tokyo", "Japan Standard Time (Tokyo)", "JST", "UTC+9"),
    TimezoneConfig("Asia/Hong_Kong", "Hong Kong Time", "HKT", "UTC+8"),
    TimezoneConfig("Asia/Singapore", "Singapore Standard Time", "SGT", "UTC+8"),
    TimezoneConfig("Australia/Sydney", "Australian Eastern Time (Sydney)", "AEST", "UTC+10/+11"),
)

DEFAULT_TIMEZONE = "UTC"

# Economic events are published in Eastern Time.
CALENDAR_TIMEZONE = "America/New_York"

WEEKDAY_ABBR = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

INVALID_DATE = "Invalid Date"
INVALID_TIME = "Invalid Time"
INVALID_DATETIME = "Invalid DateTime"


@dataclass(frozen=True)
class FormatOptions:
    hour12: bool = True
    show_zone: bool = True
    long_date: bool = False


@dataclass(frozen=True)
class FormattedInstant:
    date: str
    time: str
    datetime: str


def is_valid_timezone(tz_name: Any) -> bool:
    return any(tz.value == tz_name for tz in TIMEZONES)


def get_timezone_config(tz_name: Any) -> Optional[TimezoneConfig]:
    for tz in TIMEZONES:
        if tz.value == tz_name:
            return tz
    return None


def resolve_timezone(tz_name: Optional[str], default: str = DEFAULT_TIMEZONE) -> str:
    """Return ``tz_name`` when it is on the allow-list, otherwise ``default``."""

    if tz_name and is_valid_timezone(tz_name):
        return tz_name
    if tz_name:
        logger.warning("Unsupported timezone {}; falling back to {}", tz_name, default)
    return default


def _zone_or_utc(tz_name: Optional[str]):
    if not tz_name:
        return timezone.utc
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone {}; formatting in UTC", tz_name)
        return timezone.utc


def compute_timezone_offset_minutes(
    tz_name: str,
    *,
    at: Optional[datetime] = None,
    local_date: Optional[date] = None,
) -> Optional[int]:
    """Minutes east of UTC for ``tz_name`` at an instant or local midnight."""

    try:
        tzinfo = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return None

    if local_date:
        local_dt = datetime.combine(local_date, time.min, tzinfo=tzinfo)
    else:
        dt = at or datetime.now(timezone.utc)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        local_dt = dt.astimezone(tzinfo)
    offset = local_dt.utcoffset()

    if offset is None:
        return None
    return int(offset.total_seconds() // 60)


def current_time_in_calendar_timezone(
    tz_name: str = CALENDAR_TIMEZONE,
    now: Optional[datetime] = None,
) -> datetime:
    """The current instant, expressed in the calendar (publisher) timezone.

    Comparisons against event dates stay absolute; only the framing changes.
    """

    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(_zone_or_utc(tz_name))


def _format_date(local: datetime, long_date: bool) -> str:
    if long_date:
        return (
            f"{WEEKDAY_NAMES[local.weekday()]}, {MONTH_NAMES[local.month - 1]} "
            f"{local.day}, {local.year}"
        )
    return f"{WEEKDAY_ABBR[local.weekday()]}, {MONTH_ABBR[local.month - 1]} {local.day}"


def _format_time(local: datetime, hour12: bool, show_zone: bool) -> str:
    if hour12:
        hour = local.hour % 12 or 12
        text = f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"
    else:
        text = f"{local.hour:02d}:{local.minute:02d}"
    if show_zone:
        text = f"{text} {local.tzname()}"
    return text


def format_in_timezone(
    value: InstantLike,
    tz_name: str = DEFAULT_TIMEZONE,
    options: Optional[FormatOptions] = None,
) -> FormattedInstant:
    """Render an instant as date, time and combined strings in ``tz_name``.

    Never raises: unparseable input yields the ``Invalid ...`` sentinels and an
    unknown zone is rendered in UTC.
    """

    instant = try_parse_instant(value)
    local = None
    if instant is not None:
        try:
            local = instant.astimezone(_zone_or_utc(tz_name))
        except OverflowError:
            local = None
    if local is None:
        logger.warning("Invalid date provided for formatting: {!r}", value)
        return FormattedInstant(date=INVALID_DATE, time=INVALID_TIME, datetime=INVALID_DATETIME)

    opts = options or FormatOptions()
    date_text = _format_date(local, opts.long_date)
    time_text = _format_time(local, opts.hour12, opts.show_zone)
    return FormattedInstant(date=date_text, time=time_text, datetime=f"{date_text}, {time_text}")


def format_time_et(value: InstantLike) -> str:
    """24-hour ``HH:MM`` in Eastern Time."""

    return format_in_timezone(
        value, CALENDAR_TIMEZONE, FormatOptions(hour12=False, show_zone=False)
    ).time


def format_date_et(value: InstantLike) -> str:
    """Full date in Eastern Time, e.g. ``Friday, August 29, 2025``."""

    return format_in_timezone(value, CALENDAR_TIMEZONE, FormatOptions(long_date=True)).date
