"""Named calendar periods (today, this week, next month, ...)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from .dates import (
    APIDateRange,
    DateRange,
    InstantLike,
    add_months,
    calendar_date,
    date_span,
    day_range,
    format_range_for_api,
    month_range,
    week_range,
)


class PeriodToken(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    RECENT = "recent"
    THIS_WEEK = "thisWeek"
    NEXT_WEEK = "nextWeek"
    THIS_MONTH = "thisMonth"
    NEXT_MONTH = "nextMonth"


PERIOD_OPTIONS: list[dict[str, str]] = [
    {"value": "today", "label": "Today", "description": "All events for today"},
    {"value": "tomorrow", "label": "Tomorrow", "description": "All events for tomorrow"},
    {
        "value": "recent",
        "label": "Recent",
        "description": "Previous events within one week of today",
    },
    {"value": "thisWeek", "label": "This Week", "description": "All events from Monday to Sunday"},
    {
        "value": "nextWeek",
        "label": "Next Week",
        "description": "Next week from Monday to the following Sunday",
    },
    {"value": "thisMonth", "label": "This Month", "description": "Events for this current month"},
    {"value": "nextMonth", "label": "Next Month", "description": "Events for next month"},
]

DEFAULT_PERIOD = PeriodToken.TODAY


def parse_period(value: object) -> Optional[PeriodToken]:
    try:
        return PeriodToken(value)
    except (TypeError, ValueError):
        return None


def resolve_period(
    token: object,
    reference: Optional[InstantLike] = None,
    tz_name: Optional[str] = None,
) -> Optional[DateRange]:
    """Return the range for ``token``, or None when the token is not a period.

    The reference instant (now, by default) is projected to its calendar date
    in ``tz_name`` before any arithmetic, so "today" is today in that zone.
    """

    period = parse_period(token)
    if period is None:
        return None

    day = calendar_date(reference or datetime.now(timezone.utc), tz_name)

    if period is PeriodToken.TODAY:
        return day_range(day)
    if period is PeriodToken.TOMORROW:
        return day_range(day + timedelta(days=1))
    if period is PeriodToken.RECENT:
        return date_span(day - timedelta(days=7), day)
    if period is PeriodToken.THIS_WEEK:
        return week_range(day)
    if period is PeriodToken.NEXT_WEEK:
        return week_range(day + timedelta(days=7))
    if period is PeriodToken.THIS_MONTH:
        return month_range(day)
    return month_range(add_months(day, 1))


def resolve_period_for_api(
    token: object,
    reference: Optional[InstantLike] = None,
    tz_name: Optional[str] = None,
) -> Optional[APIDateRange]:
    resolved = resolve_period(token, reference, tz_name)
    if resolved is None:
        return None
    return format_range_for_api(resolved)
