"""Week page paths and prev/next links."""

from __future__ import annotations

from datetime import timedelta

from .dates import InstantLike, calendar_date, get_week_start_date


WEEK_PATH_PREFIX = "/calendar/week"


def week_path(week_start: str) -> str:
    return f"{WEEK_PATH_PREFIX}/{week_start}"


def link_for_week_offset(week_start: InstantLike, offset_days: int) -> str:
    """Path of the week ``offset_days`` away from ``week_start``.

    The shifted date is normalised to its own Monday, so a non-Monday input
    still lands on a canonical week path.
    """

    shifted = calendar_date(week_start) + timedelta(days=offset_days)
    return week_path(get_week_start_date(shifted))


def canonical_week_url(site_url: str, week_start: str) -> str:
    return f"{site_url.rstrip('/')}{week_path(week_start)}"
