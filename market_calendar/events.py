"""Economic event normalisation, filtering and ordering."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from loguru import logger

from .dates import DAY_END, DAY_START, calendar_date, try_parse_instant


IMPORTANCE_LEVELS: list[dict[str, str]] = [
    {"value": "all", "label": "All Importance Levels", "color": "gray"},
    {"value": "low", "label": "Low Importance", "color": "blue"},
    {"value": "medium", "label": "Medium Importance", "color": "amber"},
    {"value": "high", "label": "High Importance", "color": "red"},
]

DEFAULT_IMPORTANCE = "all"

IMPORTANCE_RANK = {"low": 1, "medium": 2, "high": 3}

PASSTHROUGH_FIELDS = ("_id", "created_at", "updated_at")


def is_valid_importance(importance: Any) -> bool:
    return any(level["value"] == importance for level in IMPORTANCE_LEVELS)


def get_importance_config(importance: Any) -> Optional[dict[str, str]]:
    for level in IMPORTANCE_LEVELS:
        if level["value"] == importance:
            return level
    return None


def _tags(value: Any) -> list[Any]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_event(raw: Any) -> Optional[dict[str, Any]]:
    """Fill in display defaults; None when ``date`` or ``event`` is missing."""

    if not isinstance(raw, Mapping) or not raw.get("date") or not raw.get("event"):
        return None
    event = {
        "date": raw["date"],
        "event": raw["event"],
        "country": raw.get("country") or "Unknown",
        "importance": raw.get("importance") or "low",
        "source": raw.get("source") or {"name": "Unknown", "url": ""},
        "category": raw.get("category") or "other",
        "tags": _tags(raw.get("tags")),
    }
    for key in PASSTHROUGH_FIELDS:
        if key in raw:
            event[key] = raw[key]
    return event


def normalize_events(raw_events: Iterable[Any]) -> list[dict[str, Any]]:
    events: list[dict[str, Any]] = []
    for raw in raw_events:
        event = normalize_event(raw)
        if event is None:
            logger.warning("Dropping invalid event data: {!r}", raw)
            continue
        events.append(event)
    return events


def filter_events_by_importance(
    events: Optional[Iterable[Mapping[str, Any]]],
    importance: Optional[str],
) -> list[Mapping[str, Any]]:
    """Keep events at ``importance`` or above; ``all`` keeps everything."""

    if events is None:
        return []
    events = list(events)
    if not importance or importance == DEFAULT_IMPORTANCE:
        return events
    minimum = IMPORTANCE_RANK.get(importance)
    if minimum is None:
        return events
    return [
        event
        for event in events
        if IMPORTANCE_RANK.get(str(event.get("importance") or "").lower(), 0) >= minimum
    ]


def _matches(event: Mapping[str, Any], field: str, expected: Optional[str]) -> bool:
    if not expected:
        return True
    return str(event.get(field) or "").lower() == str(expected).lower()


def filter_events(
    events: Iterable[Mapping[str, Any]],
    *,
    importance: Optional[str] = None,
    country: Optional[str] = None,
    category: Optional[str] = None,
) -> list[Mapping[str, Any]]:
    """Exact, case-insensitive field filters."""

    return [
        event
        for event in events
        if _matches(event, "importance", importance)
        and _matches(event, "country", country)
        and _matches(event, "category", category)
    ]


def filter_events_by_date_range(
    events: Iterable[Mapping[str, Any]],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> list[Mapping[str, Any]]:
    """Keep events between ``from_date`` 00:00Z and ``to_date`` 23:59:59.999Z.

    Raises InvalidDateError when a bound is not a valid date.
    """

    lower = (
        datetime.combine(calendar_date(from_date), DAY_START, tzinfo=timezone.utc)
        if from_date
        else None
    )
    upper = (
        datetime.combine(calendar_date(to_date), DAY_END, tzinfo=timezone.utc)
        if to_date
        else None
    )

    kept = []
    for event in events:
        instant = try_parse_instant(event.get("date"))
        if instant is None:
            continue
        if lower is not None and instant < lower:
            continue
        if upper is not None and instant > upper:
            continue
        kept.append(event)
    return kept


def sort_events_by_date(events: Iterable[Mapping[str, Any]]) -> list[Mapping[str, Any]]:
    """Stable ascending sort; events with malformed dates go last."""

    dated = []
    undated = []
    for event in events:
        instant = try_parse_instant(event.get("date"))
        if instant is None:
            undated.append(event)
        else:
            dated.append((instant, event))
    dated.sort(key=lambda pair: pair[0])
    return [event for _, event in dated] + undated
