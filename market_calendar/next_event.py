"""Pick the next upcoming event and compose the ticker headline.

Selection and display use different timezones. "Upcoming" is judged against
the current instant framed in the publisher's timezone (events are scheduled
in Eastern Time), while the headline renders times in the observer's zone.
Both sides of the comparison are absolute instants.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from loguru import logger

from .dates import try_parse_instant
from .timezones import (
    CALENDAR_TIMEZONE,
    DEFAULT_TIMEZONE,
    FormatOptions,
    current_time_in_calendar_timezone,
    format_in_timezone,
)


NO_UPCOMING_EVENTS = "No upcoming events scheduled"

Event = Mapping[str, Any]


@dataclass(frozen=True)
class Headline:
    text: str
    event: Optional[Event] = None
    status: Optional[str] = None


def upcoming_events(events: Optional[Iterable[Event]], now: datetime) -> list[Event]:
    """Events strictly after ``now``, earliest first; ties keep input order.

    Events whose date cannot be parsed are not candidates.
    """

    candidates: list[tuple[datetime, Event]] = []
    for event in events or ():
        if not isinstance(event, Mapping):
            logger.debug("Skipping non-mapping event entry: {!r}", event)
            continue
        instant = try_parse_instant(event.get("date"))
        if instant is None:
            logger.debug("Skipping event with unparseable date: {!r}", event.get("date"))
            continue
        if instant > now:
            candidates.append((instant, event))
    candidates.sort(key=lambda pair: pair[0])
    return [event for _, event in candidates]


def needs_fallback(
    events: Optional[Iterable[Event]],
    publisher_timezone: str = CALENDAR_TIMEZONE,
    *,
    now: Optional[datetime] = None,
) -> bool:
    """True when nothing in ``events`` is still upcoming."""

    current = current_time_in_calendar_timezone(publisher_timezone, now=now)
    return not upcoming_events(events, current)


def select_next_event(
    events: Optional[Sequence[Event]],
    publisher_timezone: str = CALENDAR_TIMEZONE,
    observer_timezone: str = DEFAULT_TIMEZONE,
    override_event: Optional[Event] = None,
    *,
    fallback_events: Optional[Sequence[Event]] = None,
    now: Optional[datetime] = None,
) -> Optional[Event]:
    """Return the event to highlight, or None when nothing is upcoming.

    A user-selected ``override_event`` always wins. Otherwise the earliest
    event after "now" in ``events`` is chosen, then in ``fallback_events``
    (the next day's list) when ``events`` has nothing left.
    """

    if override_event is not None:
        return override_event

    current = current_time_in_calendar_timezone(publisher_timezone, now=now)
    for candidates in (events, fallback_events):
        upcoming = upcoming_events(candidates, current)
        if upcoming:
            chosen = upcoming[0]
            logger.debug(
                "Next event {} at {}",
                chosen.get("event"),
                format_event_time(chosen.get("date"), observer_timezone),
            )
            return chosen
    return None


def format_event_time(value: Any, tz_name: str) -> str:
    return format_in_timezone(value, tz_name, FormatOptions(hour12=True, show_zone=True)).time


def event_status(event: Event) -> str:
    importance = str(event.get("importance") or "").upper()
    country = event.get("country") or ""
    category = str(event.get("category") or "").upper()
    return f"{importance} | {country} | {category}"


def build_headline(
    events: Optional[Sequence[Event]],
    observer_timezone: str = DEFAULT_TIMEZONE,
    publisher_timezone: str = CALENDAR_TIMEZONE,
    *,
    selected_event: Optional[Event] = None,
    fallback_events: Optional[Sequence[Event]] = None,
    morning_summary: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Headline:
    event = select_next_event(
        events,
        publisher_timezone,
        observer_timezone,
        selected_event,
        fallback_events=fallback_events,
        now=now,
    )
    status = event_status(event) if event is not None else None

    if morning_summary:
        return Headline(text=morning_summary, event=event, status=status)
    if event is None:
        return Headline(text=NO_UPCOMING_EVENTS)

    when = format_event_time(event.get("date"), observer_timezone)
    if selected_event is not None:
        text = f"{when}: {event.get('event')}"
    else:
        text = f"Next Event: {event.get('event')} at {when}"
    return Headline(text=text, event=event, status=status)
