"""Economic calendar JSON endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import re
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..config import get_settings
from ..dates import APIDateRange, InvalidDateError, compute_day_range, compute_week_range, today_in
from ..events import filter_events, filter_events_by_date_range, filter_events_by_importance, normalize_events
from ..next_event import build_headline, needs_fallback
from ..periods import PERIOD_OPTIONS, parse_period, resolve_period_for_api
from ..timezones import TIMEZONES, compute_timezone_offset_minutes, resolve_timezone
from ..upstream import (
    InvalidUpstreamResponse,
    UpstreamError,
    UpstreamFailure,
    fetch_calendar_events,
    get_upstream_client,
)


router = APIRouter()

YMD_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class PeriodOption(BaseModel):
    value: str
    label: str
    description: str


class TimezoneOption(BaseModel):
    value: str
    label: str
    abbreviation: str
    offset: str
    offset_minutes: Optional[int] = None


class TimezoneListResponse(BaseModel):
    default: str
    publisher: str
    timezones: list[TimezoneOption]


class PeriodEventsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    period: str
    from_date: str = Field(alias="fromDate")
    to_date: str = Field(alias="toDate")
    timezone: str
    events: list[dict[str, Any]]


class NextEventResponse(BaseModel):
    text: str
    status: Optional[str] = None
    event: Optional[dict[str, Any]] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _ymd(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and YMD_PATTERN.match(value):
        return value
    return None


def resolve_request_range(
    from_date: Optional[str],
    to_date: Optional[str],
    *,
    now: Optional[datetime] = None,
) -> APIDateRange:
    """Fill in missing bounds from the week around whichever bound is given.

    Values that are not ``YYYY-MM-DD`` are ignored; with neither bound the
    current week is used.
    """

    from_date, to_date = _ymd(from_date), _ymd(to_date)
    if from_date and to_date:
        return APIDateRange(from_date=from_date, to_date=to_date)
    if to_date:
        return APIDateRange(from_date=compute_week_range(to_date).from_date, to_date=to_date)
    if from_date:
        return APIDateRange(from_date=from_date, to_date=compute_week_range(from_date).to_date)
    return compute_week_range(now or _now())


@router.get("", summary="Proxy the upstream economic calendar")
async def get_calendar(
    from_date: Optional[str] = Query(None, alias="fromDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    importance: Optional[str] = None,
    country: Optional[str] = None,
    category: Optional[str] = None,
    client: httpx.AsyncClient = Depends(get_upstream_client),
):
    try:
        api_range = resolve_request_range(from_date, to_date)
        events = await fetch_calendar_events(client, api_range)
    except InvalidDateError:
        return JSONResponse(status_code=400, content={"error": "Invalid date provided"})
    except UpstreamError as exc:
        return JSONResponse(status_code=exc.status_code, content={"error": f"Upstream error: {exc.status_code}"})
    except InvalidUpstreamResponse:
        return JSONResponse(status_code=502, content={"error": "Invalid upstream response"})
    except Exception as exc:
        logger.exception("Calendar API error: {}", exc)
        return JSONResponse(status_code=500, content={"error": "Server error"})

    return filter_events(events, importance=importance, country=country, category=category)


@router.get("/periods", response_model=list[PeriodOption], summary="List named periods")
def list_periods() -> list[PeriodOption]:
    return [PeriodOption(**option) for option in PERIOD_OPTIONS]


@router.get("/timezones", response_model=TimezoneListResponse, summary="List supported timezones")
def list_timezones() -> TimezoneListResponse:
    settings = get_settings()
    now = _now()
    return TimezoneListResponse(
        default=settings.default_timezone,
        publisher=settings.publisher_timezone,
        timezones=[
            TimezoneOption(
                value=tz.value,
                label=tz.label,
                abbreviation=tz.abbreviation,
                offset=tz.offset,
                offset_minutes=compute_timezone_offset_minutes(tz.value, at=now),
            )
            for tz in TIMEZONES
        ],
    )


@router.get("/period/{token}", response_model=PeriodEventsResponse, summary="Events for a named period")
async def get_period_events(
    token: str,
    tz_name: Optional[str] = Query(None, alias="timezone"),
    importance: Optional[str] = None,
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> PeriodEventsResponse:
    period = parse_period(token)
    if period is None:
        raise HTTPException(status_code=404, detail=f"Unknown period: {token}")

    settings = get_settings()
    resolved_tz = resolve_timezone(tz_name, settings.default_timezone)
    api_range = resolve_period_for_api(period, _now(), resolved_tz)
    try:
        raw = await fetch_calendar_events(client, api_range)
    except UpstreamError as exc:
        raise HTTPException(status_code=exc.status_code, detail=f"Upstream error: {exc.status_code}")
    except UpstreamFailure as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    events = normalize_events(raw)
    events = filter_events_by_date_range(events, api_range.from_date, api_range.to_date)
    events = filter_events_by_importance(events, importance)
    return PeriodEventsResponse(
        period=period.value,
        from_date=api_range.from_date,
        to_date=api_range.to_date,
        timezone=resolved_tz,
        events=events,
    )


async def _day_events(client: httpx.AsyncClient, api_range: APIDateRange, importance: Optional[str]) -> list:
    try:
        raw = await fetch_calendar_events(client, api_range)
    except UpstreamFailure as exc:
        logger.warning("Failed to fetch events for {}: {}", api_range.from_date, exc)
        return []
    return filter_events_by_importance(normalize_events(raw), importance)


@router.get("/next-event", response_model=NextEventResponse, summary="Next upcoming event headline")
async def get_next_event(
    tz_name: Optional[str] = Query(None, alias="timezone"),
    importance: Optional[str] = None,
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> NextEventResponse:
    """Pick the next event after now in the publisher's timezone.

    When nothing in today's list is still upcoming, tomorrow's list (in the
    publisher's calendar) is fetched and used instead.
    """

    settings = get_settings()
    observer_tz = resolve_timezone(tz_name, settings.default_timezone)
    publisher_tz = settings.publisher_timezone
    now = _now()

    today = today_in(publisher_tz, now)
    events = await _day_events(client, compute_day_range(today), importance)
    fallback = None
    if needs_fallback(events, publisher_tz, now=now):
        fallback = await _day_events(client, compute_day_range(today + timedelta(days=1)), importance)

    headline = build_headline(events, observer_tz, publisher_tz, fallback_events=fallback, now=now)
    return NextEventResponse(
        text=headline.text,
        status=headline.status,
        event=dict(headline.event) if headline.event is not None else None,
    )
