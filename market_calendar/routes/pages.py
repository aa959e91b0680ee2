"""Server-rendered calendar pages."""

from __future__ import annotations

import asyncio
from datetime import date, datetime, time, timezone
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from loguru import logger

from ..config import get_settings
from ..dates import InvalidDateError, calendar_date, compute_day_range, compute_week_range, today_in
from ..events import normalize_events, sort_events_by_date
from ..navigation import canonical_week_url, link_for_week_offset
from ..rendering import render_error_page, render_today_page, render_week_page
from ..timezones import format_date_et
from ..upstream import (
    UpstreamFailure,
    extract_commentary_url,
    fetch_calendar_events,
    fetch_morning_report,
    get_upstream_client,
)


router = APIRouter()

PAGE_HEADERS = {"X-Content-Type-Options": "nosniff"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _error_page() -> HTMLResponse:
    return HTMLResponse(render_error_page(), status_code=500)


@router.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse(url="/calendar/today")


async def _render_week(reference: date, client: httpx.AsyncClient) -> HTMLResponse:
    settings = get_settings()
    try:
        api_range = compute_week_range(reference)
        try:
            raw = await fetch_calendar_events(
                client, api_range, timeout=settings.page_timeout_seconds
            )
        except UpstreamFailure as exc:
            logger.warning("Week page fetch failed for {}: {}", api_range.from_date, exc)
            raw = []
        events = sort_events_by_date(normalize_events(raw))
        html = render_week_page(
            events=events,
            from_date=date.fromisoformat(api_range.from_date),
            to_date=date.fromisoformat(api_range.to_date),
            canonical=canonical_week_url(settings.site_url, api_range.from_date),
            prev_link=link_for_week_offset(api_range.from_date, -7),
            next_link=link_for_week_offset(api_range.from_date, 7),
        )
    except Exception as exc:
        logger.exception("Week page render failed: {}", exc)
        return _error_page()
    return HTMLResponse(html, headers=PAGE_HEADERS)


@router.get("/calendar/week", response_class=HTMLResponse, summary="Current week page")
async def current_week_page(client: httpx.AsyncClient = Depends(get_upstream_client)):
    settings = get_settings()
    return await _render_week(today_in(settings.publisher_timezone, _now()), client)


@router.get("/calendar/week/{start}", response_class=HTMLResponse, summary="Week page")
async def week_page(start: str, client: httpx.AsyncClient = Depends(get_upstream_client)):
    try:
        reference = calendar_date(start)
    except InvalidDateError:
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid start date format. Use YYYY-MM-DD."},
        )
    return await _render_week(reference, client)


@router.get("/calendar/today", response_class=HTMLResponse, summary="Daily market briefing")
async def today_page(client: httpx.AsyncClient = Depends(get_upstream_client)):
    settings = get_settings()
    try:
        today = today_in(settings.publisher_timezone, _now())
        calendar_result, report_result = await asyncio.gather(
            fetch_calendar_events(
                client, compute_day_range(today), timeout=settings.page_timeout_seconds
            ),
            fetch_morning_report(client, timeout=settings.page_timeout_seconds),
            return_exceptions=True,
        )

        events: list = []
        if isinstance(calendar_result, BaseException):
            logger.warning("Calendar fetch failed for today page: {}", calendar_result)
        else:
            events = sort_events_by_date(normalize_events(calendar_result))

        report: Optional[dict] = None
        if isinstance(report_result, BaseException):
            logger.warning("Morning report fetch failed for today page: {}", report_result)
        else:
            report = report_result

        summary = report.get("summary") if report else None
        html = render_today_page(
            events=events,
            today_label=format_date_et(datetime.combine(today, time(12), tzinfo=timezone.utc)),
            canonical=f"{settings.site_url.rstrip('/')}/calendar/today",
            summary=summary if isinstance(summary, str) else None,
            commentary_url=extract_commentary_url(report),
        )
    except Exception as exc:
        logger.exception("Daily calendar page failed: {}", exc)
        return _error_page()
    return HTMLResponse(html, headers=PAGE_HEADERS)
