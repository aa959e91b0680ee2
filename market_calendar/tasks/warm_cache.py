"""Periodic refresh of cached upstream responses."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Optional

import httpx
from loguru import logger

from ..celery_app import celery_app
from ..config import get_settings
from ..dates import compute_day_range, compute_week_range, today_in
from ..upstream import UpstreamFailure, build_upstream_client, fetch_calendar_events, fetch_morning_report


async def _warm(endpoint: str, fetch: Awaitable[Any]) -> dict[str, str]:
    try:
        await fetch
    except UpstreamFailure as exc:
        logger.warning("Cache warm failed for {}: {}", endpoint, exc)
        return {"endpoint": endpoint, "status": "error", "error": str(exc)}
    return {"endpoint": endpoint, "status": "success"}


async def warm_cache(
    client: Optional[httpx.AsyncClient] = None,
    *,
    now: Optional[datetime] = None,
) -> list[dict[str, str]]:
    """Re-fetch today's, tomorrow's and this week's events plus the morning report.

    Each entry is fetched with ``refresh=True`` so the cache is overwritten.
    A failure for one entry is recorded and does not stop the others.
    """

    if client is None:
        async with build_upstream_client() as owned:
            return await warm_cache(owned, now=now)

    settings = get_settings()
    today = today_in(settings.publisher_timezone, now or datetime.now(timezone.utc))
    jobs = [
        ("calendar/today", fetch_calendar_events(client, compute_day_range(today), refresh=True)),
        (
            "calendar/tomorrow",
            fetch_calendar_events(client, compute_day_range(today + timedelta(days=1)), refresh=True),
        ),
        ("calendar/week", fetch_calendar_events(client, compute_week_range(today), refresh=True)),
        ("morning-report", fetch_morning_report(client, refresh=True)),
    ]
    results = []
    for endpoint, fetch in jobs:
        results.append(await _warm(endpoint, fetch))
    logger.info(
        "Cache warming finished: {}/{} succeeded",
        sum(1 for result in results if result["status"] == "success"),
        len(results),
    )
    return results


@celery_app.task(name="cache.warm")
def warm_cache_task() -> dict[str, Any]:
    """Celery entry point for the beat schedule."""

    timestamp = datetime.now(timezone.utc).isoformat()
    logger.info("Running cache warm at {}", timestamp)
    results = asyncio.run(warm_cache())
    return {"status": "ok", "timestamp": timestamp, "results": results}
