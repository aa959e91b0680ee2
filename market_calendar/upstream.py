"""Client for the upstream economic events API."""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional

import httpx
from loguru import logger

from .cache import cache_key, get_cache_json, set_cache_json
from .config import Settings, get_settings
from .dates import APIDateRange


class UpstreamFailure(Exception):
    """Base class for upstream API failures."""


class UpstreamError(UpstreamFailure):
    def __init__(self, status_code: int):
        super().__init__(f"Upstream error: {status_code}")
        self.status_code = status_code


class InvalidUpstreamResponse(UpstreamFailure):
    def __init__(self, message: str = "Invalid upstream response"):
        super().__init__(message)


class UpstreamUnavailable(UpstreamFailure):
    pass


def build_upstream_client(
    settings: Optional[Settings] = None,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    settings = settings or get_settings()
    return httpx.AsyncClient(
        base_url=settings.api_base,
        timeout=timeout or settings.upstream_timeout_seconds,
        headers={
            "accept": "application/json",
            "user-agent": settings.user_agent,
            "referer": settings.referer,
        },
        transport=transport,
    )


async def get_upstream_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI dependency yielding a short-lived upstream client."""

    async with build_upstream_client() as client:
        yield client


async def _get_json(
    client: httpx.AsyncClient,
    path: str,
    params: Optional[dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Any:
    extra: dict[str, Any] = {"timeout": timeout} if timeout else {}
    try:
        response = await client.get(path, params=params, **extra)
    except httpx.HTTPError as exc:
        logger.warning("Upstream request to {} failed: {}", path, exc)
        raise UpstreamUnavailable(str(exc) or exc.__class__.__name__) from exc
    if response.status_code >= 400:
        logger.warning("Upstream {} status={} body={}", path, response.status_code, response.text[:200])
        raise UpstreamError(response.status_code)
    try:
        return response.json()
    except ValueError as exc:
        raise InvalidUpstreamResponse() from exc


async def fetch_calendar_events(
    client: httpx.AsyncClient,
    api_range: APIDateRange,
    *,
    refresh: bool = False,
    timeout: Optional[float] = None,
) -> list[dict[str, Any]]:
    """Raw events between ``api_range.from_date`` and ``api_range.to_date``."""

    settings = get_settings()
    key = cache_key("calendar", api_range.from_date, api_range.to_date)
    if not refresh:
        cached = await get_cache_json(key)
        if isinstance(cached, list):
            return cached

    payload = await _get_json(client, "/calendar", params=api_range.as_params(), timeout=timeout)
    if not isinstance(payload, list):
        raise InvalidUpstreamResponse()
    await set_cache_json(key, payload, settings.calendar_cache_ttl_seconds)
    return payload


async def fetch_morning_report(
    client: httpx.AsyncClient,
    *,
    refresh: bool = False,
    timeout: Optional[float] = None,
) -> dict[str, Any]:
    settings = get_settings()
    key = cache_key("morning_report")
    if not refresh:
        cached = await get_cache_json(key)
        if isinstance(cached, dict):
            return cached

    payload = await _get_json(client, "/morning_report", timeout=timeout)
    if not isinstance(payload, dict):
        raise InvalidUpstreamResponse("Invalid morning report response")
    await set_cache_json(key, payload, settings.morning_report_cache_ttl_seconds)
    return payload


def extract_commentary_url(report: Optional[dict[str, Any]]) -> Optional[str]:
    """The MP3 URL carried in ``brief``, if there is one."""

    if not report:
        return None
    brief = report.get("brief")
    if isinstance(brief, str) and ".mp3" in brief.lower():
        return brief
    return None
