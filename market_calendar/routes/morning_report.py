"""Morning market report proxy."""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from loguru import logger

from ..upstream import (
    UpstreamError,
    UpstreamFailure,
    extract_commentary_url,
    fetch_morning_report,
    get_upstream_client,
)


router = APIRouter()


@router.get("", summary="Latest morning report")
async def get_morning_report(client: httpx.AsyncClient = Depends(get_upstream_client)):
    """Return the upstream report with ``commentary_url`` added.

    Upstream HTTP errors keep their status; other failures degrade to an
    empty report so the page can still render.
    """

    try:
        report = await fetch_morning_report(client)
    except UpstreamError as exc:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": f"Upstream error: {exc.status_code}", "summary": None, "brief": None},
        )
    except UpstreamFailure as exc:
        logger.warning("Morning report unavailable: {}", exc)
        return {"summary": None, "brief": None, "error": "Failed to fetch morning report"}

    return {**report, "commentary_url": extract_commentary_url(report)}
