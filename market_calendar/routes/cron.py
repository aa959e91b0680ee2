"""Scheduled job endpoints protected by a shared secret."""

from __future__ import annotations

from datetime import datetime, timezone
import secrets
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from ..config import get_settings
from ..tasks.warm_cache import warm_cache
from ..upstream import get_upstream_client


router = APIRouter()
bearer_scheme = HTTPBearer(auto_error=False)


def _authorized(credentials: Optional[HTTPAuthorizationCredentials]) -> bool:
    secret = get_settings().cron_secret
    if not secret:
        return True
    if credentials is None:
        return False
    return secrets.compare_digest(credentials.credentials, secret)


@router.get("/warm-cache", summary="Refresh cached upstream responses")
async def warm_cache_endpoint(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    client: httpx.AsyncClient = Depends(get_upstream_client),
):
    if not _authorized(credentials):
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    try:
        results = await warm_cache(client)
    except Exception as exc:
        logger.exception("Cache warming failed: {}", exc)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Cache warming failed", "message": str(exc)},
        )

    return {
        "success": True,
        "message": "Cache warming completed",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "results": results,
    }
