"""Health and readiness endpoints."""

from fastapi import APIRouter

from ..cache import get_redis_client
from ..celery_app import ping


router = APIRouter()


@router.get("/", summary="Health check")
def health() -> dict[str, str]:
    """Return basic health signal."""

    return {"status": "ok"}


@router.get("/celery", summary="Celery health check")
def celery_health() -> dict[str, str]:
    """Dispatch a ping task and return quickly."""

    try:
        response = ping.delay().get(timeout=2)
    except Exception:
        return {"status": "unavailable"}
    return {"status": response}


@router.get("/cache", summary="Cache health check")
async def cache_health() -> dict[str, str]:
    """Report whether the upstream response cache is reachable."""

    client = get_redis_client()
    if client is None:
        return {"status": "disabled"}
    try:
        await client.ping()
    except Exception:  # pragma: no cover - unexpected connectivity failure
        return {"status": "unavailable"}
    return {"status": "ok"}
