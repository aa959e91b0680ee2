"""API route registrations."""

from fastapi import APIRouter

from . import calendar, cron, health, morning_report, pages


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router, prefix="/health", tags=["health"])
    router.include_router(calendar.router, prefix="/api/calendar", tags=["calendar"])
    router.include_router(
        morning_report.router,
        prefix="/api/morning-report",
        tags=["morning-report"],
    )
    router.include_router(cron.router, prefix="/api/cron", tags=["cron"])
    router.include_router(pages.router, tags=["pages"])
    return router


__all__ = ["get_api_router"]
