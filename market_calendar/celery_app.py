"""Celery application configuration."""

from __future__ import annotations

from celery import Celery
from loguru import logger

from .config import get_settings


celery_app = Celery("market_calendar")


def configure_celery() -> None:
    settings = get_settings()
    broker_url = settings.redis_url or "memory://"

    celery_app.conf.update(
        broker_url=broker_url,
        result_backend=settings.redis_url or "cache+memory://",
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
        timezone="UTC",
        beat_schedule={
            "warm-cache": {
                "task": "cache.warm",
                "schedule": float(settings.warm_cache_interval_seconds),
            },
        },
    )

    celery_app.autodiscover_tasks(["market_calendar.tasks"], related_name="warm_cache", force=True)
    logger.info("Celery configured with broker {}", broker_url)


configure_celery()


@celery_app.task(name="health.ping")
def ping() -> str:
    """Simple ping task for monitoring."""

    return "pong"
