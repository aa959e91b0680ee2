"""Celery task modules."""

from . import warm_cache  # noqa: F401

__all__ = ["warm_cache"]
