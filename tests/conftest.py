import os

import pytest

os.environ["REDIS_URL"] = ""
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["CALENDAR_API_BASE"] = "https://upstream.example.test"

from market_calendar.config import get_settings  # noqa: E402
from market_calendar.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
