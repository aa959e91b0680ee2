"""Shared test helpers and fake upstream responses for the test suite."""

from typing import Any, Callable, Optional

import httpx

from market_calendar.upstream import build_upstream_client


SAMPLE_EVENTS: list[dict[str, Any]] = [
    {
        "date": "2024-08-15T12:30:00Z",
        "event": "Retail Sales",
        "country": "USA",
        "importance": "high",
        "category": "consumer",
        "source": {"name": "Census Bureau", "url": "https://www.census.gov"},
        "tags": ["retail", "consumer"],
    },
    {
        "date": "2024-08-15T14:00:00Z",
        "event": "Business Inventories",
        "country": "USA",
        "importance": "low",
        "category": "business",
        "source": {"name": "Census Bureau", "url": "https://www.census.gov"},
    },
    {
        "date": "2024-08-15T08:00:00Z",
        "event": "GDP Flash",
        "country": "UK",
        "importance": "medium",
        "category": "growth",
        "source": {"name": "ONS", "url": "https://www.ons.gov.uk"},
    },
]


class FakeUpstream:
    """Records upstream requests and answers them from canned payloads."""

    def __init__(
        self,
        calendar: Any = None,
        morning_report: Any = None,
        status_code: int = 200,
        calendar_by_date: Optional[dict[str, Any]] = None,
        raise_error: Optional[Exception] = None,
    ):
        self.calendar = SAMPLE_EVENTS if calendar is None else calendar
        self.morning_report = morning_report if morning_report is not None else {"summary": "Markets steady."}
        self.status_code = status_code
        self.calendar_by_date = calendar_by_date or {}
        self.raise_error = raise_error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if self.status_code >= 400:
            return httpx.Response(self.status_code, text="upstream failure")
        if request.url.path == "/calendar":
            from_date = request.url.params.get("fromDate")
            payload = self.calendar_by_date.get(from_date, self.calendar)
            return httpx.Response(200, json=payload)
        if request.url.path == "/morning_report":
            return httpx.Response(200, json=self.morning_report)
        return httpx.Response(404, json={"error": "not found"})

    def params(self, index: int = 0) -> dict[str, str]:
        return dict(self.requests[index].url.params)


def build_mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return build_upstream_client(transport=httpx.MockTransport(handler))


def override_upstream_client(handler: Callable[[httpx.Request], httpx.Response]):
    """Helper to create an upstream client override for FastAPI dependency injection."""
    async def _override():
        async with build_mock_client(handler) as client:
            yield client
    return _override
