"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import AnyUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the calendar service."""

    _env_paths = [
        ".env.dev",
        ".env",
        "../.env.dev",
        "../.env",
    ]

    model_config = SettingsConfigDict(
        env_file=_env_paths,
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # App metadata
    api_title: str = "Market Squawk Calendar"
    api_version: str = "1.0.0"

    # Upstream events API
    calendar_api_base: AnyUrl = Field(
        default="https://data-dev.pricesquawk.com",
        description="Base URL of the upstream economic events API",
    )
    site_url: str = "https://marketsquawk.ai"
    user_agent: str = "Market-Squawk-Calendar/1.0 (+https://marketsquawk.ai)"
    referer: str = "https://marketsquawk.ai"
    upstream_timeout_seconds: float = Field(default=10.0, gt=0)
    page_timeout_seconds: float = Field(default=8.0, gt=0)

    # Timezones
    publisher_timezone: str = "America/New_York"
    default_timezone: str = "UTC"

    # Upstream response cache (disabled without a Redis URL)
    redis_url: Optional[str] = Field(default=None, description="Redis connection URL")
    calendar_cache_ttl_seconds: int = 600
    morning_report_cache_ttl_seconds: int = 1800

    # Cron / background jobs
    cron_secret: Optional[str] = None
    warm_cache_interval_seconds: int = Field(default=600, ge=60)

    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @model_validator(mode="before")
    @classmethod
    def _coerce_empty_strings(cls, values):
        for key in ("redis_url", "cron_secret"):
            if values.get(key) == "":
                values[key] = None
        return values

    @field_validator("publisher_timezone", "default_timezone", mode="before")
    @classmethod
    def _trim_timezone(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def api_base(self) -> str:
        return str(self.calendar_api_base).rstrip("/")

    @property
    def cache_enabled(self) -> bool:
        return bool(self.redis_url)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    return Settings()
