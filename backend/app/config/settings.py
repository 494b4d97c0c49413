"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_tracker.pricing import PricingMode
from portfolio_tracker.views import DEFAULT_PAGE_SIZE

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./portfolio_tracker.db"


class AppSettings(BaseSettings):
    """Configuration options for the Portfolio Tracker service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="Portfolio Tracker")

    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        description="SQLAlchemy async database URL holding the cached result.",
    )

    pricing_mode: PricingMode = Field(
        default=PricingMode.CONSISTENT,
        description="'consistent' pins one stub price per symbol per upload; "
        "'volatile' re-quotes unknown symbols on every lookup.",
    )
    price_seed: int | None = Field(
        default=None,
        description="Seed for stub prices of unknown symbols; unset means unseeded.",
    )
    holdings_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=500)
    max_upload_bytes: int = Field(default=5 * 1024 * 1024, gt=0)

    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="portfolio-tracker")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"database_url"}
        return {k: ("***" if k in hidden else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_DATABASE_URL",
    "get_settings",
]
