"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import build_api_router
from app.config import AppSettings, get_settings
from app.core.logging import setup_logging
from app.core.telemetry import setup_telemetry
from app.db.database import Database
from app.schemas import HealthResponse
from app.services.cache import PortfolioCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI, db: Database):
    await db.create_all()
    yield
    await db.dispose()


def create_app(database: Database | None = None, settings: AppSettings | None = None) -> FastAPI:
    """Build the service around ``database``, defaulting to configured settings."""

    settings = settings or get_settings()
    database_instance = database or Database(settings.database_url)

    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, database_instance),
    )
    setup_telemetry(app, settings, engine=database_instance.engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["traceparent", "tracestate", "x-request-id"],
    )

    cache = PortfolioCache(database_instance)
    app.include_router(build_api_router(cache, settings))

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        """Return service readiness metadata."""

        return HealthResponse(status="ok", service=settings.telemetry_service_name, database_url=database_instance.url)

    logger.info("Configured %s with settings %s", settings.app_name, settings.dict_for_logging())
    return app


app = create_app()

__all__ = ["app", "create_app"]
