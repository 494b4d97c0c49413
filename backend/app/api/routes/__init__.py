"""Route registration helpers."""

from __future__ import annotations

from fastapi import APIRouter

from app.config import AppSettings
from app.services.cache import PortfolioCache

from .portfolio import get_portfolio_router


def build_api_router(cache: PortfolioCache, settings: AppSettings) -> APIRouter:
    api_router = APIRouter()
    api_router.include_router(get_portfolio_router(cache, settings))
    return api_router


__all__ = ["build_api_router"]
