"""Pydantic schema exports for API payloads."""

from .portfolio import (
    AllocationSliceSchema,
    ChartPointSchema,
    HealthResponse,
    HoldingSchema,
    HoldingsPageSchema,
    PortfolioChartsResponse,
    PortfolioHistoryPointSchema,
    PortfolioResponse,
    PortfolioSummarySchema,
    TradeSchema,
    UploadErrorDetail,
)

__all__ = [
    "TradeSchema",
    "HoldingSchema",
    "PortfolioSummarySchema",
    "PortfolioHistoryPointSchema",
    "PortfolioResponse",
    "HoldingsPageSchema",
    "AllocationSliceSchema",
    "ChartPointSchema",
    "PortfolioChartsResponse",
    "UploadErrorDetail",
    "HealthResponse",
]
