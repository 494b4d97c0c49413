"""Pydantic schemas for the portfolio upload and dashboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TradeSchema(_CamelModel):
    symbol: str = Field(..., examples=["AAPL"])
    shares: float
    price: float
    date: str = Field(..., examples=["2024-01-01"])


class HoldingSchema(_CamelModel):
    symbol: str
    shares_held: float
    avg_cost_basis: float | None = None
    current_price: float | None = None
    market_value: float | None = None
    unrealized_gain_loss: float | None = None
    unrealized_gain_loss_percent: float | None = Field(
        default=None, description="Null when the cost basis is zero."
    )


class PortfolioSummarySchema(_CamelModel):
    total_value: float | None = None
    total_gain_loss: float | None = None
    total_gain_loss_percent: float | None = None
    top_performer: HoldingSchema | None = None
    worst_performer: HoldingSchema | None = None
    unique_symbols: int


class PortfolioHistoryPointSchema(_CamelModel):
    date: str
    value: float | None = None


class PortfolioResponse(_CamelModel):
    trades: list[TradeSchema]
    holdings: list[HoldingSchema]
    summary: PortfolioSummarySchema
    portfolio_history: list[PortfolioHistoryPointSchema]

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "trades": [{"symbol": "AAPL", "shares": 10, "price": 100, "date": "2024-01-01"}],
                "holdings": [
                    {
                        "symbol": "AAPL",
                        "sharesHeld": 10,
                        "avgCostBasis": 100.0,
                        "currentPrice": 175.5,
                        "marketValue": 1755.0,
                        "unrealizedGainLoss": 755.0,
                        "unrealizedGainLossPercent": 75.5,
                    }
                ],
                "summary": {
                    "totalValue": 1755.0,
                    "totalGainLoss": 755.0,
                    "totalGainLossPercent": 75.5,
                    "topPerformer": None,
                    "worstPerformer": None,
                    "uniqueSymbols": 1,
                },
                "portfolioHistory": [{"date": "2024-01-01", "value": 1755.0}],
            }
        },
    )


class HoldingsPageSchema(_CamelModel):
    items: list[HoldingSchema]
    page: int
    page_size: int
    total_items: int
    total_pages: int
    start_index: int
    end_index: int


class AllocationSliceSchema(_CamelModel):
    name: str
    value: float | None = None
    percent: float | None = None
    color: str


class ChartPointSchema(_CamelModel):
    date: str
    value: float | None = None


class PortfolioChartsResponse(_CamelModel):
    allocation: list[AllocationSliceSchema]
    history: list[ChartPointSchema]


class UploadErrorDetail(BaseModel):
    message: str
    errors: list[str]


class HealthResponse(BaseModel):
    status: str
    service: str
    database_url: str | None


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
