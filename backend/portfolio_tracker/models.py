"""Domain models used by the portfolio analytics pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Trade:
    """A validated buy (positive shares) or sell (negative shares) record."""

    symbol: str
    shares: float
    price: float
    date: str


@dataclass(frozen=True)
class Holding:
    """Current net position in one symbol derived from all of its trades."""

    symbol: str
    shares_held: float
    avg_cost_basis: float
    current_price: float
    market_value: float
    unrealized_gain_loss: float
    unrealized_gain_loss_percent: float


@dataclass(frozen=True)
class PortfolioSummary:
    """Portfolio-wide totals plus the best and worst performing holdings."""

    total_value: float
    total_gain_loss: float
    total_gain_loss_percent: float
    top_performer: Optional[Holding]
    worst_performer: Optional[Holding]
    unique_symbols: int


@dataclass(frozen=True)
class PortfolioHistoryPoint:
    """Total portfolio value after replaying the trade dated ``date``."""

    date: str
    value: float


@dataclass(frozen=True)
class ParsedResult:
    """Everything derived from a single uploaded trade file."""

    trades: Tuple[Trade, ...]
    holdings: Tuple[Holding, ...]
    summary: PortfolioSummary
    portfolio_history: Tuple[PortfolioHistoryPoint, ...]


__all__ = [
    "Trade",
    "Holding",
    "PortfolioSummary",
    "PortfolioHistoryPoint",
    "ParsedResult",
]
