"""Pipeline functions for deriving holdings and value history from trades."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .models import Holding, ParsedResult, PortfolioHistoryPoint, Trade
from .pricing import PriceOracle, PricingMode, build_price_oracle
from .summary import calculate_portfolio_summary
from .validation import validate_trade_rows

logger = logging.getLogger(__name__)


@dataclass
class _Position:
    """Running share count and cost for one symbol."""

    shares: float = 0.0
    total_cost: float = 0.0

    def apply(self, trade: Trade) -> None:
        self.shares += trade.shares
        self.total_cost += trade.shares * trade.price


def _ieee_divide(numerator: float, denominator: float) -> float:
    """Divide without raising, yielding ``inf``/``nan`` on a zero denominator."""

    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def _group_by_symbol(trades: Iterable[Trade]) -> Dict[str, _Position]:
    grouped: Dict[str, _Position] = {}
    for trade in trades:
        grouped.setdefault(trade.symbol, _Position()).apply(trade)
    return grouped


def calculate_holdings(trades: Sequence[Trade], oracle: PriceOracle) -> List[Holding]:
    """Reduce trades to one holding per symbol with a positive net share count.

    Holdings keep the order in which each symbol first appears in ``trades``.
    The oracle is queried exactly once per surviving symbol.
    """

    holdings: List[Holding] = []
    for symbol, position in _group_by_symbol(trades).items():
        if position.shares <= 0:
            continue
        avg_cost_basis = position.total_cost / position.shares
        current_price = oracle.price(symbol)
        market_value = position.shares * current_price
        cost_basis_total = position.shares * avg_cost_basis
        unrealized_gain_loss = market_value - cost_basis_total
        holdings.append(
            Holding(
                symbol=symbol,
                shares_held=position.shares,
                avg_cost_basis=avg_cost_basis,
                current_price=current_price,
                market_value=market_value,
                unrealized_gain_loss=unrealized_gain_loss,
                unrealized_gain_loss_percent=_ieee_divide(unrealized_gain_loss, cost_basis_total) * 100,
            )
        )
    return holdings


def parse_trade_date(raw: str) -> Optional[datetime]:
    """Parse an ISO-8601 trade date into a naive UTC ``datetime``.

    Looser forms pandas understands (``2024/01/05``, ``Jan 5 2024``) are
    accepted as a fallback; relative words such as ``now`` are not dates.
    """

    try:
        parsed = datetime.fromisoformat(raw)
    except (TypeError, ValueError):
        if not any(char.isdigit() for char in str(raw)):
            return None
        try:
            timestamp = pd.Timestamp(raw)
        except (TypeError, ValueError, OverflowError):
            return None
        if pd.isna(timestamp):
            return None
        parsed = timestamp.to_pydatetime()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _chronological_key(trade: Trade) -> Tuple[bool, datetime]:
    # Unparseable dates keep their relative order after every dated trade.
    parsed = parse_trade_date(trade.date)
    if parsed is None:
        return (True, datetime.min)
    return (False, parsed)


def generate_portfolio_history(
    trades: Sequence[Trade],
    oracle: PriceOracle,
) -> List[PortfolioHistoryPoint]:
    """Replay trades chronologically, emitting the portfolio value after each one."""

    ordered = sorted(trades, key=_chronological_key)
    positions: Dict[str, _Position] = {}
    history: List[PortfolioHistoryPoint] = []

    for trade in ordered:
        positions.setdefault(trade.symbol, _Position()).apply(trade)

        total_value = 0.0
        for symbol, position in positions.items():
            if position.shares > 0:
                total_value += position.shares * oracle.price(symbol)

        history.append(PortfolioHistoryPoint(date=trade.date, value=total_value))

    return history


def analyze_trades(
    trades: Sequence[Trade],
    oracle: PriceOracle | None = None,
    *,
    pricing_mode: PricingMode | str = PricingMode.CONSISTENT,
    rng: random.Random | None = None,
) -> ParsedResult:
    """Derive holdings, summary and history for one batch of validated trades."""

    if oracle is None:
        oracle = build_price_oracle(pricing_mode, rng=rng)

    holdings = calculate_holdings(trades, oracle)
    summary = calculate_portfolio_summary(holdings)
    history = generate_portfolio_history(trades, oracle)

    logger.info(
        "Analysed %d trade(s) into %d holding(s); total value %.2f",
        len(trades),
        len(holdings),
        summary.total_value,
    )
    return ParsedResult(
        trades=tuple(trades),
        holdings=tuple(holdings),
        summary=summary,
        portfolio_history=tuple(history),
    )


def analyze_rows(
    rows: Sequence[Mapping[str, Any]],
    oracle: PriceOracle | None = None,
    *,
    pricing_mode: PricingMode | str = PricingMode.CONSISTENT,
    rng: random.Random | None = None,
) -> ParsedResult:
    """Validate raw rows and run the full pipeline; nothing is derived on failure."""

    trades = validate_trade_rows(rows)
    return analyze_trades(trades, oracle, pricing_mode=pricing_mode, rng=rng)


__all__ = [
    "calculate_holdings",
    "generate_portfolio_history",
    "analyze_trades",
    "analyze_rows",
    "parse_trade_date",
]
