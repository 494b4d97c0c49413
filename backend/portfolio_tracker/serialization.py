"""Convert pipeline results to and from their JSON wire shape.

The payload uses the camelCase keys the dashboard consumes. JSON has no
representation for ``nan`` or infinities, so non-finite numbers are written as
``null`` and read back as ``nan``.
"""
from __future__ import annotations

import json
import math
from typing import Any, Dict, Mapping, Optional

from .errors import PersistenceDecodeError
from .models import Holding, ParsedResult, PortfolioHistoryPoint, PortfolioSummary, Trade

_HOLDING_FIELDS = {
    "symbol": "symbol",
    "shares_held": "sharesHeld",
    "avg_cost_basis": "avgCostBasis",
    "current_price": "currentPrice",
    "market_value": "marketValue",
    "unrealized_gain_loss": "unrealizedGainLoss",
    "unrealized_gain_loss_percent": "unrealizedGainLossPercent",
}


def _number_out(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _number_in(value: Any) -> float:
    if value is None:
        return math.nan
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a number, got {value!r}")
    return float(value)


def _string_in(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Expected a string, got {value!r}")
    return value


def trade_to_payload(trade: Trade) -> Dict[str, Any]:
    return {
        "symbol": trade.symbol,
        "shares": trade.shares,
        "price": trade.price,
        "date": trade.date,
    }


def holding_to_payload(holding: Holding) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for attribute, key in _HOLDING_FIELDS.items():
        value = getattr(holding, attribute)
        payload[key] = value if attribute == "symbol" else _number_out(value)
    return payload


def summary_to_payload(summary: PortfolioSummary) -> Dict[str, Any]:
    return {
        "totalValue": _number_out(summary.total_value),
        "totalGainLoss": _number_out(summary.total_gain_loss),
        "totalGainLossPercent": _number_out(summary.total_gain_loss_percent),
        "topPerformer": holding_to_payload(summary.top_performer) if summary.top_performer else None,
        "worstPerformer": holding_to_payload(summary.worst_performer) if summary.worst_performer else None,
        "uniqueSymbols": summary.unique_symbols,
    }


def result_to_payload(result: ParsedResult) -> Dict[str, Any]:
    """Return the JSON-compatible bundle for ``result``."""

    return {
        "trades": [trade_to_payload(trade) for trade in result.trades],
        "holdings": [holding_to_payload(holding) for holding in result.holdings],
        "summary": summary_to_payload(result.summary),
        "portfolioHistory": [
            {"date": point.date, "value": _number_out(point.value)}
            for point in result.portfolio_history
        ],
    }


def _holding_from_payload(payload: Mapping[str, Any]) -> Holding:
    values: Dict[str, Any] = {}
    for attribute, key in _HOLDING_FIELDS.items():
        raw = payload[key]
        values[attribute] = _string_in(raw) if attribute == "symbol" else _number_in(raw)
    return Holding(**values)


def _optional_holding(payload: Any) -> Optional[Holding]:
    if payload is None:
        return None
    return _holding_from_payload(payload)


def result_from_payload(payload: Any) -> ParsedResult:
    """Restore a ``ParsedResult`` exactly as stored, without recomputing anything."""

    try:
        trades = tuple(
            Trade(
                symbol=_string_in(item["symbol"]),
                shares=_number_in(item["shares"]),
                price=_number_in(item["price"]),
                date=_string_in(item["date"]),
            )
            for item in payload["trades"]
        )
        holdings = tuple(_holding_from_payload(item) for item in payload["holdings"])
        raw_summary = payload["summary"]
        unique_symbols = raw_summary["uniqueSymbols"]
        if isinstance(unique_symbols, bool) or not isinstance(unique_symbols, int):
            raise TypeError(f"Expected an integer, got {unique_symbols!r}")
        summary = PortfolioSummary(
            total_value=_number_in(raw_summary["totalValue"]),
            total_gain_loss=_number_in(raw_summary["totalGainLoss"]),
            total_gain_loss_percent=_number_in(raw_summary["totalGainLossPercent"]),
            top_performer=_optional_holding(raw_summary["topPerformer"]),
            worst_performer=_optional_holding(raw_summary["worstPerformer"]),
            unique_symbols=unique_symbols,
        )
        history = tuple(
            PortfolioHistoryPoint(date=_string_in(item["date"]), value=_number_in(item["value"]))
            for item in payload["portfolioHistory"]
        )
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        raise PersistenceDecodeError(f"Malformed portfolio payload: {exc}") from exc

    return ParsedResult(
        trades=trades,
        holdings=holdings,
        summary=summary,
        portfolio_history=history,
    )


def dumps_result(result: ParsedResult) -> str:
    return json.dumps(result_to_payload(result), allow_nan=False)


def loads_result(text: str) -> ParsedResult:
    try:
        payload = json.loads(text)
    except (TypeError, ValueError, RecursionError) as exc:
        raise PersistenceDecodeError(f"Cached portfolio is not valid JSON: {exc}") from exc
    return result_from_payload(payload)


__all__ = [
    "result_to_payload",
    "result_from_payload",
    "holding_to_payload",
    "dumps_result",
    "loads_result",
]
