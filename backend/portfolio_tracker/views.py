"""Presentation helpers: formatting, the holdings table query and chart data."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple

from .models import Holding, PortfolioHistoryPoint
from .pipeline import parse_trade_date

NOT_AVAILABLE = "N/A"
DEFAULT_PAGE_SIZE = 10

CHART_COLORS: Tuple[str, ...] = (
    "hsl(262.1 83.3% 57.8%)",
    "hsl(142.1 76.2% 36.3%)",
    "hsl(32.6 75.8% 59%)",
    "hsl(0 84.2% 60.2%)",
    "hsl(220 8.9% 46.1%)",
    "hsl(262.1 83.3% 67.8%)",
    "hsl(142.1 76.2% 46.3%)",
    "hsl(32.6 85% 69%)",
)


def format_currency(amount: float) -> str:
    """Format ``amount`` as US dollars, e.g. ``-$1,234.50``."""

    if not math.isfinite(amount):
        return NOT_AVAILABLE
    sign = "-" if amount < 0 and round(abs(amount), 2) != 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percent(percent: float) -> str:
    """Format a percentage with an explicit sign, e.g. ``+12.34%``."""

    if not math.isfinite(percent):
        return NOT_AVAILABLE
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.2f}%"


class HoldingSortField(str, Enum):
    SYMBOL = "symbol"
    SHARES_HELD = "sharesHeld"
    AVG_COST_BASIS = "avgCostBasis"
    CURRENT_PRICE = "currentPrice"
    MARKET_VALUE = "marketValue"
    UNREALIZED_GAIN_LOSS = "unrealizedGainLoss"
    UNREALIZED_GAIN_LOSS_PERCENT = "unrealizedGainLossPercent"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _numeric(value: float) -> float:
    # nan would break ordering; sort it below every real number.
    return -math.inf if math.isnan(value) else value


_SORT_KEYS: Dict[HoldingSortField, Callable[[Holding], object]] = {
    HoldingSortField.SYMBOL: lambda h: h.symbol.lower(),
    HoldingSortField.SHARES_HELD: lambda h: _numeric(h.shares_held),
    HoldingSortField.AVG_COST_BASIS: lambda h: _numeric(h.avg_cost_basis),
    HoldingSortField.CURRENT_PRICE: lambda h: _numeric(h.current_price),
    HoldingSortField.MARKET_VALUE: lambda h: _numeric(h.market_value),
    HoldingSortField.UNREALIZED_GAIN_LOSS: lambda h: _numeric(h.unrealized_gain_loss),
    HoldingSortField.UNREALIZED_GAIN_LOSS_PERCENT: lambda h: _numeric(h.unrealized_gain_loss_percent),
}


@dataclass(frozen=True)
class HoldingsPage:
    items: Tuple[Holding, ...]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def start_index(self) -> int:
        if not self.total_items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        return min(self.page * self.page_size, self.total_items)


def query_holdings(
    holdings: Sequence[Holding],
    *,
    search: str = "",
    sort_field: HoldingSortField | str = HoldingSortField.MARKET_VALUE,
    direction: SortDirection | str = SortDirection.DESC,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> HoldingsPage:
    """Filter by symbol substring, sort by one column, and cut out one page."""

    if page_size < 1:
        raise ValueError("page_size must be positive")

    needle = search.strip().lower()
    matches = [h for h in holdings if needle in h.symbol.lower()]
    matches.sort(
        key=_SORT_KEYS[HoldingSortField(sort_field)],
        reverse=SortDirection(direction) is SortDirection.DESC,
    )

    total_pages = math.ceil(len(matches) / page_size)
    current = min(max(page, 1), max(total_pages, 1))
    offset = (current - 1) * page_size
    return HoldingsPage(
        items=tuple(matches[offset : offset + page_size]),
        page=current,
        page_size=page_size,
        total_items=len(matches),
        total_pages=total_pages,
    )


@dataclass(frozen=True)
class AllocationSlice:
    name: str
    value: float
    percent: float
    color: str


def allocation_slices(holdings: Sequence[Holding]) -> List[AllocationSlice]:
    """Market-value share of each holding, for the allocation pie chart."""

    total = sum(h.market_value for h in holdings)
    slices = []
    for index, holding in enumerate(holdings):
        percent = holding.market_value / total * 100 if total else 0.0
        slices.append(
            AllocationSlice(
                name=holding.symbol,
                value=holding.market_value,
                percent=percent,
                color=CHART_COLORS[index % len(CHART_COLORS)],
            )
        )
    return slices


@dataclass(frozen=True)
class ChartPoint:
    date: str
    value: float


def _short_date_label(raw: str) -> str:
    parsed = parse_trade_date(raw)
    if parsed is None:
        return "Invalid Date"
    return f"{parsed.strftime('%b')} {parsed.day}"


def history_chart_points(history: Sequence[PortfolioHistoryPoint]) -> List[ChartPoint]:
    """Label history points as ``Jan 5`` for the value-over-time line chart."""

    return [ChartPoint(date=_short_date_label(point.date), value=point.value) for point in history]


__all__ = [
    "NOT_AVAILABLE",
    "DEFAULT_PAGE_SIZE",
    "CHART_COLORS",
    "format_currency",
    "format_percent",
    "HoldingSortField",
    "SortDirection",
    "HoldingsPage",
    "query_holdings",
    "AllocationSlice",
    "allocation_slices",
    "ChartPoint",
    "history_chart_points",
]
