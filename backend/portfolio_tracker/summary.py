"""Portfolio-wide totals derived from holdings."""
from __future__ import annotations

from typing import Optional, Sequence

from .models import Holding, PortfolioSummary


def calculate_portfolio_summary(holdings: Sequence[Holding]) -> PortfolioSummary:
    """Aggregate holdings into totals and pick the best and worst performers.

    Performers are chosen by ``unrealized_gain_loss_percent`` with strict
    comparisons, so the earliest holding wins a tie.
    """

    total_value = sum(holding.market_value for holding in holdings)
    total_gain_loss = sum(holding.unrealized_gain_loss for holding in holdings)
    total_cost = total_value - total_gain_loss
    if total_cost > 0:
        total_gain_loss_percent = total_gain_loss / total_cost * 100
    else:
        total_gain_loss_percent = 0.0

    top_performer: Optional[Holding] = holdings[0] if holdings else None
    worst_performer: Optional[Holding] = top_performer
    for holding in holdings:
        if holding.unrealized_gain_loss_percent > top_performer.unrealized_gain_loss_percent:
            top_performer = holding
        if holding.unrealized_gain_loss_percent < worst_performer.unrealized_gain_loss_percent:
            worst_performer = holding

    return PortfolioSummary(
        total_value=float(total_value),
        total_gain_loss=float(total_gain_loss),
        total_gain_loss_percent=float(total_gain_loss_percent),
        top_performer=top_performer,
        worst_performer=worst_performer,
        unique_symbols=len(holdings),
    )


__all__ = ["calculate_portfolio_summary"]
