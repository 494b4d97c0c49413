import math

import pytest

from portfolio_tracker.models import Holding
from portfolio_tracker.summary import calculate_portfolio_summary


def _holding(symbol: str, shares: float, cost: float, price: float) -> Holding:
    market_value = shares * price
    gain = market_value - shares * cost
    return Holding(
        symbol=symbol,
        shares_held=shares,
        avg_cost_basis=cost,
        current_price=price,
        market_value=market_value,
        unrealized_gain_loss=gain,
        unrealized_gain_loss_percent=gain / (shares * cost) * 100 if cost else math.inf,
    )


def test_empty_holdings_give_zeroed_summary():
    summary = calculate_portfolio_summary([])
    assert summary.total_value == 0
    assert summary.total_gain_loss == 0
    assert summary.total_gain_loss_percent == 0
    assert summary.top_performer is None
    assert summary.worst_performer is None
    assert summary.unique_symbols == 0


def test_totals_and_performers():
    holdings = [
        _holding("AAPL", 10, 100, 150),  # +50%
        _holding("MSFT", 5, 320, 300),  # -6.25%
        _holding("XYZ", 3, 10, 20),  # +100%
    ]
    summary = calculate_portfolio_summary(holdings)
    assert summary.total_value == sum(h.market_value for h in holdings)
    assert summary.total_gain_loss == pytest.approx(500 - 100 + 30)
    assert summary.total_gain_loss_percent == pytest.approx(430 / (1000 + 1600 + 30) * 100)
    assert summary.top_performer == holdings[2]
    assert summary.worst_performer == holdings[1]
    assert summary.unique_symbols == 3


def test_ties_keep_the_earliest_holding():
    first = _holding("AAA", 1, 100, 110)
    second = _holding("BBB", 2, 100, 110)
    summary = calculate_portfolio_summary([first, second])
    assert summary.top_performer is first
    assert summary.worst_performer is first


def test_zero_percent_first_holding_still_wins_over_losers():
    flat = _holding("FLAT", 1, 100, 100)
    loser = _holding("DOWN", 1, 100, 90)
    summary = calculate_portfolio_summary([flat, loser])
    assert summary.top_performer is flat
    assert summary.worst_performer is loser


def test_percent_is_zero_when_total_cost_is_not_positive():
    free = _holding("FREE", 2, 0, 20)
    summary = calculate_portfolio_summary([free])
    assert summary.total_value == 40
    assert summary.total_gain_loss == 40
    assert summary.total_gain_loss_percent == 0
    assert summary.top_performer is free
