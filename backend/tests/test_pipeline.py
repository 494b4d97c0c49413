import math
from datetime import datetime
import random

import pytest

from portfolio_tracker import Trade, analyze_rows, analyze_trades, calculate_holdings, generate_portfolio_history
from portfolio_tracker.errors import ValidationError
from portfolio_tracker.pipeline import parse_trade_date
from portfolio_tracker.pricing import MOCK_PRICES, PricingMode, StubPriceOracle


def test_same_symbol_rows_merge_into_one_holding(fixed_oracle):
    trades = [
        Trade(symbol="AAPL", shares=10, price=100, date="2024-01-01"),
        Trade(symbol="AAPL", shares=5, price=120, date="2024-02-01"),
    ]
    holdings = calculate_holdings(trades, fixed_oracle)
    assert len(holdings) == 1
    holding = holdings[0]
    assert holding.symbol == "AAPL"
    assert holding.shares_held == 15
    assert holding.avg_cost_basis == pytest.approx((10 * 100 + 5 * 120) / 15)
    assert holding.current_price == 150.0
    assert holding.market_value == holding.shares_held * holding.current_price
    assert holding.unrealized_gain_loss == pytest.approx(2250 - 1600)
    assert holding.unrealized_gain_loss_percent == pytest.approx(650 / 1600 * 100)


def test_holdings_keep_first_seen_order_and_query_oracle_once(sample_trades, fixed_oracle):
    holdings = calculate_holdings(sample_trades, fixed_oracle)
    assert [h.symbol for h in holdings] == ["AAPL", "MSFT", "XYZ"]
    assert fixed_oracle.calls == ["AAPL", "MSFT", "XYZ"]
    msft = holdings[1]
    assert msft.unrealized_gain_loss == pytest.approx(-100)
    assert msft.unrealized_gain_loss_percent == pytest.approx(-6.25)


def test_fully_sold_symbol_is_dropped(fixed_oracle):
    trades = [
        Trade(symbol="AAPL", shares=10, price=100, date="2024-01-01"),
        Trade(symbol="AAPL", shares=-10, price=100, date="2024-01-02"),
        Trade(symbol="MSFT", shares=-3, price=300, date="2024-01-02"),
        Trade(symbol="XYZ", shares=1, price=10, date="2024-01-03"),
    ]
    holdings = calculate_holdings(trades, fixed_oracle)
    assert [h.symbol for h in holdings] == ["XYZ"]
    assert all(h.shares_held > 0 for h in holdings)
    assert fixed_oracle.calls == ["XYZ"]


def test_zero_cost_basis_gives_non_finite_percent(fixed_oracle):
    holdings = calculate_holdings([Trade(symbol="XYZ", shares=4, price=0, date="2024-01-01")], fixed_oracle)
    assert holdings[0].avg_cost_basis == 0
    assert holdings[0].unrealized_gain_loss_percent == math.inf


def test_history_follows_chronological_replay(sample_trades, fixed_oracle):
    history = generate_portfolio_history(sample_trades, fixed_oracle)
    assert [p.date for p in history] == ["2024-01-01", "2024-01-02", "2024-01-03", "2024-02-01"]
    assert [p.value for p in history] == pytest.approx([1500, 1560, 3060, 3810])
    assert len(fixed_oracle.calls) == 1 + 2 + 3 + 3


def test_history_keeps_duplicate_dates_in_input_order(fixed_oracle):
    trades = [
        Trade(symbol="MSFT", shares=1, price=1, date="2024-05-01"),
        Trade(symbol="AAPL", shares=1, price=1, date="2024-04-01"),
        Trade(symbol="XYZ", shares=1, price=1, date="2024-05-01"),
    ]
    history = generate_portfolio_history(trades, fixed_oracle)
    assert [p.date for p in history] == ["2024-04-01", "2024-05-01", "2024-05-01"]
    assert [p.value for p in history] == pytest.approx([150, 450, 470])


def test_history_ignores_positions_sold_to_zero(fixed_oracle):
    trades = [
        Trade(symbol="AAPL", shares=10, price=100, date="2024-01-01"),
        Trade(symbol="AAPL", shares=-10, price=110, date="2024-01-02"),
    ]
    history = generate_portfolio_history(trades, fixed_oracle)
    assert [p.value for p in history] == [1500, 0]


def test_unparseable_dates_sort_after_dated_trades(fixed_oracle):
    trades = [
        Trade(symbol="XYZ", shares=1, price=1, date="sometime"),
        Trade(symbol="AAPL", shares=1, price=1, date="2024-01-01"),
    ]
    history = generate_portfolio_history(trades, fixed_oracle)
    assert [p.date for p in history] == ["2024-01-01", "sometime"]


def test_relative_date_words_are_not_dates(fixed_oracle):
    trades = [
        Trade(symbol="XYZ", shares=1, price=1, date="now"),
        Trade(symbol="AAPL", shares=1, price=1, date="2024-01-01"),
        Trade(symbol="MSFT", shares=1, price=1, date="today"),
    ]
    history = generate_portfolio_history(trades, fixed_oracle)
    assert [p.date for p in history] == ["2024-01-01", "now", "today"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-01-05", datetime(2024, 1, 5)),
        ("2024-01-05T10:30:00", datetime(2024, 1, 5, 10, 30)),
        ("2024-01-05T10:00:00Z", datetime(2024, 1, 5, 10)),
        ("2024-01-05T10:00:00+02:00", datetime(2024, 1, 5, 8)),
        ("2024/01/05", datetime(2024, 1, 5)),
        ("now", None),
        ("", None),
        ("2024-13-45", None),
    ],
)
def test_parse_trade_date(raw, expected):
    assert parse_trade_date(raw) == expected


def test_consistent_pricing_uses_one_quote_per_unknown_symbol():
    trades = [
        Trade(symbol="ZZZZ", shares=2, price=10, date="2024-01-01"),
        Trade(symbol="ZZZZ", shares=3, price=10, date="2024-01-02"),
    ]
    result = analyze_trades(trades, pricing_mode=PricingMode.CONSISTENT, rng=random.Random(7))
    quote = result.holdings[0].current_price
    assert 50 <= quote < 150
    assert [p.value for p in result.portfolio_history] == pytest.approx([2 * quote, 5 * quote])


def test_volatile_pricing_requotes_unknown_symbols():
    trades = [Trade(symbol="ZZZZ", shares=1, price=10, date=f"2024-01-{day:02d}") for day in range(1, 6)]
    result = analyze_trades(trades, pricing_mode="volatile", rng=random.Random(3))
    per_share = [p.value / (i + 1) for i, p in enumerate(result.portfolio_history)]
    assert len(set(per_share)) > 1


def test_known_symbols_price_from_table_in_both_modes():
    trades = [Trade(symbol="NVDA", shares=2, price=400, date="2024-01-01")]
    for mode in PricingMode:
        result = analyze_trades(trades, pricing_mode=mode)
        assert result.holdings[0].current_price == MOCK_PRICES["NVDA"]
        assert result.portfolio_history[0].value == 2 * MOCK_PRICES["NVDA"]


def test_analyze_rows_bundles_every_output(fixed_oracle):
    rows = [
        {"symbol": "AAPL", "shares": "10", "price": "100", "date": "2024-01-01"},
        {"symbol": "aapl", "shares": "5", "price": "120", "date": "2024-02-01"},
    ]
    result = analyze_rows(rows, fixed_oracle)
    assert len(result.trades) == 2
    assert len(result.portfolio_history) == len(result.trades)
    assert result.summary.unique_symbols == len(result.holdings) == 1
    assert result.summary.total_value == sum(h.market_value for h in result.holdings)


def test_analyze_rows_derives_nothing_from_partially_valid_input():
    oracle = StubPriceOracle()
    rows = [
        {"symbol": "AAPL", "shares": "10", "price": "100", "date": "2024-01-01"},
        {"symbol": "MSFT", "shares": "x", "price": "100", "date": "2024-01-01"},
    ]
    with pytest.raises(ValidationError) as excinfo:
        analyze_rows(rows, oracle)
    assert excinfo.value.errors == ["Row 2: Invalid number format for shares or price"]
