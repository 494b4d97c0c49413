from __future__ import annotations

from decimal import Decimal

import numpy as np
import pytest

from portfolio_tracker.errors import ValidationError
from portfolio_tracker.models import Trade
from portfolio_tracker.validation import parse_number, validate_trade_rows


def test_rows_become_trades_with_upper_case_symbols():
    trades = validate_trade_rows(
        [
            {"symbol": "AAPL", "shares": "10", "price": "100", "date": "2024-01-01"},
            {"symbol": "aapl", "shares": "5", "price": "120", "date": "2024-02-01", "note": "extra"},
        ]
    )
    assert trades == [
        Trade(symbol="AAPL", shares=10.0, price=100.0, date="2024-01-01"),
        Trade(symbol="AAPL", shares=5.0, price=120.0, date="2024-02-01"),
    ]


def test_numeric_cells_and_negative_shares_are_accepted():
    trades = validate_trade_rows([{"symbol": "tsla", "shares": -2, "price": 250.5, "date": "2024-03-01"}])
    assert trades[0].shares == -2.0
    assert trades[0].price == 250.5


def test_date_is_passed_through_unmodified():
    trades = validate_trade_rows([{"symbol": "SPY", "shares": "1", "price": "1", "date": "2024-01-05T10:00:00Z"}])
    assert trades[0].date == "2024-01-05T10:00:00Z"


def test_missing_symbol_names_row_one():
    with pytest.raises(ValidationError) as excinfo:
        validate_trade_rows([{"symbol": "", "shares": "5", "price": "10", "date": "2024-01-01"}])
    assert str(excinfo.value) == "Row 1: Missing required fields (symbol, shares, price, date)"


def test_every_invalid_row_is_reported_and_no_trades_returned():
    rows = [
        {"symbol": "AAPL", "shares": "10", "price": "100", "date": "2024-01-01"},
        {"symbol": "MSFT", "shares": "ten", "price": "100", "date": "2024-01-02"},
        {"symbol": "GOOGL", "price": "100", "date": "2024-01-03"},
        {"symbol": "NVDA", "shares": "1", "price": "1e", "date": "2024-01-04"},
    ]
    with pytest.raises(ValidationError) as excinfo:
        validate_trade_rows(rows)
    assert excinfo.value.errors == [
        "Row 2: Invalid number format for shares or price",
        "Row 3: Missing required fields (symbol, shares, price, date)",
        "Row 4: Invalid number format for shares or price",
    ]
    assert str(excinfo.value).count("\n") == 2


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_blank_values_count_as_missing(blank):
    with pytest.raises(ValidationError) as excinfo:
        validate_trade_rows([{"symbol": "AAPL", "shares": "1", "price": blank, "date": "2024-01-01"}])
    assert "Missing required fields" in excinfo.value.errors[0]


def test_zero_shares_string_is_present_not_missing():
    trades = validate_trade_rows([{"symbol": "AAPL", "shares": "0", "price": "10", "date": "2024-01-01"}])
    assert trades[0].shares == 0.0


def test_empty_input_yields_no_trades():
    assert validate_trade_rows([]) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("10", 10.0),
        (" 2.5 ", 2.5),
        ("-3", -3.0),
        ("1e3", 1000.0),
        (7, 7.0),
        (1.25, 1.25),
        ("10abc", None),
        ("nan", None),
        ("inf", None),
        (float("inf"), None),
        (True, None),
        (None, None),
        ([], None),
        (10**400, None),
        (Decimal("2.5"), 2.5),
        (np.int64(4), 4.0),
        (np.float64(0.5), 0.5),
    ],
)
def test_parse_number_is_strict_and_total(raw, expected):
    assert parse_number(raw) == expected


def test_integer_too_large_for_a_float_is_a_row_diagnostic():
    with pytest.raises(ValidationError) as excinfo:
        validate_trade_rows([{"symbol": "A", "shares": 10**400, "price": "1", "date": "2024-01-01"}])
    assert excinfo.value.errors == ["Row 1: Invalid number format for shares or price"]
