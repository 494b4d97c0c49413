"""Turn raw CSV rows into validated trades."""
from __future__ import annotations

import logging
import math
import numbers
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence

from .errors import ValidationError
from .models import Trade

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("symbol", "shares", "price", "date")

MISSING_FIELDS_MESSAGE = "Missing required fields (symbol, shares, price, date)"
INVALID_NUMBER_MESSAGE = "Invalid number format for shares or price"


def parse_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` when it is not one.

    Real numbers (including numpy scalars and ``Decimal``) pass through,
    strings are parsed strictly after stripping whitespace. Anything else,
    including booleans, ``nan``, infinities and integers too large for a
    float, yields ``None``.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (numbers.Real, Decimal)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def validate_trade_rows(rows: Sequence[Mapping[str, Any]]) -> List[Trade]:
    """Validate every row and return trades, or raise with all row diagnostics."""

    trades: List[Trade] = []
    errors: List[str] = []
    for index, row in enumerate(rows, start=1):
        if any(_is_blank(row.get(name)) for name in REQUIRED_FIELDS):
            errors.append(f"Row {index}: {MISSING_FIELDS_MESSAGE}")
            continue
        shares = parse_number(row["shares"])
        price = parse_number(row["price"])
        if shares is None or price is None:
            errors.append(f"Row {index}: {INVALID_NUMBER_MESSAGE}")
            continue
        trades.append(
            Trade(
                symbol=str(row["symbol"]).strip().upper(),
                shares=shares,
                price=price,
                date=str(row["date"]),
            )
        )

    if errors:
        logger.info("Rejected upload with %d invalid row(s) out of %d", len(errors), len(rows))
        raise ValidationError(errors)
    return trades


__all__ = [
    "REQUIRED_FIELDS",
    "parse_number",
    "validate_trade_rows",
]
