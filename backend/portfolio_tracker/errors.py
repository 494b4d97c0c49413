"""Exceptions raised by the portfolio analytics pipeline."""
from __future__ import annotations

from typing import Iterable, List


class PortfolioError(Exception):
    """Base class for portfolio pipeline failures."""


class ValidationError(PortfolioError):
    """One or more uploaded rows could not be turned into trades."""

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("\n".join(self.errors))


class CsvFormatError(PortfolioError):
    """The uploaded file could not be tokenised as CSV."""


class PersistenceDecodeError(PortfolioError):
    """A cached portfolio payload is malformed and cannot be restored."""


__all__ = [
    "PortfolioError",
    "ValidationError",
    "CsvFormatError",
    "PersistenceDecodeError",
]
