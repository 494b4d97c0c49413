"""Stubbed "current price" lookups.

Prices for a handful of well-known tickers are fixed; anything else gets a
pseudo-random quote in ``[50, 150)``. Because the random branch is not
memoized, two lookups of the same unknown symbol can disagree. Callers choose
between reproducing that drift (``PricingMode.VOLATILE``) or pinning one price
per symbol for the duration of a computation (``PricingMode.CONSISTENT``).
"""
from __future__ import annotations

import random
from enum import Enum
from typing import Dict, Mapping, MutableMapping, Optional, Protocol

MOCK_PRICES: Mapping[str, float] = {
    "AAPL": 175.50,
    "TSLA": 230.20,
    "GOOGL": 142.80,
    "MSFT": 378.90,
    "AMZN": 144.30,
    "NVDA": 495.20,
    "META": 501.80,
    "NFLX": 425.60,
    "TQQQ": 65.40,
    "SPY": 458.20,
}

RANDOM_PRICE_LOW = 50.0
RANDOM_PRICE_SPAN = 100.0


class PricingMode(str, Enum):
    CONSISTENT = "consistent"
    VOLATILE = "volatile"


class PriceOracle(Protocol):
    """Anything that can quote a current price for a symbol."""

    def price(self, symbol: str) -> float:
        ...


class StubPriceOracle:
    """Fixed quotes for known tickers, uniform random quotes otherwise."""

    def __init__(
        self,
        prices: Mapping[str, float] | None = None,
        rng: random.Random | None = None,
    ):
        self._prices: Dict[str, float] = dict(MOCK_PRICES if prices is None else prices)
        self._rng = rng or random.Random()

    def price(self, symbol: str) -> float:
        known = self._prices.get(symbol)
        if known is not None:
            return known
        return self._rng.random() * RANDOM_PRICE_SPAN + RANDOM_PRICE_LOW


class CachingPriceOracle:
    """Cache wrapper returning the first quote seen for each symbol."""

    def __init__(self, delegate: PriceOracle):
        self.delegate = delegate
        self._cache: MutableMapping[str, float] = {}

    def price(self, symbol: str) -> float:
        if symbol not in self._cache:
            self._cache[symbol] = self.delegate.price(symbol)
        return self._cache[symbol]

    @property
    def quotes(self) -> Dict[str, float]:
        return dict(self._cache)


def build_price_oracle(
    mode: PricingMode | str = PricingMode.CONSISTENT,
    *,
    rng: random.Random | None = None,
    seed: Optional[int] = None,
) -> PriceOracle:
    """Return a fresh oracle for one top-level computation."""

    if rng is None and seed is not None:
        rng = random.Random(seed)
    stub = StubPriceOracle(rng=rng)
    if PricingMode(mode) is PricingMode.VOLATILE:
        return stub
    return CachingPriceOracle(stub)


__all__ = [
    "MOCK_PRICES",
    "PricingMode",
    "PriceOracle",
    "StubPriceOracle",
    "CachingPriceOracle",
    "build_price_oracle",
]
