import asyncio
import inspect
import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portfolio_tracker.models import Trade  # noqa: E402


class FixedPriceOracle:
    """Quotes from a dict and records every lookup."""

    def __init__(self, prices: dict[str, float], default: float = 100.0):
        self.prices = prices
        self.default = default
        self.calls: list[str] = []

    def price(self, symbol: str) -> float:
        self.calls.append(symbol)
        return self.prices.get(symbol, self.default)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers used in the suite."""

    config.addinivalue_line("markers", "asyncio: mark test as running in an asyncio event loop")


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    test_function = pyfuncitem.obj
    if inspect.iscoroutinefunction(test_function):
        funcargs = {name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            loop.run_until_complete(test_function(**funcargs))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
        return True
    return None


@pytest.fixture
def fixed_oracle() -> FixedPriceOracle:
    return FixedPriceOracle({"AAPL": 150.0, "MSFT": 300.0, "XYZ": 20.0})


@pytest.fixture
def sample_trades() -> list[Trade]:
    return [
        Trade(symbol="AAPL", shares=10, price=100.0, date="2024-01-01"),
        Trade(symbol="MSFT", shares=5, price=320.0, date="2024-01-03"),
        Trade(symbol="AAPL", shares=5, price=120.0, date="2024-02-01"),
        Trade(symbol="XYZ", shares=3, price=10.0, date="2024-01-02"),
    ]
