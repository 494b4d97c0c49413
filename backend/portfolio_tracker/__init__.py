"""Core package for the portfolio analytics pipeline."""

from .errors import CsvFormatError, PersistenceDecodeError, PortfolioError, ValidationError
from .models import Holding, ParsedResult, PortfolioHistoryPoint, PortfolioSummary, Trade
from .pipeline import analyze_rows, analyze_trades, calculate_holdings, generate_portfolio_history
from .pricing import CachingPriceOracle, PricingMode, StubPriceOracle, build_price_oracle
from .summary import calculate_portfolio_summary
from .validation import validate_trade_rows

__all__ = [
    "Trade",
    "Holding",
    "PortfolioSummary",
    "PortfolioHistoryPoint",
    "ParsedResult",
    "PortfolioError",
    "ValidationError",
    "CsvFormatError",
    "PersistenceDecodeError",
    "validate_trade_rows",
    "calculate_holdings",
    "calculate_portfolio_summary",
    "generate_portfolio_history",
    "analyze_trades",
    "analyze_rows",
    "PricingMode",
    "StubPriceOracle",
    "CachingPriceOracle",
    "build_price_oracle",
]
