"""Analyse a trades CSV from the command line and optionally cache the result."""

from __future__ import annotations

import argparse
import asyncio
import json
import random
import sys
from pathlib import Path

from app.config import get_settings
from app.db.database import Database
from app.services.cache import PortfolioCache
from portfolio_tracker.csv_reader import read_trade_rows
from portfolio_tracker.errors import PortfolioError
from portfolio_tracker.models import ParsedResult
from portfolio_tracker.pipeline import analyze_rows
from portfolio_tracker.pricing import PricingMode
from portfolio_tracker.serialization import result_to_payload
from portfolio_tracker.views import format_currency, format_percent


def _print_report(result: ParsedResult) -> None:
    summary = result.summary
    print(f"Total value:     {format_currency(summary.total_value)}")
    print(
        f"Total gain/loss: {format_currency(summary.total_gain_loss)} "
        f"({format_percent(summary.total_gain_loss_percent)})"
    )
    print(f"Symbols held:    {summary.unique_symbols}")
    if summary.top_performer is not None:
        print(
            f"Top performer:   {summary.top_performer.symbol} "
            f"{format_percent(summary.top_performer.unrealized_gain_loss_percent)}"
        )
    if summary.worst_performer is not None:
        print(
            f"Worst performer: {summary.worst_performer.symbol} "
            f"{format_percent(summary.worst_performer.unrealized_gain_loss_percent)}"
        )
    for holding in result.holdings:
        print(
            f"  {holding.symbol:<8} {holding.shares_held:>12,.4f} "
            f"{format_currency(holding.market_value):>16} "
            f"{format_percent(holding.unrealized_gain_loss_percent):>10}"
        )


async def _save(result: ParsedResult, database_url: str) -> None:
    database = Database(database_url)
    try:
        await database.create_all()
        await PortfolioCache(database).save(result)
    finally:
        await database.dispose()


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Derive holdings, summary and history from a trades CSV")
    parser.add_argument("path", type=Path)
    parser.add_argument(
        "--pricing-mode",
        default=settings.pricing_mode.value,
        choices=[mode.value for mode in PricingMode],
    )
    parser.add_argument("--seed", type=int, default=settings.price_seed)
    parser.add_argument("--json", action="store_true", help="Print the full result bundle as JSON")
    parser.add_argument("--save", action="store_true", help="Replace the cached result in the database")
    args = parser.parse_args(argv)

    rng = random.Random(args.seed) if args.seed is not None else None
    try:
        rows = read_trade_rows(args.path.read_bytes())
        result = analyze_rows(rows, pricing_mode=args.pricing_mode, rng=rng)
    except PortfolioError as exc:
        print(exc, file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result_to_payload(result), indent=2))
    else:
        _print_report(result)

    if args.save:
        asyncio.run(_save(result, settings.database_url))
        print(f"Cached result in {settings.database_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
