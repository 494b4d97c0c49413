"""Run uploaded trade files through the analytics pipeline."""

from __future__ import annotations

import logging
import random

from opentelemetry import metrics, trace

from app.config import AppSettings
from portfolio_tracker.csv_reader import read_trade_rows
from portfolio_tracker.errors import ValidationError
from portfolio_tracker.models import ParsedResult
from portfolio_tracker.pipeline import analyze_rows

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)
meter = metrics.get_meter(__name__)

_uploads_counter = meter.create_counter(
    "portfolio.uploads",
    description="Trade files processed, by outcome",
)


def analyze_upload(content: bytes, settings: AppSettings) -> ParsedResult:
    """Parse and analyse one uploaded CSV; raises before anything is derived."""

    rng = random.Random(settings.price_seed) if settings.price_seed is not None else None
    with tracer.start_as_current_span("portfolio.analyze_upload") as span:
        span.set_attribute("portfolio.upload_bytes", len(content))
        span.set_attribute("portfolio.pricing_mode", settings.pricing_mode.value)
        rows = read_trade_rows(content)
        span.set_attribute("portfolio.rows", len(rows))
        try:
            result = analyze_rows(rows, pricing_mode=settings.pricing_mode, rng=rng)
        except ValidationError as exc:
            span.set_attribute("portfolio.invalid_rows", len(exc.errors))
            _uploads_counter.add(1, {"outcome": "invalid"})
            raise
        span.set_attribute("portfolio.holdings", len(result.holdings))

    _uploads_counter.add(1, {"outcome": "ok"})
    logger.info("Processed upload of %d row(s)", len(rows))
    return result


__all__ = ["analyze_upload"]
