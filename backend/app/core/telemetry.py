"""OpenTelemetry configuration for the portfolio service."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.resource import ResourceAttributes
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import AppSettings

logger = logging.getLogger(__name__)

SERVICE_NAMESPACE = "portfolio-tracker"
_METRIC_EXPORT_INTERVAL_MS = 10000

_instrumented = False


def build_resource(settings: AppSettings) -> Resource:
    return Resource.create(
        {
            ResourceAttributes.SERVICE_NAME: settings.telemetry_service_name or settings.app_name,
            ResourceAttributes.SERVICE_NAMESPACE: SERVICE_NAMESPACE,
        }
    )


def build_tracer_provider(settings: AppSettings, exporter: SpanExporter | None = None) -> TracerProvider:
    """Sampled tracer provider; spans go to ``exporter`` or to OTLP in batches."""

    provider = TracerProvider(
        resource=build_resource(settings),
        sampler=ParentBased(TraceIdRatioBased(settings.telemetry_sample_ratio)),
    )
    if exporter is None:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**_exporter_options(settings))))
    else:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider


def build_meter_provider(settings: AppSettings, reader: MetricReader | None = None) -> MeterProvider:
    if reader is None:
        reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(**_exporter_options(settings)),
            export_interval_millis=_METRIC_EXPORT_INTERVAL_MS,
        )
    return MeterProvider(resource=build_resource(settings), metric_readers=[reader])


def setup_telemetry(app: FastAPI, settings: AppSettings, engine: AsyncEngine | None = None) -> bool:
    """Export traces and metrics over OTLP and instrument the app and its engine.

    Providers are process-global, so only the first enabled call installs them.
    Returns whether instrumentation is active.
    """

    global _instrumented  # noqa: PLW0603

    if not settings.telemetry_enabled:
        logger.info("Telemetry disabled via configuration")
        return False
    if _instrumented:
        return True

    tracer_provider = build_tracer_provider(settings)
    meter_provider = build_meter_provider(settings)
    trace.set_tracer_provider(tracer_provider)
    metrics.set_meter_provider(meter_provider)

    FastAPIInstrumentor.instrument_app(app, tracer_provider=tracer_provider, meter_provider=meter_provider)
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, tracer_provider=tracer_provider)

    _instrumented = True
    logger.info("Telemetry exporting to %s", settings.telemetry_otlp_endpoint or "the default OTLP endpoint")
    return True


def _exporter_options(settings: AppSettings) -> dict:
    options: dict = {"insecure": settings.telemetry_otlp_insecure}
    if settings.telemetry_otlp_endpoint:
        options["endpoint"] = settings.telemetry_otlp_endpoint
    return options


__all__ = ["build_meter_provider", "build_resource", "build_tracer_provider", "setup_telemetry"]
