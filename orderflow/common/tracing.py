"""OpenTelemetry setup for both services; everything is a no-op when disabled."""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from orderflow.common.config import settings
from orderflow.common.logging import logger


# Probe and scrape traffic would drown out real request spans.
EXCLUDED_URLS = "health,metrics"

_provider: TracerProvider | None = None


def setup_tracing(service_name: str) -> None:
    """Register a tracer provider exporting batches over OTLP HTTP."""

    global _provider
    if not settings.tracing_enabled:
        logger.info("tracing disabled for %s", service_name)
        return
    resource = Resource.create({"service.name": service_name})
    _provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint)
    _provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(_provider)


def instrument_app(app: FastAPI) -> None:
    if settings.tracing_enabled:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=EXCLUDED_URLS)


def shutdown_tracing() -> None:
    """Flush buffered spans; called from the app lifespan on shutdown."""

    global _provider
    if _provider is None:
        return
    _provider.shutdown()
    _provider = None
