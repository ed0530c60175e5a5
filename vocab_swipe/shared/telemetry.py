# vocab_swipe/shared/telemetry.py
from typing import Optional

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from vocab_swipe import __version__
from vocab_swipe.shared.config import settings

logger = structlog.get_logger()

# Probes are polled constantly and say nothing about study traffic
_UNTRACED_URLS = "api/health"

_provider: Optional[TracerProvider] = None


def setup_telemetry(service_name: str = settings.OTEL_SERVICE_NAME) -> Optional[TracerProvider]:
    """
    Installs the global tracer provider with OTLP export.

    A no-op without OTEL_EXPORTER_OTLP_ENDPOINT, and on every call after
    the first (the app factory may run several times in one process).
    Without a provider, spans opened by the use cases are non-recording.
    """
    global _provider

    if not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        logger.info("telemetry_disabled", reason="no_otlp_endpoint")
        return None
    if _provider is not None:
        return _provider

    resource = Resource.create(attributes={
        "service.name": service_name,
        "service.version": __version__,
        "deployment.environment": settings.APP_ENV.value,
        "vocab.storage_backend": settings.STORAGE_BACKEND.value,
    })
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{settings.OTEL_EXPORTER_OTLP_ENDPOINT}/v1/traces"))
    )
    if settings.DEBUG:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info("telemetry_init", service=service_name, endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT)
    return provider


def shutdown_telemetry() -> None:
    """Flushes pending spans; called from the API lifespan on shutdown."""
    if _provider is not None:
        _provider.force_flush()


def instrument_fastapi(app) -> None:
    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=_UNTRACED_URLS)


def get_tracer(name: str):
    """
    Tracer for manual spans in the use cases:
        tracer = get_tracer(__name__)
        with tracer.start_as_current_span("study.next_word"):
            ...
    """
    return trace.get_tracer(name)
