"""OpenTelemetry tracing configuration.

Provides distributed tracing with automatic instrumentation for:
- FastAPI requests
- SQLAlchemy database queries

plus manual spans around identity resolution and prompt activation.
Traces are exported to an OTLP-compatible backend (Jaeger, Tempo, etc.)
when OTLP_ENDPOINT is configured.
"""

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import settings


log = structlog.get_logger()

_provider: TracerProvider | None = None


def setup_tracing(app: FastAPI, engine: AsyncEngine | None = None) -> None:
    """Configure OpenTelemetry tracing for the application.

    Exports to an OTLP backend if configured, otherwise logs spans to the
    console in debug mode, otherwise leaves the no-op tracer in place.

    Args:
        app: The FastAPI application instance to instrument
        engine: Optional database engine to instrument
    """
    global _provider  # noqa: PLW0603

    resource = Resource.create(
        {
            "service.name": settings.app_name.lower().replace(" ", "-"),
            "service.version": "0.1.0",
            "deployment.environment": settings.environment,
        }
    )
    provider = TracerProvider(resource=resource)

    if settings.otlp_endpoint:
        exporter = OTLPSpanExporter(
            endpoint=settings.otlp_endpoint,
            insecure=not settings.otlp_endpoint.startswith("https"),
        )
        provider.add_span_processor(BatchSpanProcessor(exporter))
        log.info(
            "tracing_configured",
            exporter="otlp",
            endpoint=settings.otlp_endpoint,
        )
    elif settings.debug:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        log.info("tracing_configured", exporter="console")
    else:
        log.info("tracing_disabled", reason="no OTLP_ENDPOINT configured")
        return

    trace.set_tracer_provider(provider)
    _provider = provider

    FastAPIInstrumentor.instrument_app(
        app,
        excluded_urls="health/.*,docs,redoc,openapi.json",
    )
    log.debug("instrumented_fastapi")

    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        log.debug("instrumented_sqlalchemy")

    log.info("tracing_setup_complete")


def shutdown_tracing() -> None:
    """Flush and stop the tracer provider, if one was installed."""
    global _provider  # noqa: PLW0603

    if _provider is not None:
        _provider.shutdown()
        _provider = None


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance for manual span creation.

    Args:
        name: Name for the tracer (typically module name)

    Returns:
        OpenTelemetry Tracer instance
    """
    return trace.get_tracer(name)
