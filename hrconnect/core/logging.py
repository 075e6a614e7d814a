"""Process-wide logging and tracing setup for HR Employee Connect."""

from __future__ import annotations

import logging
from logging.config import dictConfig

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from hrconnect.core.config import Settings


def _otlp_headers(raw: str | None) -> dict[str, str]:
    """Parse the comma separated ``key=value`` pairs of the OTLP headers setting."""

    pairs = (item.partition("=") for item in (raw or "").split(","))
    return {key.strip(): value.strip() for key, sep, value in pairs if sep and key.strip()}


def configure_logging(settings: Settings) -> logging.Logger:
    """Configure the application logger based on settings."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": settings.log_format}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level,
                }
            },
            "root": {"handlers": ["default"], "level": level},
            # httpx logs every Gateway request at INFO.
            "loggers": {"httpx": {"level": max(level, logging.WARNING)}},
        }
    )

    logger = logging.getLogger("hrconnect")
    logger.setLevel(level)
    return logger


def build_tracer_provider(settings: Settings) -> TracerProvider | None:
    """Tracer provider exporting Gateway spans over OTLP/HTTP, or ``None`` when disabled."""

    if not settings.otel_enabled:
        return None

    exporter = OTLPSpanExporter(
        endpoint=settings.otel_exporter_otlp_endpoint,
        headers=_otlp_headers(settings.otel_exporter_otlp_headers) or None,
    )
    provider = TracerProvider(resource=Resource.create({"service.name": settings.otel_service_name}))
    provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider


def setup_observability(settings: Settings) -> TracerProvider | None:
    """Configure logging and install the global tracer provider.

    Meant to run once per process; the Streamlit entry point caches the
    result as a resource and the development Gateway runs it in its lifespan.
    """

    logger = configure_logging(settings)
    provider = build_tracer_provider(settings)
    if provider is not None:
        trace.set_tracer_provider(provider)
        logger.info("Exporting Gateway traces as %s", settings.otel_service_name)
    return provider
