"""OpenTelemetry tracing support for auctionlots.

Tracing is optional and disabled by default. It requires the ``tracing``
extra (opentelemetry-api, opentelemetry-sdk, opentelemetry-exporter-otlp).
While disabled every helper in this module is a no-op, so scrape code can
open spans unconditionally.

Usage:
    from auctionlots.infrastructure.observability import configure_tracing, trace_span

    configure_tracing(service_name="auctionlots-scheduled", endpoint="http://localhost:4317")

    with trace_span("scrape_source", source="Bonhams"):
        ...
"""

from __future__ import annotations

import functools
import inspect
import os
from contextlib import AbstractContextManager
from typing import Any, Callable, TypeVar

from .logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_tracer: Any = None
_tracing_enabled: bool = False


def is_tracing_enabled() -> bool:
    """Check if tracing is currently enabled."""
    return _tracing_enabled


def configure_tracing(
    *,
    service_name: str = "auctionlots",
    endpoint: str | None = None,
    enable: bool = True,
    sample_rate: float = 1.0,
) -> bool:
    """Configure OpenTelemetry tracing.

    Args:
        service_name: Name of this service in traces.
        endpoint: OTLP endpoint URL. Without one, spans are only printed when
            ``OTEL_TRACES_CONSOLE=true``.
        enable: Whether to enable tracing at all.
        sample_rate: Fraction of traces to sample (0.0 to 1.0).

    Returns:
        True if tracing was configured, False if it stays disabled.
    """
    global _tracer, _tracing_enabled

    if not enable:
        _tracing_enabled = False
        logger.info("Tracing disabled by configuration")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import SERVICE_NAME, Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

        provider = TracerProvider(
            resource=Resource.create({SERVICE_NAME: service_name}),
            sampler=TraceIdRatioBased(sample_rate),
        )

        if endpoint:
            try:
                from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                    OTLPSpanExporter,
                )
                from opentelemetry.sdk.trace.export import BatchSpanProcessor

                provider.add_span_processor(
                    BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
                )
                logger.info(f"Tracing exporter configured for {endpoint}")
            except ImportError:
                logger.warning(
                    "opentelemetry-exporter-otlp not installed; traces won't be exported"
                )
        elif os.environ.get("OTEL_TRACES_CONSOLE", "").lower() == "true":
            from opentelemetry.sdk.trace.export import (
                ConsoleSpanExporter,
                SimpleSpanProcessor,
            )

            provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
            logger.info("Console trace exporter enabled")

        trace.set_tracer_provider(provider)
        _tracer = trace.get_tracer(service_name)
        _tracing_enabled = True
        logger.info(f"Tracing enabled for service '{service_name}'")
        return True

    except ImportError as e:
        logger.debug(f"OpenTelemetry not available: {e}")
        _tracing_enabled = False
        return False


class trace_span(AbstractContextManager):
    """Open a span for the enclosed block; yields ``None`` while tracing is off."""

    def __init__(self, name: str, **attributes: Any):
        self.name = name
        self.attributes = attributes
        self.span = None
        self._span_ctx = None

    def __enter__(self):
        if not _tracing_enabled or _tracer is None:
            return None
        self._span_ctx = _tracer.start_as_current_span(self.name)
        self.span = self._span_ctx.__enter__()
        for key, value in self.attributes.items():
            if value is not None:
                self.span.set_attribute(key, str(value))
        return self.span

    def __exit__(self, exc_type, exc_value, traceback):
        if self._span_ctx is not None:
            self._span_ctx.__exit__(exc_type, exc_value, traceback)
        return False


def traced(name: str | None = None) -> Callable[[F], F]:
    """Decorator to run a sync or async function inside a span.

    Example:
        @traced("scrape_page")
        async def scrape_page(document: LiveDocument) -> PageScrapeResponse:
            ...
    """

    def decorator(func: F) -> F:
        span_name = name or func.__name__

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with trace_span(span_name):
                return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with trace_span(span_name):
                return await func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator


def set_span_attribute(key: str, value: Any) -> None:
    """Set an attribute on the current span (stringified)."""
    if not _tracing_enabled:
        return

    from opentelemetry import trace

    span = trace.get_current_span()
    if span and span.is_recording():
        span.set_attribute(key, str(value))


def record_exception(exception: BaseException) -> None:
    """Record an exception on the current span and mark it failed."""
    if not _tracing_enabled:
        return

    from opentelemetry import trace

    span = trace.get_current_span()
    if span and span.is_recording():
        span.record_exception(exception)
        span.set_status(trace.Status(trace.StatusCode.ERROR))


__all__ = [
    "configure_tracing",
    "is_tracing_enabled",
    "record_exception",
    "set_span_attribute",
    "trace_span",
    "traced",
]
