"""OpenTelemetry tracing for lifecycle operations.

Every create/read/update/delete runs inside one span named
``<resource>.<operation>``. Spans go to the OTLP collector when
``observability.otel_endpoint`` is set, and to any extra exporters
handed to :func:`setup_tracing`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from container_resources import __version__
from container_resources.infrastructure.config import ObservabilityConfig

INSTRUMENTATION_NAME = "container_resources"

_tracer: trace.Tracer | None = None


def build_tracer_provider(config: ObservabilityConfig, *exporters: SpanExporter) -> TracerProvider:
    """Build a provider tagged with the service identity.

    Args:
        config: Observability settings; ``otel_endpoint`` enables OTLP export.
        exporters: Additional exporters, flushed synchronously per span.
    """
    provider = TracerProvider(
        resource=Resource.create({
            SERVICE_NAME: config.otel_service_name,
            SERVICE_VERSION: __version__,
        })
    )
    if config.otel_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True))
        )
    for exporter in exporters:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    return provider


def setup_tracing(config: ObservabilityConfig, *exporters: SpanExporter) -> trace.Tracer:
    """Install the provider globally and bind the module tracer to it."""
    global _tracer

    provider = build_tracer_provider(config, *exporters)
    trace.set_tracer_provider(provider)
    # Bound to our provider even if another one was installed globally first
    _tracer = provider.get_tracer(INSTRUMENTATION_NAME, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the module tracer, falling back to the global provider."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(INSTRUMENTATION_NAME, __version__)
    return _tracer


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Generator[trace.Span, None, None]:
    """Run the body inside a span; None-valued attributes are dropped."""
    with get_tracer().start_as_current_span(name) as span:
        span.set_attributes({key: value for key, value in (attributes or {}).items() if value is not None})
        yield span
