"""Shared metrics and tracing around lifecycle operations."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Generator, Optional

from container_resources.infrastructure.metrics import MetricsRegistry
from container_resources.infrastructure.tracing import trace_span


@contextmanager
def observe_operation(
    metrics: Optional[MetricsRegistry],
    resource: str,
    operation: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[None, None, None]:
    """Trace one lifecycle operation and record its outcome.

    Args:
        metrics: Metrics registry, or None to only trace.
        resource: Resource kind ("tag" or "secret").
        operation: Lifecycle operation name.
        attributes: Span attributes.
    """
    start = time.perf_counter()
    status = "error"
    try:
        with trace_span(f"{resource}.{operation}", attributes):
            yield
        status = "success"
    finally:
        if metrics:
            metrics.resource_operations_total.labels(
                resource=resource, operation=operation, status=status
            ).inc()
            metrics.resource_operation_duration_seconds.labels(
                resource=resource, operation=operation
            ).observe(time.perf_counter() - start)
