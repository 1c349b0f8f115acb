"""Prometheus metrics for container resources."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all lifecycle metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Lifecycle operations
        self.resource_operations_total = Counter(
            "resource_operations_total",
            "Total lifecycle operations",
            ["resource", "operation", "status"],  # tag/secret, create/read/update/delete, success/error
            registry=self._registry,
        )

        self.resource_operation_duration_seconds = Histogram(
            "resource_operation_duration_seconds",
            "Lifecycle operation latency in seconds",
            ["resource", "operation"],
            buckets=(0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0),
            registry=self._registry,
        )

        # Image metrics
        self.image_pull_duration_seconds = Histogram(
            "image_pull_duration_seconds",
            "Image pull duration in seconds",
            buckets=(1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
            registry=self._registry,
        )

        self.image_pulls_total = Counter(
            "image_pulls_total",
            "Total image pull operations",
            ["status"],  # success, failed
            registry=self._registry,
        )

        self.image_removals_total = Counter(
            "image_removals_total",
            "Managed digest removals",
            ["outcome"],  # removed, absent, failed
            registry=self._registry,
        )

        self.managed_digests = Gauge(
            "managed_digests",
            "Digests currently tracked per tag resource",
            ["name"],
            registry=self._registry,
        )

        self.info = Info(
            "container_resources",
            "Container resources information",
            registry=self._registry,
        )


_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8010, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """Set up Prometheus metrics server."""
    global _metrics
    _metrics = MetricsRegistry(registry)

    from container_resources import __version__
    _metrics.info.info({"version": __version__})

    start_http_server(port, registry=registry or REGISTRY)
    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
