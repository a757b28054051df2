"""Prometheus metrics for the analytics engine."""

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
    """Registry of all analytics engine metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Dataset metrics
        self.rows_loaded_total = Counter(
            "track_analytics_rows_loaded_total",
            "Total number of track rows loaded",
            registry=self._registry,
        )

        self.dataset_rows = Gauge(
            "track_analytics_dataset_rows",
            "Number of rows in the most recently loaded table",
            registry=self._registry,
        )

        self.load_failures_total = Counter(
            "track_analytics_load_failures_total",
            "Total number of aborted loads",
            ["reason"],  # malformed, too_large
            registry=self._registry,
        )

        # Index metrics
        self.index_builds_total = Counter(
            "track_analytics_index_builds_total",
            "Total index build operations",
            ["column"],
            registry=self._registry,
        )

        self.index_lookups_total = Counter(
            "track_analytics_index_lookups_total",
            "Total index lookup operations",
            ["column"],
            registry=self._registry,
        )

        # Query metrics
        self.queries_total = Counter(
            "track_analytics_queries_total",
            "Total number of catalog queries executed",
            ["query", "status"],  # status: success, error
            registry=self._registry,
        )

        self.query_latency_seconds = Histogram(
            "track_analytics_query_latency_seconds",
            "Query latency in seconds",
            ["access_path"],  # seq_scan, index_lookup
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Server info
        self.info = Info(
            "track_analytics",
            "Track analytics engine information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    # Set server info
    from track_analytics import __version__
    _metrics.info.info({
        "version": __version__,
    })

    # Start HTTP server for Prometheus scraping
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
