"""Infrastructure layer - cross-cutting concerns."""

from track_analytics.infrastructure.config import Config, get_config
from track_analytics.infrastructure.logging import (
    bind_run_context,
    clear_run_context,
    get_logger,
    setup_logging,
)
from track_analytics.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from track_analytics.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "bind_run_context",
    "clear_run_context",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
