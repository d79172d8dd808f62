"""Infrastructure layer - cross-cutting concerns."""

from sqlite_decoder.infrastructure.config import Config, get_config
from sqlite_decoder.infrastructure.container import Container
from sqlite_decoder.infrastructure.logging import setup_logging, get_logger
from sqlite_decoder.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from sqlite_decoder.infrastructure.tracing import setup_tracing, get_tracer, trace_span

__all__ = [
    "Config",
    "get_config",
    "Container",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "trace_span",
]
