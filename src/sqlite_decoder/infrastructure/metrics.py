"""Prometheus metrics for the decoder."""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    start_http_server,
)


class MetricsRegistry:
    """Registry of all decoder metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Database handles
        self.databases_opened_total = Counter(
            "sqlite_decoder_databases_opened_total",
            "Total database open attempts",
            ["status"],  # ok, or an error code
            registry=self._registry,
        )

        # Page I/O
        self.pages_read_total = Counter(
            "sqlite_decoder_pages_read_total",
            "Total pages read from storage",
            registry=self._registry,
        )

        self.page_bytes_read_total = Counter(
            "sqlite_decoder_page_bytes_read_total",
            "Total page bytes read from storage",
            registry=self._registry,
        )

        # Queries
        self.queries_total = Counter(
            "sqlite_decoder_queries_total",
            "Total table queries",
            ["status"],  # ok, not_found, unsupported_page_type, malformed, io_error
            registry=self._registry,
        )

        self.query_latency_seconds = Histogram(
            "sqlite_decoder_query_latency_seconds",
            "Table query latency in seconds",
            buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
            registry=self._registry,
        )

        self.rows_decoded_total = Counter(
            "sqlite_decoder_rows_decoded_total",
            "Total rows decoded from leaf pages",
            registry=self._registry,
        )

        self.undecoded_values_total = Counter(
            "sqlite_decoder_undecoded_values_total",
            "Column values left undecoded (float, wide int, blob, reserved)",
            registry=self._registry,
        )

        self.decode_errors_total = Counter(
            "sqlite_decoder_decode_errors_total",
            "Decoding failures by error code",
            ["code"],
            registry=self._registry,
        )

        self.info = Info(
            "sqlite_decoder",
            "SQLite decoder information",
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
    # The default registry rejects a second set of collectors with the same names
    if _metrics is None or registry is not None:
        _metrics = MetricsRegistry(registry)

    from sqlite_decoder import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
