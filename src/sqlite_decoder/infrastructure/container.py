"""Process-wide wiring of configuration, logging, metrics and tracing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import structlog
from opentelemetry import trace

from sqlite_decoder.infrastructure.config import Config, get_config
from sqlite_decoder.infrastructure.logging import get_logger, setup_logging
from sqlite_decoder.infrastructure.metrics import MetricsRegistry, get_metrics, setup_metrics
from sqlite_decoder.infrastructure.tracing import get_tracer, setup_tracing


@dataclass
class Container:
    """Holds the observability components built from a Config."""

    config: Config
    logger: structlog.BoundLogger
    tracer: trace.Tracer
    metrics: MetricsRegistry

    _instance: ClassVar[Container | None] = None

    @classmethod
    def create(cls, config: Config | None = None) -> Container:
        """Create and initialize the container.

        Logging is always configured. The metrics endpoint starts only when
        observability.metrics_port is set, and spans are exported only when
        observability.otel_endpoint is set.
        """
        if cls._instance is not None:
            return cls._instance

        config = config or get_config()
        obs = config.observability

        setup_logging(level=obs.log_level, log_format=obs.log_format)
        logger = get_logger("sqlite_decoder")

        if obs.metrics_port is not None:
            metrics = setup_metrics(port=obs.metrics_port)
        else:
            metrics = get_metrics()

        if obs.otel_endpoint:
            tracer = setup_tracing(
                service_name=obs.otel_service_name,
                otlp_endpoint=obs.otel_endpoint,
            )
        else:
            tracer = get_tracer()

        cls._instance = cls(config=config, logger=logger, tracer=tracer, metrics=metrics)

        logger.info(
            "sqlite_decoder_container_initialized",
            log_level=obs.log_level,
            metrics_port=obs.metrics_port,
            tracing_enabled=bool(obs.otel_endpoint),
            report_not_found=config.query.report_not_found,
        )

        return cls._instance

    @classmethod
    def get(cls) -> Container:
        """Get the singleton container instance."""
        if cls._instance is None:
            return cls.create()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton (useful for testing)."""
        cls._instance = None
