"""Configuration management for the decoder."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueryConfig(BaseModel):
    """Table scan behaviour."""

    report_not_found: bool = Field(
        default=True,
        description=(
            "Return NOT_FOUND for unknown tables; when false an unknown table "
            "looks like an empty one"
        ),
    )
    resolve_rowid_alias: bool = Field(
        default=True,
        description="Fill NULL INTEGER PRIMARY KEY columns from the cell rowid",
    )
    positional_column_prefix: str = Field(
        default="col_",
        min_length=1,
        description="Prefix for record columns beyond the declared column names",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus scrape port (disabled if unset)"
    )
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(
        default="sqlite_decoder", description="Service name for tracing"
    )


class Config(BaseSettings):
    """Main configuration for the decoder."""

    model_config = SettingsConfigDict(
        env_prefix="SQLITE_DECODER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    query: QueryConfig = Field(default_factory=QueryConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
