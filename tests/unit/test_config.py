"""Unit tests for configuration module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sqlite_decoder.infrastructure.config import (
    Config,
    ObservabilityConfig,
    QueryConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.query.report_not_found is True
        assert config.query.resolve_rowid_alias is True
        assert config.query.positional_column_prefix == "col_"
        assert config.observability.log_format == "json"
        assert config.observability.metrics_port is None
        assert config.observability.otel_endpoint is None

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested fields are read from SQLITE_DECODER_<SECTION>__<FIELD>."""
        monkeypatch.setenv("SQLITE_DECODER_QUERY__REPORT_NOT_FOUND", "false")
        monkeypatch.setenv("SQLITE_DECODER_OBSERVABILITY__LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SQLITE_DECODER_OBSERVABILITY__METRICS_PORT", "9109")

        config = Config()

        assert config.query.report_not_found is False
        assert config.observability.log_level == "DEBUG"
        assert config.observability.metrics_port == 9109

    def test_custom_query_config(self) -> None:
        """Test custom query configuration."""
        query = QueryConfig(report_not_found=False, positional_column_prefix="c")

        assert not query.report_not_found
        assert query.positional_column_prefix == "c"

    def test_empty_column_prefix_rejected(self) -> None:
        with pytest.raises(ValidationError):
            QueryConfig(positional_column_prefix="")

    def test_invalid_metrics_port(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(metrics_port=0)

    def test_invalid_log_format(self) -> None:
        with pytest.raises(ValidationError):
            ObservabilityConfig(log_format="xml")  # type: ignore


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
