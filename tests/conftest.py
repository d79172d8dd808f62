"""Pytest configuration and fixtures for sqlite_decoder tests."""

from __future__ import annotations

import sqlite3
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
import structlog
from prometheus_client import CollectorRegistry

from sqlite_decoder.infrastructure.config import Config, ObservabilityConfig, QueryConfig
from sqlite_decoder.infrastructure.container import Container
from sqlite_decoder.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config() -> Config:
    """Provide a test configuration independent of the environment."""
    return Config(
        query=QueryConfig(),
        observability=ObservabilityConfig(log_level="DEBUG", log_format="console"),
    )


@pytest.fixture
def container() -> Generator[None, None, None]:
    """Reset the observability container around a test."""
    Container.reset()
    yield
    Container.reset()
    structlog.reset_defaults()


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def make_database(temp_dir: Path) -> Callable[..., Path]:
    """Build a real SQLite file with the stdlib sqlite3 module.

    Usage:
        path = make_database("CREATE TABLE t(x); INSERT INTO t VALUES (1);")
        path = make_database(script, page_size=1024, encoding="UTF-16le")
    """
    counter = 0

    def _make(
        script: str,
        *,
        page_size: int | None = None,
        encoding: str | None = None,
        name: str | None = None,
    ) -> Path:
        nonlocal counter
        counter += 1
        path = temp_dir / (name or f"fixture_{counter}.db")

        conn = sqlite3.connect(path)
        try:
            if page_size is not None:
                conn.execute(f"PRAGMA page_size = {page_size}")
            if encoding is not None:
                conn.execute(f"PRAGMA encoding = '{encoding}'")
            conn.executescript(script)
            conn.commit()
        finally:
            conn.close()
        return path

    return _make


@pytest.fixture
def two_row_db(make_database: Callable[..., Path]) -> Path:
    """A single-page database with t(id INTEGER, name TEXT) and two rows."""
    return make_database(
        """
        CREATE TABLE t(id INTEGER, name TEXT);
        INSERT INTO t VALUES (1, 'alice');
        INSERT INTO t VALUES (2, 'bob');
        """
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
