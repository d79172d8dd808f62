"""Database - unified read-only entry point.

Usage:
    from sqlite_decoder import open_database

    with open_database("/path/to/app.db") as db:
        print(db.list_tables())
        result = db.query_table("users")
        for row in result.rows:
            print(row["_rowid_"].value, row["name"].value)
"""

from __future__ import annotations

from pathlib import Path

from sqlite_decoder.adapters.outbound.file_page_store import FilePageStore
from sqlite_decoder.application.executor import QueryExecutor, QueryResult
from sqlite_decoder.domain.entities import BTreePageHeader, FileHeader, TableSchema, header_offset_for
from sqlite_decoder.domain.errors import DecoderError
from sqlite_decoder.domain.value_objects import PageNumber, TextEncoding
from sqlite_decoder.infrastructure.config import Config, get_config
from sqlite_decoder.infrastructure.logging import get_logger
from sqlite_decoder.infrastructure.metrics import MetricsRegistry, get_metrics
from sqlite_decoder.infrastructure.tracing import trace_span


class Database:
    """An open SQLite database file.

    Opening validates the header and page size; a handle is never returned
    for a file that fails either check. Nothing is cached between calls.

    Thread Safety:
        All read operations may be called from several threads at once.
    """

    def __init__(
        self,
        page_store: FilePageStore,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Wrap an already opened page store. Prefer :meth:`open`."""
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._store = page_store
        self._executor = QueryExecutor(page_store, self._config.query, self._metrics)
        self._log = get_logger(__name__, path=str(page_store.file_path))

    @classmethod
    def open(
        cls,
        path: str | Path,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> Database:
        """Open a database file.

        Args:
            path: Path to the database file.
            config: Decoder configuration (defaults to get_config()).
            metrics: Metrics registry (defaults to the global one).

        Raises:
            DatabaseFileNotFoundError: If the file does not exist.
            DatabaseIOError: If the file cannot be read or is shorter than
                the 100-byte header.
            InvalidHeaderError: If the file is not a SQLite 3 database.
            InvalidPageSizeError: If the header's page size is illegal.
        """
        metrics = metrics or get_metrics()
        log = get_logger(__name__, path=str(path))

        with trace_span("open_database", {"path": str(path)}):
            try:
                store = FilePageStore(path, metrics=metrics)
            except DecoderError as e:
                metrics.databases_opened_total.labels(status=e.code.value).inc()
                log.warning("database_open_failed", code=e.code.value, error=str(e))
                raise

        metrics.databases_opened_total.labels(status="ok").inc()
        log.info(
            "database_opened",
            page_size=store.page_size,
            text_encoding=store.header.text_encoding.name,
        )
        return cls(store, config, metrics)

    @property
    def path(self) -> Path:
        return self._store.file_path

    @property
    def header(self) -> FileHeader:
        return self._store.header

    @property
    def page_size(self) -> int:
        return self._store.page_size

    @property
    def text_encoding(self) -> TextEncoding:
        return self._store.header.text_encoding

    @property
    def page_count(self) -> int:
        """Number of whole pages in the file."""
        return self._store.get_num_pages()

    def read_page(self, page_number: int) -> bytes:
        """Read one page (1-based). See :meth:`FilePageStore.read_page`."""
        return self._store.read_page(PageNumber(page_number))

    def describe_page(self, page_number: int) -> BTreePageHeader:
        """Parse the b-tree page header of any page, whatever its type."""
        number = PageNumber(page_number)
        return BTreePageHeader.from_bytes(self.read_page(number), header_offset_for(number))

    def list_tables(self) -> list[str]:
        """Names of all tables in schema order.

        Raises:
            DecoderError: If the schema page cannot be read or decoded.
        """
        return self._executor.resolver.table_names()

    def tables(self) -> list[TableSchema]:
        """Full table definitions in schema order.

        Raises:
            DecoderError: If the schema page cannot be read or decoded.
        """
        return self._executor.resolver.tables()

    def query_table(self, table_name: str) -> QueryResult:
        """Return every row of a table. Never raises for decode problems."""
        return self._executor.query_table(table_name)

    def close(self) -> None:
        """Close the underlying file."""
        self._store.close()
        self._log.info("database_closed")

    def __enter__(self) -> Database:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"Database(path={str(self.path)!r}, page_size={self.page_size})"


def open_database(path: str | Path, config: Config | None = None) -> Database:
    """Open a database file. Shorthand for :meth:`Database.open`."""
    return Database.open(path, config)
