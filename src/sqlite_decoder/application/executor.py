"""Table scan executor.

Turns a table name into rows by chaining the schema resolver, the column
name extractor, the page store and the leaf page decoder:

    query_table(name)
      -> SchemaResolver.find_table(name)        (page 1)
      -> extract_column_definitions(table.sql)
      -> PageStore.read_page(table.root_page)
      -> LeafTablePage.cells() -> Record.decode()
      -> rows with _rowid_ injected

Decoding problems never escape as exceptions: each is reported as a
QueryStatus on an empty result.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum

from sqlite_decoder.domain.entities import LeafTablePage, TableSchema
from sqlite_decoder.domain.errors import (
    DatabaseIOError,
    DecoderError,
    UnsupportedPageTypeError,
)
from sqlite_decoder.domain.services import (
    SchemaResolver,
    extract_column_definitions,
    is_rowid_alias,
)
from sqlite_decoder.domain.value_objects import ROWID_COLUMN, SqlValue, ValueKind
from sqlite_decoder.infrastructure.config import QueryConfig
from sqlite_decoder.infrastructure.logging import get_logger
from sqlite_decoder.infrastructure.metrics import MetricsRegistry, get_metrics
from sqlite_decoder.infrastructure.tracing import trace_span
from sqlite_decoder.ports.outbound import PageStore

Row = dict[str, SqlValue]
"""One decoded row: column name to value, always including _rowid_."""


class QueryStatus(Enum):
    """Outcome of a table query."""

    OK = "ok"
    NOT_FOUND = "not_found"
    UNSUPPORTED_PAGE_TYPE = "unsupported_page_type"
    MALFORMED = "malformed"
    IO_ERROR = "io_error"


@dataclass
class QueryResult:
    """Result of a table query.

    Attributes:
        columns: Declared column names from the CREATE TABLE text
        rows: Decoded rows
        status: Outcome of the query
        message: Human-readable detail for non-OK statuses
        table: Schema of the queried table, when it was found
    """

    columns: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    status: QueryStatus = QueryStatus.OK
    message: str = ""
    table: TableSchema | None = None

    @property
    def success(self) -> bool:
        """False only for malformed data and read failures."""
        return not self.is_error

    @property
    def is_error(self) -> bool:
        return self.status in (QueryStatus.MALFORMED, QueryStatus.IO_ERROR)

    def __len__(self) -> int:
        return len(self.rows)


class QueryExecutor:
    """Executes full scans of single-leaf tables.

    Thread Safety:
        Holds no mutable state; concurrent queries are safe when the page
        store supports concurrent reads.
    """

    def __init__(
        self,
        page_store: PageStore,
        config: QueryConfig | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            page_store: Store to read pages from.
            config: Query behaviour (defaults to QueryConfig()).
            metrics: Metrics registry (defaults to the global one).
        """
        self._store = page_store
        self._config = config or QueryConfig()
        self._metrics = metrics or get_metrics()
        self._resolver = SchemaResolver(page_store)
        self._log = get_logger(__name__)

    @property
    def resolver(self) -> SchemaResolver:
        return self._resolver

    def query_table(self, table_name: str) -> QueryResult:
        """Return every row of a table.

        Args:
            table_name: Exact table name

        Returns:
            QueryResult whose status says what happened. Rows are only
            present with QueryStatus.OK.
        """
        start = time.perf_counter()
        with trace_span("query_table", {"table": table_name}) as span:
            result = self._execute(table_name)
            span.set_attribute("status", result.status.value)
            span.set_attribute("rows", len(result.rows))

        self._metrics.queries_total.labels(status=result.status.value).inc()
        self._metrics.query_latency_seconds.observe(time.perf_counter() - start)

        if result.status in (QueryStatus.OK, QueryStatus.NOT_FOUND):
            self._log.debug(
                "query_completed",
                table=table_name,
                status=result.status.value,
                rows=len(result.rows),
            )
        else:
            self._log.warning(
                "query_degraded",
                table=table_name,
                status=result.status.value,
                reason=result.message,
            )
        return result

    def _execute(self, table_name: str) -> QueryResult:
        try:
            table = self._resolver.find_table(table_name)
        except DecoderError as e:
            return self._failed(e)

        if table is None:
            status = QueryStatus.NOT_FOUND if self._config.report_not_found else QueryStatus.OK
            return QueryResult(status=status, message=f"No such table: {table_name}")

        definitions = extract_column_definitions(table.sql)
        columns = [name for name, _ in definitions]
        alias_columns = set()
        if self._config.resolve_rowid_alias:
            alias_columns = {
                index for index, (_, decl) in enumerate(definitions) if is_rowid_alias(decl)
            }

        try:
            page = LeafTablePage(self._store.read_page(table.root_page), table.root_page)
            rows = self._decode_rows(page, columns, alias_columns)
        except DecoderError as e:
            result = self._failed(e)
            result.columns = columns
            result.table = table
            return result

        self._metrics.rows_decoded_total.inc(len(rows))
        return QueryResult(columns=columns, rows=rows, status=QueryStatus.OK, table=table)

    def _decode_rows(
        self,
        page: LeafTablePage,
        columns: list[str],
        alias_columns: set[int],
    ) -> list[Row]:
        encoding = self._store.header.text_encoding
        prefix = self._config.positional_column_prefix
        rows = []

        for cell in page.cells():
            record = page.record(cell, encoding)
            row: Row = {ROWID_COLUMN: SqlValue.integer(cell.rowid)}

            for index, value in enumerate(record.values):
                name = columns[index] if index < len(columns) else f"{prefix}{index}"
                if index in alias_columns and value.is_null:
                    value = SqlValue.integer(cell.rowid)
                elif value.kind is ValueKind.UNDECODED:
                    self._metrics.undecoded_values_total.inc()
                row[name] = value

            rows.append(row)
        return rows

    def _failed(self, error: DecoderError) -> QueryResult:
        self._metrics.decode_errors_total.labels(code=error.code.value).inc()

        if isinstance(error, UnsupportedPageTypeError):
            status = QueryStatus.UNSUPPORTED_PAGE_TYPE
        elif isinstance(error, DatabaseIOError):
            status = QueryStatus.IO_ERROR
        else:
            status = QueryStatus.MALFORMED
        return QueryResult(status=status, message=str(error))
