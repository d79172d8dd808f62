"""Schema table resolution.

Page 1 holds the root of the schema table (sqlite_schema, historically
sqlite_master). Each row describes one table, index, view or trigger:

    type | name | tbl_name | rootpage | sql

Only leaf schema pages are supported, so a schema large enough to spill
into an interior page surfaces as UnsupportedPageTypeError.

References:
    - https://www.sqlite.org/fileformat2.html#storage_of_the_sql_database_schema
"""

from __future__ import annotations

from sqlite_decoder.domain.entities import (
    TABLE_KIND,
    LeafTablePage,
    Record,
    SchemaColumn,
    TableSchema,
)
from sqlite_decoder.domain.errors import TruncatedRecordError
from sqlite_decoder.domain.value_objects import SCHEMA_PAGE, PageNumber, SqlValue, ValueKind
from sqlite_decoder.infrastructure.logging import get_logger
from sqlite_decoder.ports.outbound import PageStore

_NAME_COLUMNS = SchemaColumn.NAME + 1
_ALL_COLUMNS = SchemaColumn.SQL + 1


def _text(value: SqlValue) -> str | None:
    return value.value if value.kind is ValueKind.TEXT else None


class SchemaResolver:
    """Builds table definitions from the schema table on page 1.

    Results are not cached; every call re-reads page 1.
    """

    def __init__(self, page_store: PageStore) -> None:
        """Initialize the resolver.

        Args:
            page_store: Store to read page 1 from
        """
        self._store = page_store
        self._log = get_logger(__name__)

    def _schema_page(self) -> LeafTablePage:
        return LeafTablePage(self._store.read_page(SCHEMA_PAGE), SCHEMA_PAGE)

    def _schema_records(self, max_columns: int) -> list[Record]:
        page = self._schema_page()
        encoding = self._store.header.text_encoding
        records = []
        for cell in page.cells():
            record = page.record(
                cell,
                encoding,
                max_columns=max_columns,
                integer_columns=(SchemaColumn.ROOTPAGE,),
            )
            if len(record) < max_columns:
                raise TruncatedRecordError(
                    f"Schema row {cell.cell_id} has {len(record)} columns, "
                    f"expected at least {max_columns}"
                )
            records.append(record)
        return records

    def table_names(self) -> list[str]:
        """Names of all tables, in schema cell order.

        Only the type and name columns are decoded.

        Raises:
            DecoderError: If page 1 cannot be read or decoded.
        """
        names = []
        for record in self._schema_records(_NAME_COLUMNS):
            if _text(record[SchemaColumn.TYPE]) == TABLE_KIND:
                name = _text(record[SchemaColumn.NAME])
                if name is not None:
                    names.append(name)
        return names

    def tables(self) -> list[TableSchema]:
        """Full definitions of all tables, in schema cell order.

        Views, indexes and triggers are filtered out. The root page column
        is decoded as an integer whatever its width.

        Raises:
            DecoderError: If page 1 cannot be read or decoded.
        """
        tables = []
        for record in self._schema_records(_ALL_COLUMNS):
            if _text(record[SchemaColumn.TYPE]) != TABLE_KIND:
                continue

            name = _text(record[SchemaColumn.NAME])
            if name is None:
                self._log.warning("schema_row_skipped", reason="name is not text")
                continue

            root_page = record[SchemaColumn.ROOTPAGE]
            tables.append(
                TableSchema(
                    kind=TABLE_KIND,
                    name=name,
                    tbl_name=_text(record[SchemaColumn.TBL_NAME]) or name,
                    root_page=PageNumber(
                        root_page.value if root_page.kind is ValueKind.INTEGER else 0
                    ),
                    sql=_text(record[SchemaColumn.SQL]) or "",
                )
            )
        return tables

    def find_table(self, name: str) -> TableSchema | None:
        """Look up a table by exact name; the first match wins."""
        for table in self.tables():
            if table.name == name:
                return table
        return None
