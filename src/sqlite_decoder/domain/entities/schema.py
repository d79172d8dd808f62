"""Schema table entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from sqlite_decoder.domain.value_objects import PageNumber


class SchemaColumn(IntEnum):
    """Fixed column order of the sqlite_schema table."""

    TYPE = 0
    NAME = 1
    TBL_NAME = 2
    ROOTPAGE = 3
    SQL = 4


TABLE_KIND = "table"


@dataclass(frozen=True)
class TableSchema:
    """One row of the schema table describing a table.

    Attributes:
        kind: Object type ("table" for every instance the resolver returns)
        name: Table name
        tbl_name: Name of the table the object belongs to (same as name)
        root_page: Page number of the table's b-tree root
        sql: The CREATE TABLE statement as stored
    """

    kind: str
    name: str
    tbl_name: str
    root_page: PageNumber
    sql: str

    @property
    def is_table(self) -> bool:
        return self.kind == TABLE_KIND
