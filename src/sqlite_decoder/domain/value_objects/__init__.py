"""Value objects for the decoder domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Identifiers:
        - PageNumber: 1-based page number
        - CellId: (page_number, index) location of a cell
        - PageType, TextEncoding: header enumerations
        - Format constants (magic, header size, page size limits)

    Values:
        - SqlValue: Tagged column value
        - ValueKind: Storage class of a SqlValue
"""

from sqlite_decoder.domain.value_objects.identifiers import (
    CELL_POINTER_SIZE,
    FILE_HEADER_SIZE,
    INTERIOR_PAGE_HEADER_SIZE,
    LEAF_PAGE_HEADER_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    PAGE_SIZE_SENTINEL,
    ROWID_COLUMN,
    SCHEMA_PAGE,
    SENTINEL_PAGE_SIZE,
    SQLITE_MAGIC,
    CellId,
    PageNumber,
    PageType,
    TextEncoding,
)
from sqlite_decoder.domain.value_objects.sql_value import SqlValue, ValueKind

__all__ = [
    # Identifiers
    "PageNumber",
    "CellId",
    "PageType",
    "TextEncoding",
    "SCHEMA_PAGE",
    # Format constants
    "SQLITE_MAGIC",
    "FILE_HEADER_SIZE",
    "MIN_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PAGE_SIZE_SENTINEL",
    "SENTINEL_PAGE_SIZE",
    "LEAF_PAGE_HEADER_SIZE",
    "INTERIOR_PAGE_HEADER_SIZE",
    "CELL_POINTER_SIZE",
    "ROWID_COLUMN",
    # Values
    "SqlValue",
    "ValueKind",
]
