"""Domain entities for the decoder.

Entities wrap the structures found on disk: the file header, b-tree
pages and their cells, records, and schema rows.

Exports:
    File header:
        - FileHeader: Parsed 100-byte database header
        - derive_page_size: Raw page-size field to effective page size

    B-tree pages:
        - BTreePageHeader: Page header of any b-tree page type
        - LeafTablePage: Leaf table page with cell iteration
        - Cell: Rowid and payload bounds of one leaf cell
        - header_offset_for: Page header offset (100 on page 1, else 0)

    Records:
        - Record: Decoded record (serial types + values)
        - serial_type_length, serial_type_kind: Serial type rules
        - decode_value, decode_integer: Column value decoding

    Schema:
        - TableSchema: A table row of sqlite_schema
        - SchemaColumn: Column positions of sqlite_schema
"""

from sqlite_decoder.domain.entities.btree_page import (
    BTreePageHeader,
    Cell,
    LeafTablePage,
    header_offset_for,
)
from sqlite_decoder.domain.entities.file_header import FileHeader, derive_page_size
from sqlite_decoder.domain.entities.record import (
    Record,
    decode_integer,
    decode_value,
    serial_type_kind,
    serial_type_length,
)
from sqlite_decoder.domain.entities.schema import TABLE_KIND, SchemaColumn, TableSchema

__all__ = [
    # File header
    "FileHeader",
    "derive_page_size",
    # B-tree pages
    "BTreePageHeader",
    "Cell",
    "LeafTablePage",
    "header_offset_for",
    # Records
    "Record",
    "decode_integer",
    "decode_value",
    "serial_type_kind",
    "serial_type_length",
    # Schema
    "TableSchema",
    "SchemaColumn",
    "TABLE_KIND",
]
