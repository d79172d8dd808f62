"""
SQLite Decoder - read-only SQLite database file reader

Interprets the SQLite 3 on-disk format directly, without a database
engine: header validation, page reads, record decoding, schema lookup
and full scans of single-leaf tables.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"

from sqlite_decoder.application import (
    Database,
    QueryResult,
    QueryStatus,
    Row,
    open_database,
)
from sqlite_decoder.domain.errors import (
    DatabaseFileNotFoundError,
    DatabaseIOError,
    DecoderError,
    ErrorCode,
    InvalidHeaderError,
    InvalidPageNumberError,
    InvalidPageSizeError,
    MalformedVarintError,
    TruncatedHeaderError,
    TruncatedPageError,
    TruncatedRecordError,
    UnsupportedPageTypeError,
)
from sqlite_decoder.domain.value_objects import SqlValue, TextEncoding, ValueKind

__all__ = [
    "__version__",
    "Database",
    "open_database",
    "QueryResult",
    "QueryStatus",
    "Row",
    "SqlValue",
    "TextEncoding",
    "ValueKind",
    "DecoderError",
    "ErrorCode",
    "DatabaseFileNotFoundError",
    "DatabaseIOError",
    "TruncatedHeaderError",
    "TruncatedPageError",
    "InvalidHeaderError",
    "InvalidPageSizeError",
    "InvalidPageNumberError",
    "UnsupportedPageTypeError",
    "TruncatedRecordError",
    "MalformedVarintError",
]
