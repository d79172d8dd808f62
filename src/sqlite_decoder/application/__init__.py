"""Application layer for the decoder.

The application layer orchestrates domain logic to fulfill use cases:
opening a database, listing its tables and scanning a table.

Exports:
    Database:
        - Database: Read-only handle on a database file
        - open_database: Shorthand for Database.open
    Executor:
        - QueryExecutor: Scans single-leaf tables into rows
        - QueryResult: Columns, rows and status of a query
        - QueryStatus: Outcome of a query
        - Row: A decoded row (column name to SqlValue)
"""

from sqlite_decoder.application.database import Database, open_database
from sqlite_decoder.application.executor import (
    QueryExecutor,
    QueryResult,
    QueryStatus,
    Row,
)

__all__ = [
    "Database",
    "open_database",
    "QueryExecutor",
    "QueryResult",
    "QueryStatus",
    "Row",
]
