"""Domain services for decoding logic.

Services implement logic that spans several entities: resolving the
schema table into table definitions and pulling column names out of
CREATE TABLE text.
"""

from sqlite_decoder.domain.services.column_names import (
    extract_column_definitions,
    extract_column_names,
    is_rowid_alias,
)
from sqlite_decoder.domain.services.schema_resolver import SchemaResolver

__all__ = [
    "SchemaResolver",
    "extract_column_definitions",
    "extract_column_names",
    "is_rowid_alias",
]
