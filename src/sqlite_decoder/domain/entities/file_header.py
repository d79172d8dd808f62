"""The 100-byte SQLite database file header.

Header Layout (all multi-byte fields big-endian):
    ┌────────┬──────┬──────────────────────────────────────────────┐
    │ Offset │ Size │ Field                                        │
    ├────────┼──────┼──────────────────────────────────────────────┤
    │    0   │  16  │ Magic "SQLite format 3\\0"                    │
    │   16   │   2  │ Page size (1 means 65536)                    │
    │   18   │   1  │ File format write version                    │
    │   19   │   1  │ File format read version                     │
    │   20   │   1  │ Reserved bytes at the end of each page       │
    │   21   │   3  │ Max / min embedded / leaf payload fractions  │
    │   24   │   4  │ File change counter                          │
    │   28   │   4  │ Database size in pages                       │
    │   32   │   4  │ First freelist trunk page                    │
    │   36   │   4  │ Total freelist pages                         │
    │   40   │   4  │ Schema cookie                                │
    │   44   │   4  │ Schema format number                         │
    │   48   │   4  │ Default page cache size                      │
    │   52   │   4  │ Largest root b-tree page (auto-vacuum)       │
    │   56   │   4  │ Text encoding (1 UTF-8, 2 UTF-16le, 3 BE)    │
    │   60   │   4  │ User version                                 │
    │   64   │   4  │ Incremental vacuum mode                      │
    │   68   │   4  │ Application ID                               │
    │   72   │  20  │ Reserved for expansion (zero)                │
    │   92   │   4  │ Version-valid-for number                     │
    │   96   │   4  │ SQLITE_VERSION_NUMBER                        │
    └────────┴──────┴──────────────────────────────────────────────┘

Only the page size is consumed by the decoding pipeline (plus the text
encoding for TEXT values); the rest is decoded for inspection.

References:
    - https://www.sqlite.org/fileformat2.html#the_database_header
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from sqlite_decoder.domain.errors import (
    InvalidHeaderError,
    InvalidPageSizeError,
    TruncatedHeaderError,
)
from sqlite_decoder.domain.value_objects import (
    FILE_HEADER_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    PAGE_SIZE_SENTINEL,
    SENTINEL_PAGE_SIZE,
    SQLITE_MAGIC,
    TextEncoding,
)


def derive_page_size(raw: int) -> int:
    """Turn the raw 16-bit page-size field into the effective page size.

    Args:
        raw: Value stored at header offset 16

    Returns:
        65536 for the sentinel value 1, otherwise raw itself

    Raises:
        InvalidPageSizeError: If raw is neither the sentinel nor a power of
            two in [512, 32768].
    """
    if raw == PAGE_SIZE_SENTINEL:
        return SENTINEL_PAGE_SIZE
    if MIN_PAGE_SIZE <= raw <= MAX_PAGE_SIZE and raw & (raw - 1) == 0:
        return raw
    raise InvalidPageSizeError(raw)


@dataclass(frozen=True)
class FileHeader:
    """Parsed database file header. Immutable once parsed."""

    magic: bytes
    raw_page_size: int
    page_size: int
    write_version: int
    read_version: int
    reserved_space: int
    max_payload_fraction: int
    min_payload_fraction: int
    leaf_payload_fraction: int
    change_counter: int
    database_size: int
    first_freelist_trunk: int
    freelist_count: int
    schema_cookie: int
    schema_format: int
    default_cache_size: int
    largest_root_page: int
    text_encoding_raw: int
    user_version: int
    incremental_vacuum: int
    application_id: int
    version_valid_for: int
    sqlite_version: int

    HEADER_SIZE: ClassVar[int] = FILE_HEADER_SIZE
    # magic, page size, 6 single-byte fields, 12 u32 fields, 20 reserved, 2 u32 fields
    HEADER_FORMAT: ClassVar[str] = ">16sH6B12I20x2I"

    @property
    def text_encoding(self) -> TextEncoding:
        """Text encoding, with unknown values treated as UTF-8."""
        return TextEncoding.from_header(self.text_encoding_raw)

    @property
    def usable_size(self) -> int:
        """Bytes per page available to b-tree content."""
        return self.page_size - self.reserved_space

    @classmethod
    def from_bytes(cls, data: bytes) -> FileHeader:
        """Validate and parse a file header.

        Args:
            data: At least the first 100 bytes of the database file

        Raises:
            TruncatedHeaderError: If fewer than 100 bytes are supplied.
            InvalidHeaderError: If the magic string does not match. No other
                field is read in that case.
            InvalidPageSizeError: If the page-size field is illegal.
        """
        if len(data) < cls.HEADER_SIZE:
            raise TruncatedHeaderError(
                f"File header requires {cls.HEADER_SIZE} bytes, got {len(data)}"
            )

        if bytes(data[: len(SQLITE_MAGIC)]) != SQLITE_MAGIC:
            raise InvalidHeaderError(
                f"Not a SQLite 3 database: bad magic {bytes(data[:16])!r}"
            )

        (
            magic,
            raw_page_size,
            write_version,
            read_version,
            reserved_space,
            max_payload_fraction,
            min_payload_fraction,
            leaf_payload_fraction,
            change_counter,
            database_size,
            first_freelist_trunk,
            freelist_count,
            schema_cookie,
            schema_format,
            default_cache_size,
            largest_root_page,
            text_encoding_raw,
            user_version,
            incremental_vacuum,
            application_id,
            version_valid_for,
            sqlite_version,
        ) = struct.unpack(cls.HEADER_FORMAT, bytes(data[: cls.HEADER_SIZE]))

        return cls(
            magic=magic,
            raw_page_size=raw_page_size,
            page_size=derive_page_size(raw_page_size),
            write_version=write_version,
            read_version=read_version,
            reserved_space=reserved_space,
            max_payload_fraction=max_payload_fraction,
            min_payload_fraction=min_payload_fraction,
            leaf_payload_fraction=leaf_payload_fraction,
            change_counter=change_counter,
            database_size=database_size,
            first_freelist_trunk=first_freelist_trunk,
            freelist_count=freelist_count,
            schema_cookie=schema_cookie,
            schema_format=schema_format,
            default_cache_size=default_cache_size,
            largest_root_page=largest_root_page,
            text_encoding_raw=text_encoding_raw,
            user_version=user_version,
            incremental_vacuum=incremental_vacuum,
            application_id=application_id,
            version_valid_for=version_valid_for,
            sqlite_version=sqlite_version,
        )
