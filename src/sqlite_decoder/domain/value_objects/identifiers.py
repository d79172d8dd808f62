"""Core identifiers and file-format constants for the SQLite decoder.

These value objects give type-safe names to the raw integers that flow
through the decoding pipeline (page numbers, page types, text encodings)
and collect the fixed constants of the on-disk format in one place.

References:
    - https://www.sqlite.org/fileformat2.html (Sections 1.3 and 1.6)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import NewType


PageNumber = NewType("PageNumber", int)
"""1-based page number inside a database file. Page 1 holds the file header."""

SCHEMA_PAGE = PageNumber(1)

# File header
SQLITE_MAGIC = b"SQLite format 3\x00"
FILE_HEADER_SIZE = 100

# Page size limits
MIN_PAGE_SIZE = 512
MAX_PAGE_SIZE = 32768
PAGE_SIZE_SENTINEL = 1
"""Raw page-size value that stands for 65536 (does not fit in a u16)."""
SENTINEL_PAGE_SIZE = 65536

# B-tree page headers
LEAF_PAGE_HEADER_SIZE = 8
INTERIOR_PAGE_HEADER_SIZE = 12
CELL_POINTER_SIZE = 2

# Name of the synthetic column carrying a row's rowid
ROWID_COLUMN = "_rowid_"


class PageType(IntEnum):
    """B-tree page type byte."""

    INTERIOR_INDEX = 0x02
    INTERIOR_TABLE = 0x05
    LEAF_INDEX = 0x0A
    LEAF_TABLE = 0x0D

    @property
    def is_leaf(self) -> bool:
        return self in (PageType.LEAF_INDEX, PageType.LEAF_TABLE)

    @property
    def is_table(self) -> bool:
        return self in (PageType.INTERIOR_TABLE, PageType.LEAF_TABLE)


class TextEncoding(IntEnum):
    """Database text encoding stored at header offset 56."""

    UTF8 = 1
    UTF16LE = 2
    UTF16BE = 3

    @property
    def codec(self) -> str:
        """Python codec name for this encoding."""
        return {
            TextEncoding.UTF8: "utf-8",
            TextEncoding.UTF16LE: "utf-16-le",
            TextEncoding.UTF16BE: "utf-16-be",
        }[self]

    @classmethod
    def from_header(cls, raw: int) -> TextEncoding:
        """Map the raw header value, treating unknown values as UTF-8.

        An empty database may carry 0 here until the first table is created.
        """
        try:
            return cls(raw)
        except ValueError:
            return cls.UTF8


@dataclass(frozen=True, slots=True)
class CellId:
    """Location of a cell: the page it lives on and its index in the pointer array.

    Attributes:
        page_number: The page containing this cell
        index: Position of the cell in the page's cell pointer array

    Example:
        >>> cid = CellId(PageNumber(2), 0)
        >>> cid.page_number
        2
    """

    page_number: PageNumber
    index: int

    def __post_init__(self) -> None:
        """Validate the cell location."""
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")

    def __repr__(self) -> str:
        return f"Cell({self.page_number}:{self.index})"

    def __str__(self) -> str:
        return f"({self.page_number}, {self.index})"
