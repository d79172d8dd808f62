"""B-tree page header and leaf table page cell iteration.

Page Layout (leaf table b-tree, type 0x0D):
    ┌─────────────────────────────────────────────────────────────┐
    │ File header (100 bytes, page 1 only)                         │
    ├─────────────────────────────────────────────────────────────┤
    │ Page Header (8 bytes)                                        │
    │ ┌──────┬───────────┬──────────┬──────────────┬────────────┐ │
    │ │ Type │ Freeblock │ Cell Cnt │ Content Start│ Fragmented │ │
    │ │ (1B) │   (2B)    │   (2B)   │    (2B)      │    (1B)    │ │
    │ └──────┴───────────┴──────────┴──────────────┴────────────┘ │
    ├─────────────────────────────────────────────────────────────┤
    │ Cell Pointer Array (2 bytes per cell, offsets from page start)│
    ├─────────────────────────────────────────────────────────────┤
    │                    Unallocated space                         │
    ├─────────────────────────────────────────────────────────────┤
    │ Cell content area                                            │
    │ ┌──────────────┬─────────┬──────────────────────────────┐   │
    │ │ payload size │  rowid  │ record (header + body)       │   │
    │ │   (varint)   │(varint) │                              │   │
    │ └──────────────┴─────────┴──────────────────────────────┘   │
    └─────────────────────────────────────────────────────────────┘

Cell pointers are offsets from the start of the page buffer, even on
page 1 where the page header itself starts at byte 100.

References:
    - https://www.sqlite.org/fileformat2.html#b_tree_pages
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterator

from sqlite_decoder.domain.codec import decode_varint, read_u8, read_u16, read_u32
from sqlite_decoder.domain.entities.record import Record
from sqlite_decoder.domain.errors import TruncatedRecordError, UnsupportedPageTypeError
from sqlite_decoder.domain.value_objects import (
    CELL_POINTER_SIZE,
    FILE_HEADER_SIZE,
    INTERIOR_PAGE_HEADER_SIZE,
    LEAF_PAGE_HEADER_SIZE,
    SCHEMA_PAGE,
    CellId,
    PageNumber,
    PageType,
    TextEncoding,
)


def header_offset_for(page_number: PageNumber) -> int:
    """Byte offset of the b-tree page header inside a page buffer."""
    return FILE_HEADER_SIZE if page_number == SCHEMA_PAGE else 0


@dataclass(frozen=True)
class BTreePageHeader:
    """B-tree page header (8 bytes for leaves, 12 for interior pages)."""

    page_type: int
    first_freeblock: int
    cell_count: int
    cell_content_start: int
    fragmented_bytes: int
    rightmost_pointer: int | None

    HEADER_FORMAT: ClassVar[str] = ">BHHHB"

    @property
    def type(self) -> PageType | None:
        """The page type, or None for a byte that is not a b-tree page type."""
        try:
            return PageType(self.page_type)
        except ValueError:
            return None

    @property
    def is_leaf_table(self) -> bool:
        return self.page_type == PageType.LEAF_TABLE

    @property
    def size(self) -> int:
        return INTERIOR_PAGE_HEADER_SIZE if self.rightmost_pointer is not None else LEAF_PAGE_HEADER_SIZE

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> BTreePageHeader:
        """Parse a page header at offset.

        Raises:
            TruncatedRecordError: If the header runs past the buffer.
        """
        page_type = read_u8(data, offset)
        first_freeblock = read_u16(data, offset + 1)
        cell_count = read_u16(data, offset + 3)
        cell_content_start = read_u16(data, offset + 5) or 65536
        fragmented_bytes = read_u8(data, offset + 7)

        rightmost_pointer = None
        if page_type in (PageType.INTERIOR_INDEX, PageType.INTERIOR_TABLE):
            rightmost_pointer = read_u32(data, offset + 8)

        return cls(
            page_type=page_type,
            first_freeblock=first_freeblock,
            cell_count=cell_count,
            cell_content_start=cell_content_start,
            fragmented_bytes=fragmented_bytes,
            rightmost_pointer=rightmost_pointer,
        )


@dataclass(frozen=True)
class Cell:
    """One leaf table cell: its rowid and where its payload sits in the page."""

    cell_id: CellId
    offset: int
    rowid: int
    payload_size: int
    payload_start: int

    @property
    def payload_end(self) -> int:
        return self.payload_start + self.payload_size


class LeafTablePage:
    """Read-only view of a leaf table b-tree page.

    Construction validates the page type and the cell pointer array; cells
    are decoded lazily by :meth:`cells`.

    Thread Safety:
        Instances hold an immutable bytes buffer and are safe to share.

    Example:
        >>> page = LeafTablePage(store.read_page(PageNumber(2)), PageNumber(2))
        >>> for cell in page.cells():
        ...     record = page.record(cell)
    """

    def __init__(self, data: bytes, page_number: PageNumber) -> None:
        """Wrap a page buffer.

        Args:
            data: The full page buffer
            page_number: Number of the page (selects the header offset)

        Raises:
            UnsupportedPageTypeError: If the page is not a leaf table page.
            TruncatedRecordError: If the header or pointer array runs past
                the page.
        """
        self._data = bytes(data)
        self._page_number = page_number
        self._header_offset = header_offset_for(page_number)

        page_type = read_u8(self._data, self._header_offset)
        if page_type != PageType.LEAF_TABLE:
            raise UnsupportedPageTypeError(page_number, page_type)

        self._header = BTreePageHeader.from_bytes(self._data, self._header_offset)
        self._pointers = self._load_pointers()

    def _load_pointers(self) -> list[int]:
        """Load the cell pointer array."""
        start = self._header_offset + LEAF_PAGE_HEADER_SIZE
        end = start + self._header.cell_count * CELL_POINTER_SIZE
        if end > len(self._data):
            raise TruncatedRecordError(
                f"Cell pointer array of {self._header.cell_count} entries "
                f"overruns page {self._page_number}"
            )

        pointers = []
        for i in range(self._header.cell_count):
            pointer = read_u16(self._data, start + i * CELL_POINTER_SIZE)
            if pointer < end or pointer >= len(self._data):
                raise TruncatedRecordError(
                    f"Cell pointer {pointer} on page {self._page_number} is outside the content area"
                )
            pointers.append(pointer)
        return pointers

    @property
    def page_number(self) -> PageNumber:
        return self._page_number

    @property
    def header(self) -> BTreePageHeader:
        return self._header

    @property
    def header_offset(self) -> int:
        return self._header_offset

    @property
    def cell_count(self) -> int:
        return self._header.cell_count

    @property
    def cell_pointers(self) -> list[int]:
        return list(self._pointers)

    def cell(self, index: int) -> Cell:
        """Decode the cell at position index of the pointer array.

        Raises:
            IndexError: If index is out of range.
            MalformedVarintError: If the size or rowid varint is truncated.
            TruncatedRecordError: If the payload extends past the page
                (it would need overflow pages).
        """
        offset = self._pointers[index]
        payload_size, used = decode_varint(self._data, offset)
        rowid, rowid_used = decode_varint(self._data, offset + used)
        payload_start = offset + used + rowid_used

        if payload_start + payload_size > len(self._data):
            raise TruncatedRecordError(
                f"Payload of {payload_size} bytes for cell {index} overruns page "
                f"{self._page_number}"
            )

        # Rowids are signed 64-bit; the varint carries the two's complement bits
        if rowid >= 1 << 63:
            rowid -= 1 << 64

        return Cell(
            cell_id=CellId(self._page_number, index),
            offset=offset,
            rowid=rowid,
            payload_size=payload_size,
            payload_start=payload_start,
        )

    def cells(self) -> Iterator[Cell]:
        """Yield cells in pointer-array order."""
        for index in range(len(self._pointers)):
            yield self.cell(index)

    def payload(self, cell: Cell) -> memoryview:
        """Zero-copy view of a cell's record bytes."""
        return memoryview(self._data)[cell.payload_start : cell.payload_end]

    def record(
        self,
        cell: Cell,
        encoding: TextEncoding = TextEncoding.UTF8,
        **kwargs,
    ) -> Record:
        """Decode a cell's payload with :meth:`Record.decode`."""
        return Record.decode(self.payload(cell), encoding, **kwargs)

    def __len__(self) -> int:
        return self.cell_count

    def __repr__(self) -> str:
        return f"LeafTablePage(page={self._page_number}, cells={self.cell_count})"
