"""Outbound adapters - implementations of outbound ports.

These adapters implement the storage the decoder reads pages from.
"""

from sqlite_decoder.adapters.outbound.file_page_store import FilePageStore

__all__ = [
    "FilePageStore",
]
