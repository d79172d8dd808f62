"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the storage the decoder reads from.
"""

from sqlite_decoder.ports.outbound.page_store import PageStore

__all__ = [
    "PageStore",
]
