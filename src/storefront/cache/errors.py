"""Exceptions raised inside the cache layer.

None of these escape a cache facade: facades convert them into
``CacheResult`` misses or silent no-ops and log them.
"""

from __future__ import annotations


class CacheError(Exception):
    """Base class for cache layer errors."""


class CacheStorageError(CacheError):
    """The embedded store could not be opened, read or written."""

    def __init__(self, operation: str, table: str, cause: BaseException) -> None:
        super().__init__(f"{operation} on {table} failed: {cause}")
        self.operation = operation
        self.table = table
        self.cause = cause


class CorruptedEntryError(CacheError):
    """A stored entry could not be decoded into its payload model."""

    def __init__(self, key: str, cause: BaseException) -> None:
        super().__init__(f"Corrupted cache entry {key}: {cause}")
        self.key = key
        self.cause = cause
