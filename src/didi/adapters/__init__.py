"""Adapters - I/O implementations of ports."""

from .sqlite_store import (
    AlreadyExistsError,
    DiaryError,
    NotFoundError,
    SQLiteEntryStore,
    StorageError,
)

__all__ = [
    "SQLiteEntryStore",
    "DiaryError",
    "NotFoundError",
    "AlreadyExistsError",
    "StorageError",
]
