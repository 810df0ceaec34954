"""Shared workflow layer between the CLI and the entry store.

Resolves configuration into a store, and turns raw user input into the
arguments the store expects.
"""

from typing import Iterable

from .adapters.sqlite_store import SQLiteEntryStore
from .config import Config
from .core.entries import parse_keywords
from .ports.entry_store import EntryStore


def create_store(config: Config) -> SQLiteEntryStore:
    """Create a new database at the configured location."""
    return SQLiteEntryStore.initialize(config.database_path)


def open_store(config: Config) -> SQLiteEntryStore:
    """Open the existing database at the configured location."""
    return SQLiteEntryStore.open(config.database_path)


def read_content(lines: Iterable[str]) -> str:
    """Collect lines until a blank line or end of input, stripped."""
    collected = []
    for line in lines:
        if not line.strip():
            break
        collected.append(line.rstrip("\r\n"))
    return "\n".join(collected).strip()


def add_entry(store: EntryStore, title: str, content: str, raw_keywords: str) -> int:
    """Add an entry from prompt input. Returns the new id."""
    return store.add(parse_keywords(raw_keywords), title.strip(), content.strip())


def unique_ids(ids: Iterable[int]) -> list[int]:
    """Deduplicate and sort entry ids."""
    return sorted(set(ids))
