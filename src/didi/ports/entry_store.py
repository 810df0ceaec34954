"""Entry storage interface."""

from datetime import datetime
from typing import Protocol

from didi.core.entries import Entry


class EntryStore(Protocol):
    """Interface for persisting and querying diary entries."""

    def add(
        self,
        keywords: list[str],
        title: str,
        content: str,
        now: datetime | None = None,
    ) -> int:
        """Append a new visible entry. Returns the assigned id."""
        ...

    def list_all(self) -> list[Entry]:
        """All entries in storage order, hidden ones included."""
        ...

    def search(self, terms: list[str]) -> list[Entry]:
        """Entries whose title or keywords match any term."""
        ...

    def set_hidden(self, ids: list[int], hidden: bool) -> int:
        """Set the hidden flag on the given ids. Returns rows changed."""
        ...

    def close(self) -> None:
        ...
