"""SQLite entry store adapter - single-table diary database."""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from didi.core.entries import (
    Entry,
    compute_hash,
    decode_keywords,
    encode_keywords,
    normalize_keywords,
    parse_timestamp,
    search_entries,
)

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE entries
(
    id       INTEGER NOT NULL,
    hash     BLOB    NOT NULL,
    date     TEXT    NOT NULL,
    keywords TEXT    NOT NULL,
    title    TEXT    NOT NULL,
    content  TEXT    NOT NULL,
    hidden   INTEGER NOT NULL,
    PRIMARY KEY (id AUTOINCREMENT),
    UNIQUE (id)
);
"""


class DiaryError(Exception):
    """Base class for diary storage errors."""

    pass


class NotFoundError(DiaryError):
    """Raised when the expected database does not exist."""

    pass


class AlreadyExistsError(DiaryError):
    """Raised when creating a database where something already exists."""

    pass


class StorageError(DiaryError):
    """Raised when the database cannot be opened, read or written."""

    pass


class SQLiteEntryStore:
    """
    SQLite-backed diary storage.

    Implements EntryStore protocol. One connection per process, used for a
    single command and closed afterwards. No business logic - just I/O.
    """

    def __init__(self, connection: sqlite3.Connection, path: Path):
        self.path = path
        self._conn = connection
        self._conn.row_factory = sqlite3.Row

    @classmethod
    def initialize(cls, path: Path | str) -> "SQLiteEntryStore":
        """Create a new, empty database at path."""
        path = Path(path)
        if path.exists():
            raise AlreadyExistsError(f"Something already exists at '{path}'")

        try:
            conn = sqlite3.connect(path)
        except sqlite3.Error as e:
            logger.error(f"Failed to create database at {path}: {e}")
            raise StorageError(f"Couldn't create database at '{path}': {e}") from e

        try:
            with conn:
                conn.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            conn.close()
            path.unlink(missing_ok=True)
            logger.error(f"Failed to create tables in {path}: {e}")
            raise StorageError(f"Couldn't create database tables: {e}") from e

        logger.debug(f"Created database at {path}")
        return cls(conn, path)

    @classmethod
    def open(cls, path: Path | str) -> "SQLiteEntryStore":
        """Open an existing database for reading and writing."""
        path = Path(path)
        if not path.exists():
            raise NotFoundError(f"No database found at '{path}'. Use `didi create` first.")

        uri = f"{path.resolve().as_uri()}?mode=rw"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            logger.error(f"Failed to open database at {path}: {e}")
            raise StorageError(f"Couldn't open database connection: {e}") from e

        try:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'entries'"
            ).fetchone()
        except sqlite3.Error as e:
            conn.close()
            raise StorageError(f"Couldn't read database at '{path}': {e}") from e

        if row is None:
            conn.close()
            raise StorageError(f"'{path}' is not a diary database (no entries table)")

        logger.debug(f"Opened database at {path}")
        return cls(conn, path)

    def __enter__(self) -> "SQLiteEntryStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def add(
        self,
        keywords: list[str],
        title: str,
        content: str,
        now: datetime | None = None,
    ) -> int:
        """
        Append a new visible entry.

        Keywords must already be lowercase; they are deduplicated and sorted
        here. Returns the id assigned by the database.
        """
        keywords = normalize_keywords(keywords)
        timestamp = (now or datetime.now().astimezone()).isoformat()
        digest = compute_hash(keywords, title, content, timestamp)

        try:
            with self._conn:
                cursor = self._conn.execute(
                    """
                    INSERT INTO entries (hash, date, keywords, title, content, hidden)
                    VALUES (?, ?, ?, ?, ?, 0)
                    """,
                    (digest, timestamp, encode_keywords(keywords), title, content),
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to insert entry: {e}")
            raise StorageError(f"Couldn't insert entry: {e}") from e

        logger.debug(f"Inserted entry {cursor.lastrowid}")
        return cursor.lastrowid

    def list_all(self) -> list[Entry]:
        """All entries ordered by id, hidden ones included."""
        try:
            rows = self._conn.execute(
                "SELECT id, hash, date, keywords, title, content, hidden FROM entries ORDER BY id"
            ).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to read entries: {e}")
            raise StorageError(f"Couldn't read entries: {e}") from e

        try:
            return [self._row_to_entry(row) for row in rows]
        except ValueError as e:
            logger.error(f"Failed to decode entry: {e}")
            raise StorageError(f"Couldn't read entries: {e}") from e

    def search(self, terms: list[str]) -> list[Entry]:
        """Entries whose title or keywords match any of the lowercase terms."""
        return search_entries(self.list_all(), terms)

    def set_hidden(self, ids: list[int], hidden: bool) -> int:
        """
        Set the hidden flag on each id in one transaction.

        Unknown ids are skipped. Returns the number of rows updated.
        """
        changed = 0
        try:
            with self._conn:
                for entry_id in ids:
                    cursor = self._conn.execute(
                        "UPDATE entries SET hidden = ? WHERE id = ?",
                        (int(hidden), entry_id),
                    )
                    changed += cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Failed to update entries: {e}")
            raise StorageError(f"Couldn't update entry: {e}") from e

        logger.debug(f"Set hidden={hidden} on {changed} of {len(ids)} entries")
        return changed

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> Entry:
        return Entry(
            id=row["id"],
            hash=bytes(row["hash"]),
            date=parse_timestamp(row["date"]),
            keywords=decode_keywords(row["keywords"]),
            title=row["title"],
            content=row["content"],
            hidden=bool(row["hidden"]),
        )
