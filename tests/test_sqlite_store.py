"""Tests for the SQLite entry store."""

import sqlite3
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from didi.adapters.sqlite_store import (
    AlreadyExistsError,
    NotFoundError,
    SQLiteEntryStore,
    StorageError,
)
from didi.core.entries import compute_hash


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "diary.sqlite"


@pytest.fixture
def store(db_path):
    s = SQLiteEntryStore.initialize(db_path)
    yield s
    s.close()


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 20, 30, 5, 123456, tzinfo=timezone(timedelta(hours=1)))


class TestInitialize:
    def test_creates_file_with_entries_table(self, db_path):
        SQLiteEntryStore.initialize(db_path).close()

        assert db_path.exists()
        conn = sqlite3.connect(db_path)
        columns = [row[1] for row in conn.execute("PRAGMA table_info(entries)")]
        conn.close()
        assert columns == ["id", "hash", "date", "keywords", "title", "content", "hidden"]

    def test_removes_file_when_schema_fails(self, db_path):
        with patch("didi.adapters.sqlite_store.SCHEMA_SQL", "CREATE TABLE broken (;"):
            with pytest.raises(StorageError, match="tables"):
                SQLiteEntryStore.initialize(db_path)

        assert not db_path.exists()
        SQLiteEntryStore.initialize(db_path).close()

    def test_fails_if_location_exists(self, db_path):
        db_path.write_text("")
        with pytest.raises(AlreadyExistsError):
            SQLiteEntryStore.initialize(db_path)

    def test_fails_if_directory_missing(self, tmp_path):
        with pytest.raises(StorageError):
            SQLiteEntryStore.initialize(tmp_path / "missing" / "diary.sqlite")

    def test_new_store_is_empty(self, store):
        assert store.list_all() == []


class TestOpen:
    def test_fails_if_missing(self, db_path):
        with pytest.raises(NotFoundError):
            SQLiteEntryStore.open(db_path)

    def test_opens_existing(self, db_path):
        SQLiteEntryStore.initialize(db_path).close()
        with SQLiteEntryStore.open(db_path) as store:
            assert store.path == db_path
            assert store.list_all() == []

    def test_rejects_database_without_entries_table(self, db_path):
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE other (x INTEGER)")
        conn.commit()
        conn.close()

        with pytest.raises(StorageError, match="not a diary database"):
            SQLiteEntryStore.open(db_path)

    def test_rejects_non_sqlite_file(self, db_path):
        db_path.write_text("this is not a database, just some text " * 50)
        with pytest.raises(StorageError):
            SQLiteEntryStore.open(db_path)


class TestAdd:
    def test_add_then_list_yields_one_entry(self, store, now):
        entry_id = store.add(["work", "cat", "work"], "My cat diary", "Line one\nLine two", now=now)

        entries = store.list_all()
        assert len(entries) == 1
        entry = entries[0]
        assert entry.id == entry_id
        assert entry.keywords == ["cat", "work"]
        assert entry.title == "My cat diary"
        assert entry.content == "Line one\nLine two"
        assert entry.hidden is False
        assert entry.date == now

    def test_hash_is_computed_from_fields_and_timestamp(self, store, now):
        store.add(["cat"], "Title", "Body", now=now)
        entry = store.list_all()[0]
        assert entry.hash == compute_hash(["cat"], "Title", "Body", now.isoformat())

    def test_defaults_to_current_local_time(self, store):
        before = datetime.now().astimezone()
        store.add([], "Now", "")
        after = datetime.now().astimezone()

        entry = store.list_all()[0]
        assert entry.date.tzinfo is not None
        assert before <= entry.date <= after

    def test_empty_keywords_round_trip(self, store):
        store.add([], "No keywords", "Body")
        assert store.list_all()[0].keywords == []

    def test_ids_strictly_increase(self, store):
        ids = [store.add([], f"Entry {i}", "") for i in range(5)]
        assert ids == sorted(ids)
        assert len(set(ids)) == 5
        assert [e.id for e in store.list_all()] == ids

    def test_ids_not_reused(self, db_path):
        with SQLiteEntryStore.initialize(db_path) as store:
            store.add([], "First", "")
            last = store.add([], "Second", "")

        # Remove the newest row out of band; autoincrement must not hand its id out again
        conn = sqlite3.connect(db_path)
        conn.execute("DELETE FROM entries WHERE id = ?", (last,))
        conn.commit()
        conn.close()

        with SQLiteEntryStore.open(db_path) as store:
            assert store.add([], "Third", "") > last


class TestSearch:
    @pytest.fixture
    def populated(self, store):
        store.add(["cat"], "My cat diary", "Purring.")
        store.add(["dog"], "Dog walk", "Muddy.")
        store.add(["garden"], "Weeding", "Cat ran past.")
        return store

    def test_finds_matching_title_and_keyword(self, populated):
        titles = [e.title for e in populated.search(["cat"])]
        assert titles == ["My cat diary"]

    def test_content_is_not_searched(self, populated):
        assert populated.search(["ran"]) == []

    def test_multiple_terms(self, populated):
        titles = [e.title for e in populated.search(["dog", "garden"])]
        assert titles == ["Dog walk", "Weeding"]

    def test_includes_hidden_entries(self, populated):
        populated.set_hidden([1], True)
        assert [e.id for e in populated.search(["cat"])] == [1]


class TestSetHidden:
    def test_hides_existing_entry(self, store):
        for i in range(5):
            store.add([], f"Entry {i + 1}", "")

        assert store.set_hidden([5], True) == 1
        hidden = {e.id: e.hidden for e in store.list_all()}
        assert hidden[5] is True
        assert hidden[4] is False

    def test_missing_id_is_noop(self, store):
        store.add([], "Only", "")
        assert store.set_hidden([999], True) == 0
        assert store.list_all()[0].hidden is False

    def test_counts_only_existing_ids(self, store):
        store.add([], "One", "")
        store.add([], "Two", "")
        assert store.set_hidden([1, 2, 999], True) == 2

    def test_unhide(self, store):
        store.add([], "One", "")
        store.set_hidden([1], True)
        assert store.set_hidden([1], False) == 1
        assert store.list_all()[0].hidden is False


class TestReopen:
    def test_keywords_and_hash_survive_reopen(self, db_path, now):
        with SQLiteEntryStore.initialize(db_path) as store:
            store.add(["zebra", "apple", "mango"], "Fruit", "Mostly apples", now=now)
            before = store.list_all()[0]

        with SQLiteEntryStore.open(db_path) as store:
            after = store.list_all()[0]

        assert after.keywords == ["apple", "mango", "zebra"]
        assert after.hash == before.hash
        assert after == before

    def test_keywords_stored_semicolon_joined(self, db_path, now):
        with SQLiteEntryStore.initialize(db_path) as store:
            store.add(["b", "a"], "T", "C", now=now)

        conn = sqlite3.connect(db_path)
        row = conn.execute("SELECT keywords, date, hidden FROM entries").fetchone()
        conn.close()
        assert row == ("a;b", now.isoformat(), 0)


class TestStoredDates:
    def _insert_raw(self, db_path, date):
        conn = sqlite3.connect(db_path)
        conn.execute(
            "INSERT INTO entries (hash, date, keywords, title, content, hidden) VALUES (?, ?, ?, ?, ?, 0)",
            (b"\x00" * 32, date, "cat", "Old entry", "Body"),
        )
        conn.commit()
        conn.close()

    def test_malformed_date_raises_storage_error(self, db_path):
        SQLiteEntryStore.initialize(db_path).close()
        self._insert_raw(db_path, "garbage")

        with SQLiteEntryStore.open(db_path) as store:
            with pytest.raises(StorageError, match="garbage"):
                store.list_all()
            with pytest.raises(StorageError):
                store.search(["cat"])

    def test_nanosecond_timestamp_is_readable(self, db_path):
        SQLiteEntryStore.initialize(db_path).close()
        self._insert_raw(db_path, "2021-03-04T10:11:12.123456789+01:00")

        with SQLiteEntryStore.open(db_path) as store:
            entry = store.list_all()[0]

        assert entry.date == datetime(2021, 3, 4, 10, 11, 12, 123456, tzinfo=timezone(timedelta(hours=1)))
