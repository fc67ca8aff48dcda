"""Tests for the storage layer."""

import json
from datetime import datetime

import pytest

from dictation_master.comparison import ProperNounSet
from dictation_master.errors import ValidationError
from dictation_master.models import Note, Session
from dictation_master.storage import (
    NOTES_FILENAME,
    PROPER_NOUNS_FILENAME,
    SESSIONS_FILENAME,
    NoteStore,
    NotFoundError,
    ProperNounStore,
    SessionStore,
    StorageError,
    atomic_write,
    atomic_write_json,
    read_json,
)


class TestAtomicWrite:
    """Tests for atomic file helpers."""

    def test_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / "file.txt"
        atomic_write(path, "hello")

        assert path.read_text() == "hello"

    def test_overwrites_without_leftovers(self, tmp_path):
        path = tmp_path / "file.json"
        atomic_write_json(path, {"v": 1})
        atomic_write_json(path, {"v": 2})

        assert read_json(path) == {"v": 2}
        assert list(tmp_path.iterdir()) == [path]

    def test_keeps_unicode(self, tmp_path):
        path = tmp_path / "nouns.json"
        atomic_write_json(path, ["zoë"])

        assert "zoë" in path.read_text(encoding="utf-8")

    def test_read_missing(self, tmp_path):
        with pytest.raises(NotFoundError):
            read_json(tmp_path / "missing.json")

    def test_read_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")

        with pytest.raises(StorageError, match="Invalid JSON"):
            read_json(path)


class TestSessionStore:
    """Tests for SessionStore."""

    def test_empty(self, tmp_path):
        assert SessionStore(tmp_path).load() == []

    def test_create_numbers_sequentially(self, tmp_path):
        store = SessionStore(tmp_path)

        assert store.create().id == 1
        assert store.create().id == 2
        assert [s.id for s in store.load()] == [1, 2]

    def test_save_and_get(self, tmp_path):
        """Test attempts and scores survive a reload."""
        store = SessionStore(tmp_path)
        session = store.create()
        session.set_original_text("hello world")
        attempt = session.add_attempt("hello wrold")
        store.save(session)

        loaded = store.get(session.id)

        assert loaded.original_text == "hello world"
        assert loaded.attempts[0].id == attempt.id
        assert loaded.attempts[0].accuracy == 33

    def test_file_uses_camel_case(self, tmp_path):
        store = SessionStore(tmp_path)
        session = store.create()
        session.add_attempt("hi")
        store.save(session)

        data = json.loads((tmp_path / SESSIONS_FILENAME).read_text())

        assert "createdAt" in data[0]
        assert "userText" in data[0]["attempts"][0]

    def test_get_missing(self, tmp_path):
        with pytest.raises(NotFoundError, match="Session not found: 9"):
            SessionStore(tmp_path).get(9)

    def test_replace_all_sorts(self, tmp_path):
        store = SessionStore(tmp_path)
        store.replace_all([Session(id=3), Session(id=1)])

        assert [s.id for s in store.load()] == [1, 3]
        assert store.create().id == 4

    def test_rescore_all(self, tmp_path):
        """Test stored scores are recomputed with new proper nouns."""
        store = SessionStore(tmp_path)
        scored = store.create()
        scored.set_original_text("I met John yesterday.")
        scored.add_attempt("I met jon yesterday")
        store.save(scored)
        unscored = store.create()
        unscored.add_attempt("hello")
        store.save(unscored)

        assert store.rescore_all({"john"}) == 1
        assert store.get(1).attempts[0].accuracy == 100
        assert store.get(2).attempts[0].accuracy is None

    def test_rescore_all_without_sessions(self, tmp_path):
        assert SessionStore(tmp_path).rescore_all({"john"}) == 0
        assert not (tmp_path / SESSIONS_FILENAME).exists()

    def test_malformed_file(self, tmp_path):
        (tmp_path / SESSIONS_FILENAME).write_text(json.dumps([{"id": "x"}]))

        with pytest.raises(StorageError, match="Invalid data"):
            SessionStore(tmp_path).load()


class TestNoteStore:
    """Tests for NoteStore."""

    def test_create_and_get(self, tmp_path):
        store = NoteStore(tmp_path)
        note = store.create("their / there / they're")

        assert store.get(note.id).content == "their / there / they're"
        assert (tmp_path / NOTES_FILENAME).exists()

    def test_create_empty(self, tmp_path):
        with pytest.raises(ValidationError):
            NoteStore(tmp_path).create("  ")

        assert not (tmp_path / NOTES_FILENAME).exists()

    def test_search_newest_first(self, tmp_path):
        """Test search filters case-insensitively, latest edit first."""
        store = NoteStore(tmp_path)
        store.replace_all(
            [
                Note(id="a", content="Silent letters", updated_at=datetime(2024, 1, 1)),
                Note(id="b", content="Double letters", updated_at=datetime(2024, 3, 1)),
                Note(id="c", content="Commas", updated_at=datetime(2024, 2, 1)),
            ]
        )

        assert [n.id for n in store.search()] == ["b", "c", "a"]
        assert [n.id for n in store.search("LETTERS")] == ["b", "a"]
        assert store.search("missing") == []

    def test_update(self, tmp_path):
        store = NoteStore(tmp_path)
        note = store.create("first")

        store.update(note.id, "second")

        assert store.get(note.id).content == "second"

    def test_update_missing(self, tmp_path):
        with pytest.raises(NotFoundError):
            NoteStore(tmp_path).update("missing", "text")

    def test_delete(self, tmp_path):
        store = NoteStore(tmp_path)
        note = store.create("first")

        assert store.delete(note.id) is True
        assert store.delete(note.id) is False
        assert store.load() == []


class TestProperNounStore:
    """Tests for ProperNounStore."""

    def test_empty(self, tmp_path):
        assert len(ProperNounStore(tmp_path).load()) == 0

    def test_add_and_remove(self, tmp_path):
        store = ProperNounStore(tmp_path)

        assert store.add("John") is True
        assert store.add("john") is False
        assert store.load().to_list() == ["john"]

        assert store.remove("john") is True
        assert store.remove("john") is False
        assert store.load().to_list() == []

    def test_saves_plain_list(self, tmp_path):
        ProperNounStore(tmp_path).save(ProperNounSet(["paris", "rome"]))

        assert json.loads((tmp_path / PROPER_NOUNS_FILENAME).read_text()) == ["paris", "rome"]

    def test_not_a_list(self, tmp_path):
        (tmp_path / PROPER_NOUNS_FILENAME).write_text(json.dumps({"john": True}))

        with pytest.raises(StorageError):
            ProperNounStore(tmp_path).load()
