"""Tests for session and note models."""

import pytest

from dictation_master.errors import ResourceError, ValidationError
from dictation_master.models import Attempt, Note, Session, next_session_id


class TestSession:
    """Tests for the Session model."""

    def test_defaults(self):
        session = Session(id=1)

        assert session.original_text is None
        assert session.attempts == []
        assert session.has_original is False
        assert session.latest_attempt is None
        assert session.best_accuracy is None

    def test_add_attempt_without_original(self):
        """Test attempts are saved unscored until the original exists."""
        session = Session(id=1)
        attempt = session.add_attempt("  hello wrold  ")

        assert attempt.user_text == "hello wrold"
        assert attempt.accuracy is None
        assert session.latest_attempt is attempt

    def test_add_empty_attempt(self):
        session = Session(id=1)

        with pytest.raises(ValidationError, match="Please type something"):
            session.add_attempt("   ")

        assert session.attempts == []

    def test_add_attempt_with_original(self):
        session = Session(id=1, original_text="hello world")
        attempt = session.add_attempt("hello world")

        assert attempt.accuracy == 100

    def test_set_original_rescores(self):
        """Test setting the original scores earlier attempts."""
        session = Session(id=1)
        session.add_attempt("I met jon yesterday")
        session.set_original_text("I met John yesterday.")

        assert session.attempts[0].accuracy == 60

        session.rescore({"john"})
        assert session.attempts[0].accuracy == 100
        assert session.best_accuracy == 100

    def test_set_empty_original(self):
        session = Session(id=1)

        with pytest.raises(ValidationError, match="Original text cannot be empty"):
            session.set_original_text("\n")

    def test_compare_latest(self):
        session = Session(id=1, original_text="hello world")
        session.add_attempt("hello")
        session.add_attempt("hello world")

        parts = session.compare()

        assert [p.kind.value for p in parts] == ["match", "match"]

    def test_compare_specific_attempt(self):
        session = Session(id=1, original_text="hello world")
        first = session.add_attempt("hello")
        session.add_attempt("hello world")

        parts = session.compare(first.id)

        assert [p.kind.value for p in parts] == ["match", "remove"]

    def test_compare_without_original(self):
        session = Session(id=1)
        session.add_attempt("hello")

        with pytest.raises(ValidationError):
            session.compare()

    def test_compare_without_attempts(self):
        session = Session(id=1, original_text="hello")

        with pytest.raises(ValidationError, match="No attempts"):
            session.compare()

    def test_unknown_attempt(self):
        session = Session(id=1, original_text="hello")

        with pytest.raises(ResourceError):
            session.get_attempt("missing")

    def test_camel_case_json(self):
        """Test JSON keys match the backup format."""
        session = Session(id=3, original_text="hi")
        session.add_attempt("hi")

        data = session.model_dump(mode="json", by_alias=True)

        assert set(data) == {"id", "createdAt", "originalText", "attempts"}
        assert set(data["attempts"][0]) == {"id", "timestamp", "userText", "accuracy"}

    def test_reads_millisecond_timestamps(self):
        """Test epoch-millisecond timestamps from older backups parse."""
        session = Session.model_validate(
            {
                "id": 1,
                "createdAt": 1714560000000,
                "originalText": None,
                "attempts": [{"id": "abc", "timestamp": 1714560000000, "userText": "hi"}],
            }
        )

        assert session.created_at.year == 2024
        assert session.attempts[0].user_text == "hi"
        assert session.attempts[0].accuracy is None


class TestNextSessionId:
    """Tests for next_session_id."""

    def test_first_session(self):
        assert next_session_id([]) == 1

    def test_after_highest(self):
        assert next_session_id([Session(id=1), Session(id=7), Session(id=3)]) == 8


class TestAttempt:
    """Tests for the Attempt model."""

    def test_generated_ids_are_unique(self):
        assert Attempt(user_text="a").id != Attempt(user_text="a").id


class TestNote:
    """Tests for the Note model."""

    def test_create_strips(self):
        note = Note.create("  remember: their / there  ")

        assert note.content == "remember: their / there"
        assert note.updated_at >= note.created_at

    def test_create_empty(self):
        with pytest.raises(ValidationError, match="Note content cannot be empty"):
            Note.create("   ")

    def test_update_content(self):
        note = Note.create("first")
        before = note.updated_at
        note.update_content("second")

        assert note.content == "second"
        assert note.updated_at >= before

    def test_update_empty(self):
        note = Note.create("first")

        with pytest.raises(ValidationError):
            note.update_content("")
        assert note.content == "first"

    def test_matches(self):
        note = Note.create("Silent K in Knight")

        assert note.matches("knight") is True
        assert note.matches("") is True
        assert note.matches("queen") is False
