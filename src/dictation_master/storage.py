"""Storage layer for dictation-master.

Provides atomic file operations and store classes for sessions, notes
and proper nouns. Each store owns one JSON file in the data directory.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Container
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dictation_master.comparison import ProperNounSet
from dictation_master.errors import DictationError, ErrorCategory
from dictation_master.logging import get_logger
from dictation_master.models import Note, Session, next_session_id

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

SESSIONS_FILENAME = "sessions.json"
NOTES_FILENAME = "notes.json"
PROPER_NOUNS_FILENAME = "proper_nouns.json"


class StorageError(DictationError):
    """Base exception for storage operations."""

    category = ErrorCategory.RESOURCE


class NotFoundError(StorageError):
    """Raised when a requested session, note or file is not found."""

    pass


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    """Write data to a file atomically.

    Writes to a temporary file in the same directory, then renames to target,
    so an interrupted write never leaves a half-written file behind.

    Args:
        path: Target file path
        data: String data to write
        encoding: File encoding (default utf-8)

    Raises:
        StorageError: If the write operation fails
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    temp_path = None
    try:
        # Same directory keeps the rename on one filesystem
        fd, temp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix=path.stem + "_",
            dir=path.parent,
        )
        os.write(fd, data.encode(encoding))
        os.fsync(fd)
        os.close(fd)
        fd = None

        os.replace(temp_path, path)
        temp_path = None

    except OSError as e:
        raise StorageError(f"Failed to write {path}: {e}") from e
    finally:
        if fd is not None:
            try:
                os.close(fd)
            except OSError:
                pass
        if temp_path is not None:
            try:
                os.unlink(temp_path)
            except OSError:
                pass


def atomic_write_json(path: Path, data: dict | list, indent: int = 2) -> None:
    """Write JSON data to a file atomically."""
    json_str = json.dumps(data, indent=indent, ensure_ascii=False, default=str)
    atomic_write(path, json_str)


def read_json(path: Path) -> Any:
    """Read JSON data from a file.

    Args:
        path: File path to read

    Returns:
        Parsed JSON data

    Raises:
        NotFoundError: If file doesn't exist
        StorageError: If file is invalid JSON
    """
    if not path.exists():
        raise NotFoundError(f"File not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path}: {e}") from e


def dump_models(models: list[BaseModel]) -> list[dict[str, Any]]:
    """Serialize models with their camelCase JSON keys."""
    return [m.model_dump(mode="json", by_alias=True) for m in models]


def load_models(data: Any, model_class: type[T], source: Path | str) -> list[T]:
    """Validate a JSON list into models.

    Raises:
        StorageError: If the data doesn't match the model
    """
    try:
        return TypeAdapter(list[model_class]).validate_python(data)
    except PydanticValidationError as e:
        raise StorageError(
            f"Invalid data in {source}",
            context={"errors": e.error_count()},
        ) from e


class SessionStore:
    """Store for practice sessions."""

    def __init__(self, data_root: Path):
        """Initialize the session store.

        Args:
            data_root: Directory holding ``sessions.json``
        """
        self.data_root = data_root
        self.path = data_root / SESSIONS_FILENAME

    def load(self) -> list[Session]:
        """Load all sessions sorted by id; an absent file means none."""
        if not self.path.exists():
            return []
        sessions = load_models(read_json(self.path), Session, self.path)
        return sorted(sessions, key=lambda s: s.id)

    def replace_all(self, sessions: list[Session]) -> None:
        """Overwrite the stored sessions."""
        atomic_write_json(self.path, dump_models(sorted(sessions, key=lambda s: s.id)))
        logger.debug("Saved sessions", extra={"count": len(sessions)})

    def get(self, session_id: int) -> Session:
        """Get a session by id.

        Raises:
            NotFoundError: If the session doesn't exist
        """
        for session in self.load():
            if session.id == session_id:
                return session
        raise NotFoundError(f"Session not found: {session_id}")

    def create(self) -> Session:
        """Create the next numbered session."""
        sessions = self.load()
        session = Session(id=next_session_id(sessions))
        sessions.append(session)
        self.replace_all(sessions)
        logger.info(f"Created session {session.id}")
        return session

    def save(self, session: Session) -> Session:
        """Insert or update a session by id."""
        sessions = [s for s in self.load() if s.id != session.id]
        sessions.append(session)
        self.replace_all(sessions)
        logger.with_context(session=session.id).debug(
            "Saved session", extra={"attempts": len(session.attempts)}
        )
        return session

    def rescore_all(self, proper_nouns: Container[str]) -> int:
        """Recompute stored accuracy after the proper nouns changed.

        Returns:
            Number of attempts rescored
        """
        sessions = self.load()
        if not sessions:
            return 0
        for session in sessions:
            session.rescore(proper_nouns)
        self.replace_all(sessions)
        rescored = sum(len(s.attempts) for s in sessions if s.has_original)
        logger.info("Rescored attempts", extra={"attempts": rescored})
        return rescored


class NoteStore:
    """Store for study notes."""

    def __init__(self, data_root: Path):
        self.data_root = data_root
        self.path = data_root / NOTES_FILENAME

    def load(self) -> list[Note]:
        if not self.path.exists():
            return []
        return load_models(read_json(self.path), Note, self.path)

    def replace_all(self, notes: list[Note]) -> None:
        atomic_write_json(self.path, dump_models(notes))
        logger.debug("Saved notes", extra={"count": len(notes)})

    def search(self, term: str = "") -> list[Note]:
        """Notes containing ``term`` (case-insensitive), newest edit first."""
        notes = [n for n in self.load() if n.matches(term)]
        return sorted(notes, key=lambda n: n.updated_at, reverse=True)

    def get(self, note_id: str) -> Note:
        """Get a note by id.

        Raises:
            NotFoundError: If the note doesn't exist
        """
        for note in self.load():
            if note.id == note_id:
                return note
        raise NotFoundError(f"Note not found: {note_id}")

    def create(self, content: str) -> Note:
        """Create and store a note.

        Raises:
            ValidationError: If the content is empty
        """
        note = Note.create(content)
        notes = self.load()
        notes.append(note)
        self.replace_all(notes)
        logger.info(f"Created note {note.id}")
        return note

    def update(self, note_id: str, content: str) -> Note:
        """Replace a note's content.

        Raises:
            NotFoundError: If the note doesn't exist
            ValidationError: If the content is empty
        """
        notes = self.load()
        for note in notes:
            if note.id == note_id:
                note.update_content(content)
                self.replace_all(notes)
                return note
        raise NotFoundError(f"Note not found: {note_id}")

    def delete(self, note_id: str) -> bool:
        """Delete a note.

        Returns:
            True if deleted, False if it didn't exist
        """
        notes = self.load()
        remaining = [n for n in notes if n.id != note_id]
        if len(remaining) == len(notes):
            return False
        self.replace_all(remaining)
        logger.info(f"Deleted note {note_id}")
        return True


class ProperNounStore:
    """Store for the proper-noun set used by comparisons."""

    def __init__(self, data_root: Path):
        self.data_root = data_root
        self.path = data_root / PROPER_NOUNS_FILENAME

    def load(self) -> ProperNounSet:
        if not self.path.exists():
            return ProperNounSet()
        data = read_json(self.path)
        if not isinstance(data, list):
            raise StorageError(f"Invalid data in {self.path}: expected a list")
        return ProperNounSet(str(noun) for noun in data)

    def save(self, nouns: ProperNounSet) -> None:
        atomic_write_json(self.path, nouns.to_list())

    def add(self, noun: str) -> bool:
        """Register a proper noun and persist it.

        Returns:
            True if newly added, False if it was already registered
        """
        nouns = self.load()
        added = nouns.add(noun)
        if added:
            self.save(nouns)
            logger.info(f"Registered proper noun: {noun.lower()}")
        return added

    def remove(self, noun: str) -> bool:
        """Unregister a proper noun.

        Returns:
            True if removed, False if it wasn't registered
        """
        nouns = self.load()
        removed = nouns.remove(noun)
        if removed:
            self.save(nouns)
        return removed
