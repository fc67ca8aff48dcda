"""Data models for dictation-master.

Pydantic models for practice sessions, attempts and study notes.
"""

from __future__ import annotations

from dictation_master.models.note import Note
from dictation_master.models.session import Attempt, CamelModel, Session, next_session_id

__all__ = [
    "Attempt",
    "CamelModel",
    "Note",
    "Session",
    "next_session_id",
]
