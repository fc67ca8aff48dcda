"""Study note model.

Notes are free-form reminders (tricky words, grammar points) collected
while reviewing attempts.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import Field

from dictation_master.errors import ValidationError
from dictation_master.models.session import CamelModel


def generate_note_id() -> str:
    return uuid.uuid4().hex[:12]


class Note(CamelModel):
    """A study note."""

    id: str = Field(default_factory=generate_note_id)
    content: str
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def create(cls, content: str) -> "Note":
        """Create a note from user input.

        Raises:
            ValidationError: If the content is empty
        """
        return cls(content=_clean_content(content))

    def update_content(self, content: str) -> None:
        """Replace the content and bump ``updated_at``."""
        self.content = _clean_content(content)
        self.updated_at = datetime.now()

    def matches(self, term: str) -> bool:
        """Case-insensitive substring search."""
        return term.lower() in self.content.lower()


def _clean_content(content: str) -> str:
    text = content.strip()
    if not text:
        raise ValidationError("Note content cannot be empty.")
    return text
