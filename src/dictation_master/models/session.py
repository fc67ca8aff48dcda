"""Practice session models.

A session is one numbered dictation exercise: a reference text and any
number of attempts at typing it from audio.
"""

from __future__ import annotations

import uuid
from collections.abc import Container
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dictation_master.comparison import DiffPart, calculate_accuracy, calculate_diff
from dictation_master.errors import ResourceError, ValidationError


def generate_attempt_id() -> str:
    return uuid.uuid4().hex[:12]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Attempt(CamelModel):
    """A single typed attempt at a session's dictation."""

    id: str = Field(default_factory=generate_attempt_id)
    timestamp: datetime = Field(default_factory=datetime.now)
    user_text: str
    accuracy: int | None = None  # None until the reference text is known


class Session(CamelModel):
    """A numbered practice session."""

    id: int
    created_at: datetime = Field(default_factory=datetime.now)
    original_text: str | None = None
    attempts: list[Attempt] = Field(default_factory=list)

    @property
    def has_original(self) -> bool:
        return bool(self.original_text)

    @property
    def latest_attempt(self) -> Attempt | None:
        return self.attempts[-1] if self.attempts else None

    @property
    def best_accuracy(self) -> int | None:
        """Highest scored accuracy across attempts, if any were scored."""
        scores = [a.accuracy for a in self.attempts if a.accuracy is not None]
        return max(scores) if scores else None

    def get_attempt(self, attempt_id: str) -> Attempt:
        """Look up an attempt by id.

        Raises:
            ResourceError: If the session has no such attempt
        """
        for attempt in self.attempts:
            if attempt.id == attempt_id:
                return attempt
        raise ResourceError(
            f"Attempt not found: {attempt_id}",
            context={"session": self.id},
        )

    def add_attempt(self, user_text: str, proper_nouns: Container[str] = frozenset()) -> Attempt:
        """Record a new attempt, scoring it when the reference is known.

        Args:
            user_text: What the user typed; surrounding whitespace is trimmed
            proper_nouns: Keys to match fuzzily when scoring

        Returns:
            The stored attempt

        Raises:
            ValidationError: If the text is empty
        """
        text = user_text.strip()
        if not text:
            raise ValidationError("Please type something before saving.")

        attempt = Attempt(user_text=text)
        if self.original_text:
            attempt.accuracy = calculate_accuracy(
                calculate_diff(text, self.original_text, proper_nouns)
            )
        self.attempts.append(attempt)
        return attempt

    def set_original_text(self, original_text: str, proper_nouns: Container[str] = frozenset()) -> None:
        """Set or replace the reference text and rescore every attempt.

        Raises:
            ValidationError: If the text is empty
        """
        text = original_text.strip()
        if not text:
            raise ValidationError("Original text cannot be empty.")
        self.original_text = text
        self.rescore(proper_nouns)

    def rescore(self, proper_nouns: Container[str] = frozenset()) -> None:
        """Recompute stored accuracy for all attempts."""
        if not self.original_text:
            return
        for attempt in self.attempts:
            attempt.accuracy = calculate_accuracy(
                calculate_diff(attempt.user_text, self.original_text, proper_nouns)
            )

    def compare(
        self,
        attempt_id: str | None = None,
        proper_nouns: Container[str] = frozenset(),
    ) -> list[DiffPart]:
        """Diff an attempt (the latest by default) against the reference.

        Raises:
            ValidationError: If there is no reference text or no attempt yet
            ResourceError: If ``attempt_id`` is unknown
        """
        if not self.original_text:
            raise ValidationError(
                "Original text has not been entered yet.",
                context={"session": self.id},
            )
        if attempt_id is not None:
            attempt = self.get_attempt(attempt_id)
        else:
            attempt = self.latest_attempt
            if attempt is None:
                raise ValidationError(
                    "No attempts recorded yet.",
                    context={"session": self.id},
                )
        return calculate_diff(attempt.user_text, self.original_text, proper_nouns)


def next_session_id(sessions: list[Session]) -> int:
    """Sessions are numbered 1, 2, 3... after the highest existing id."""
    return max((s.id for s in sessions), default=0) + 1
