"""Rotating selection of featured study notes.

A few random notes are kept on display as reminders. Dismissing one
("got it") swaps in a random note that is not already showing.
"""

from __future__ import annotations

import random
from pathlib import Path

from dictation_master.logging import get_logger
from dictation_master.models import Note
from dictation_master.storage import atomic_write_json, read_json

logger = get_logger(__name__)

FEATURED_FILENAME = "featured_notes.json"


def featured_count(total_notes: int, limit: int = 3) -> int:
    """How many notes to feature: one while the collection is small."""
    if total_notes == 0:
        return 0
    return 1 if total_notes < limit else limit


def pick_featured(
    notes: list[Note],
    limit: int = 3,
    rng: random.Random | None = None,
) -> list[Note]:
    """Pick a random set of notes to feature."""
    rng = rng or random.Random()
    return rng.sample(notes, featured_count(len(notes), limit))


def replace_featured(
    featured: list[Note],
    dismissed_id: str,
    notes: list[Note],
    rng: random.Random | None = None,
) -> list[Note]:
    """Swap a dismissed note for a random note that isn't showing.

    The selection is returned unchanged when every note is already
    featured or the dismissed note isn't among them.
    """
    shown = {n.id for n in featured}
    if dismissed_id not in shown:
        return list(featured)
    candidates = [n for n in notes if n.id not in shown]
    if not candidates:
        return list(featured)
    replacement = (rng or random.Random()).choice(candidates)
    return [replacement if n.id == dismissed_id else n for n in featured]


class FeaturedNotes:
    """Remembers which notes are featured between runs."""

    def __init__(self, data_root: Path, limit: int = 3, rng: random.Random | None = None):
        self.path = data_root / FEATURED_FILENAME
        self.limit = limit
        self.rng = rng or random.Random()

    def _load_ids(self) -> list[str]:
        if not self.path.exists():
            return []
        data = read_json(self.path)
        return [str(i) for i in data] if isinstance(data, list) else []

    def _save(self, featured: list[Note]) -> None:
        atomic_write_json(self.path, [n.id for n in featured])

    def current(self, notes: list[Note]) -> list[Note]:
        """Current selection, re-picked when notes were added or deleted."""
        by_id = {n.id: n for n in notes}
        ids = self._load_ids()
        expected = featured_count(len(notes), self.limit)
        if len(ids) == expected and all(i in by_id for i in ids):
            return [by_id[i] for i in ids]

        featured = pick_featured(notes, self.limit, self.rng)
        self._save(featured)
        logger.debug("Re-picked featured notes", extra={"count": len(featured)})
        return featured

    def got_it(self, note_id: str, notes: list[Note]) -> list[Note]:
        """Dismiss a featured note and persist the new selection."""
        featured = replace_featured(self.current(notes), note_id, notes, self.rng)
        self._save(featured)
        return featured
