"""Tests for featured study notes."""

import random

from dictation_master.featured import (
    FEATURED_FILENAME,
    FeaturedNotes,
    featured_count,
    pick_featured,
    replace_featured,
)
from dictation_master.models import Note


def make_notes(count):
    return [Note.create(f"note {i}") for i in range(count)]


class TestFeaturedCount:
    """Tests for featured_count."""

    def test_no_notes(self):
        assert featured_count(0) == 0

    def test_small_collection(self):
        """Test one note is shown while there are fewer than the limit."""
        assert featured_count(1) == 1
        assert featured_count(2) == 1

    def test_full_collection(self):
        assert featured_count(3) == 3
        assert featured_count(10) == 3

    def test_custom_limit(self):
        assert featured_count(4, limit=5) == 1
        assert featured_count(5, limit=5) == 5


class TestPickFeatured:
    """Tests for pick_featured."""

    def test_distinct_notes(self):
        notes = make_notes(10)
        featured = pick_featured(notes, rng=random.Random(1))

        assert len(featured) == 3
        assert len({n.id for n in featured}) == 3
        assert all(n in notes for n in featured)

    def test_empty(self):
        assert pick_featured([]) == []


class TestReplaceFeatured:
    """Tests for replace_featured."""

    def test_replaces_in_place(self):
        """Test the dismissed note's slot gets a note not already shown."""
        notes = make_notes(5)
        featured = notes[:3]

        result = replace_featured(featured, notes[1].id, notes, random.Random(0))

        assert result[0] is notes[0]
        assert result[2] is notes[2]
        assert result[1] in notes[3:]

    def test_no_candidates(self):
        notes = make_notes(3)

        assert replace_featured(notes, notes[0].id, notes) == notes

    def test_unknown_note(self):
        notes = make_notes(5)

        assert replace_featured(notes[:3], "missing", notes) == notes[:3]


class TestFeaturedNotes:
    """Tests for persisted featured selections."""

    def test_selection_is_remembered(self, tmp_path):
        notes = make_notes(6)
        featured = FeaturedNotes(tmp_path, rng=random.Random(3))

        first = featured.current(notes)

        assert (tmp_path / FEATURED_FILENAME).exists()
        assert FeaturedNotes(tmp_path).current(notes) == first

    def test_repicks_when_note_deleted(self, tmp_path):
        """Test a stale selection is replaced."""
        notes = make_notes(4)
        featured = FeaturedNotes(tmp_path, rng=random.Random(3))
        shown = featured.current(notes)

        remaining = [n for n in notes if n.id != shown[0].id]
        again = featured.current(remaining)

        assert len(again) == 3
        assert shown[0] not in again

    def test_grows_from_one_to_limit(self, tmp_path):
        notes = make_notes(2)
        featured = FeaturedNotes(tmp_path)

        assert len(featured.current(notes)) == 1
        assert len(featured.current(notes + make_notes(1))) == 3

    def test_got_it(self, tmp_path):
        notes = make_notes(4)
        featured = FeaturedNotes(tmp_path, rng=random.Random(5))
        shown = featured.current(notes)

        result = featured.got_it(shown[0].id, notes)

        assert shown[0] not in result
        assert len(result) == 3
        assert FeaturedNotes(tmp_path).current(notes) == result
