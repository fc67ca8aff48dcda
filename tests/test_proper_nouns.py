"""Tests for the proper-noun registry and registration suggestions."""

from dictation_master.comparison import (
    DiffKind,
    DiffPart,
    ProperNounSet,
    calculate_diff,
    proper_noun_candidate,
    proper_noun_candidates,
)


class TestProperNounSet:
    """Tests for ProperNounSet."""

    def test_add_lowercases(self):
        nouns = ProperNounSet()

        assert nouns.add("John") is True
        assert "john" in nouns
        assert "John" not in nouns

    def test_add_duplicate(self):
        nouns = ProperNounSet(["john"])

        assert nouns.add("JOHN") is False
        assert len(nouns) == 1

    def test_empty_key_is_ignored(self):
        nouns = ProperNounSet(["", "paris"])

        assert nouns.add("") is False
        assert nouns.to_list() == ["paris"]

    def test_keeps_registration_order(self):
        """Test the persisted list is stable."""
        nouns = ProperNounSet(["zoe", "adam", "zoe", "mia"])

        assert nouns.to_list() == ["zoe", "adam", "mia"]
        assert list(nouns) == ["zoe", "adam", "mia"]

    def test_remove(self):
        nouns = ProperNounSet(["john", "paris"])

        assert nouns.remove("John") is True
        assert nouns.remove("john") is False
        assert nouns.to_list() == ["paris"]


class TestProperNounCandidate:
    """Tests for proper_noun_candidate."""

    def test_missed_word(self):
        """Test a missed word is offered by its key."""
        assert proper_noun_candidate(DiffPart(DiffKind.REMOVE, "John,"), set()) == "john"

    def test_only_missed_words(self):
        assert proper_noun_candidate(DiffPart(DiffKind.ADD, "John"), set()) is None
        assert proper_noun_candidate(DiffPart(DiffKind.MATCH, "John"), set()) is None

    def test_single_letter_keys(self):
        """Test one-letter words are not offered."""
        assert proper_noun_candidate(DiffPart(DiffKind.REMOVE, "A."), set()) is None

    def test_already_registered(self):
        assert proper_noun_candidate(DiffPart(DiffKind.REMOVE, "John"), {"john"}) is None


class TestProperNounCandidates:
    """Tests for proper_noun_candidates."""

    def test_distinct_in_order(self):
        parts = calculate_diff("", "Paris and Rome, then Paris.", set())

        assert proper_noun_candidates(parts, set()) == ["paris", "and", "rome", "then"]

    def test_registering_candidate_fixes_score(self):
        """Test registering the suggestion lets the near miss match."""
        parts = calculate_diff("I met jon", "I met John", set())
        candidates = proper_noun_candidates(parts, set())

        assert candidates == ["john"]

        nouns = ProperNounSet(candidates)
        assert all(p.kind is DiffKind.MATCH for p in calculate_diff("I met jon", "I met John", nouns))
