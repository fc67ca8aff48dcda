"""Proper-noun registry for fuzzy matching.

Names are easy to misspell when heard, so reference words registered
here match an attempt that gets most of the letters right. The set is
owned by the caller; the diff only asks whether a key is a member.

Example:
    nouns = ProperNounSet(["john"])
    calculate_diff("I met jon", "I met John", nouns)  # all matches
"""

from __future__ import annotations

from collections.abc import Container, Iterable, Iterator

from dictation_master.comparison.diff import DiffKind, DiffPart
from dictation_master.comparison.tokenizer import normalize


class ProperNounSet:
    """Ordered set of normalized proper-noun keys.

    Keys are kept in the order they were registered so the persisted list
    stays stable across saves.
    """

    def __init__(self, nouns: Iterable[str] | None = None):
        """Initialize the set.

        Args:
            nouns: Initial keys; duplicates and empty keys are dropped
        """
        self._nouns: dict[str, None] = {}
        for noun in nouns or ():
            self.add(noun)

    def add(self, noun: str) -> bool:
        """Register a proper noun.

        Args:
            noun: Normalized key, lowercased again for safety

        Returns:
            True if the key was added, False if empty or already present
        """
        key = noun.lower()
        if not key or key in self._nouns:
            return False
        self._nouns[key] = None
        return True

    def remove(self, noun: str) -> bool:
        """Unregister a proper noun.

        Returns:
            True if the key was found and removed
        """
        key = noun.lower()
        if key not in self._nouns:
            return False
        del self._nouns[key]
        return True

    def to_list(self) -> list[str]:
        return list(self._nouns)

    def __contains__(self, key: object) -> bool:
        return key in self._nouns

    def __iter__(self) -> Iterator[str]:
        return iter(self._nouns)

    def __len__(self) -> int:
        return len(self._nouns)

    def __repr__(self) -> str:
        return f"ProperNounSet({self.to_list()!r})"


def proper_noun_candidate(part: DiffPart, proper_nouns: Container[str]) -> str | None:
    """Key to offer for registration when a reference word was missed.

    Only missed words qualify, and only when their key is longer than one
    character and not registered yet.

    Args:
        part: A part of a diff
        proper_nouns: Currently registered keys

    Returns:
        The normalized key to register, or None
    """
    if part.kind is not DiffKind.REMOVE:
        return None
    key = normalize(part.text)
    if len(key) <= 1 or key in proper_nouns:
        return None
    return key


def proper_noun_candidates(parts: Iterable[DiffPart], proper_nouns: Container[str]) -> list[str]:
    """Distinct registration candidates from a whole diff, in order."""
    candidates: dict[str, None] = {}
    for part in parts:
        key = proper_noun_candidate(part, proper_nouns)
        if key is not None:
            candidates[key] = None
    return list(candidates)
