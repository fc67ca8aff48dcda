"""Word-level diff between a dictation attempt and its reference text.

Alignment is a longest-common-subsequence table over normalized words.
Words registered as proper nouns also match when the attempt is close
enough letter by letter, so a misspelt name is not counted as wrong.
"""

from __future__ import annotations

from collections.abc import Container, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from dictation_master.comparison.similarity import letter_accuracy
from dictation_master.comparison.tokenizer import Token, normalize, tokenize_words

# Minimum letter accuracy for a proper noun to count as matched
FUZZY_MATCH_THRESHOLD = 0.60


class DiffKind(str, Enum):
    """How a word of the comparison is classified."""

    MATCH = "match"  # Word typed correctly
    ADD = "add"  # Extra word typed that is not in the reference
    REMOVE = "remove"  # Reference word that was missed or mistyped


@dataclass(frozen=True)
class DiffPart:
    """One aligned word of a comparison.

    ``MATCH`` and ``REMOVE`` parts carry the reference wording, ``ADD``
    parts carry what the user typed.
    """

    kind: DiffKind
    text: str

    @property
    def is_error(self) -> bool:
        return self.kind is not DiffKind.MATCH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"type": self.kind.value, "value": self.text}


def is_match(user: Token, original: Token, proper_nouns: Container[str]) -> bool:
    """Check whether a typed word counts as the reference word.

    Args:
        user: Word from the attempt
        original: Word from the reference text
        proper_nouns: Normalized keys that allow fuzzy matching

    Returns:
        True on equal keys, or on a registered proper noun typed with
        at least ``FUZZY_MATCH_THRESHOLD`` letter accuracy
    """
    if user.key == original.key:
        return True
    # An empty key is never a proper noun, whatever the collection holds
    if not original.key or original.key not in proper_nouns:
        return False
    return letter_accuracy(user.key, original.key) >= FUZZY_MATCH_THRESHOLD


def _lcs_table(
    user_words: list[Token],
    original_words: list[Token],
    proper_nouns: Container[str],
) -> list[list[int]]:
    """Build the LCS length table, indexed [user][original]."""
    n = len(user_words)
    m = len(original_words)
    dp = [[0] * (m + 1) for _ in range(n + 1)]

    for i in range(1, n + 1):
        user = user_words[i - 1]
        for j in range(1, m + 1):
            if is_match(user, original_words[j - 1], proper_nouns):
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    return dp


def calculate_diff(
    user_text: str,
    original_text: str,
    proper_nouns: Container[str] = frozenset(),
) -> list[DiffPart]:
    """Compare a dictation attempt against the reference text.

    Args:
        user_text: What the user typed
        original_text: The reference text
        proper_nouns: Normalized keys to match fuzzily; only membership
            is queried

    Returns:
        Diff parts in reading order
    """
    user_words = tokenize_words(user_text)
    original_words = tokenize_words(original_text)
    dp = _lcs_table(user_words, original_words, proper_nouns)

    i = len(user_words)
    j = len(original_words)
    parts: list[DiffPart] = []

    # Walk back from the bottom-right corner. On a tie the reference word
    # is consumed first, which decides the order of add/remove runs.
    while i > 0 or j > 0:
        if i > 0 and j > 0 and is_match(user_words[i - 1], original_words[j - 1], proper_nouns):
            parts.append(DiffPart(DiffKind.MATCH, original_words[j - 1].surface))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            parts.append(DiffPart(DiffKind.REMOVE, original_words[j - 1].surface))
            j -= 1
        else:
            parts.append(DiffPart(DiffKind.ADD, user_words[i - 1].surface))
            i -= 1

    parts.reverse()

    # Punctuation-only differences are not mistakes
    return [
        DiffPart(DiffKind.MATCH, part.text)
        if part.is_error and not normalize(part.text)
        else part
        for part in parts
    ]


def calculate_accuracy(parts: Iterable[DiffPart]) -> int:
    """Percentage of diff parts that are matches.

    An empty comparison scores 100. Halves round up.

    Args:
        parts: Output of ``calculate_diff``

    Returns:
        Integer from 0 to 100
    """
    parts = list(parts)
    total = len(parts)
    if total == 0:
        return 100
    matches = sum(1 for part in parts if part.kind is DiffKind.MATCH)
    # Integer form of floor(100 * matches / total + 0.5)
    return (200 * matches + total) // (2 * total)


def count_kinds(parts: Iterable[DiffPart]) -> dict[DiffKind, int]:
    """Count parts per kind, with every kind present."""
    counts = {kind: 0 for kind in DiffKind}
    for part in parts:
        counts[part.kind] += 1
    return counts
