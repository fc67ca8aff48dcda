"""Letter-level similarity used for fuzzy proper-noun matching."""

from __future__ import annotations


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein (edit) distance between two strings.

    The Levenshtein distance is the minimum number of single-character
    edits (insertions, deletions, substitutions) required to change
    one string into the other.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Number of edits needed
    """
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if not s2:
        return len(s1)

    # Two rows are enough since each cell only looks one row back
    previous_row = list(range(len(s2) + 1))
    current_row = [0] * (len(s2) + 1)

    for i, c1 in enumerate(s1):
        current_row[0] = i + 1
        for j, c2 in enumerate(s2):
            current_row[j + 1] = min(
                previous_row[j + 1] + 1,  # deletion
                current_row[j] + 1,  # insertion
                previous_row[j] + (c1 != c2),  # substitution
            )
        previous_row, current_row = current_row, previous_row

    return previous_row[len(s2)]


def letter_accuracy(word1: str, word2: str) -> float:
    """Share of letters the two words have in common.

    Computed as ``1 - distance / max(len(word1), len(word2))``, so
    ``"jon"`` against ``"john"`` scores 0.75. Two empty strings score 1.0.

    Args:
        word1: First word (normalized)
        word2: Second word (normalized)

    Returns:
        Similarity from 0.0 (nothing shared) to 1.0 (identical)
    """
    max_length = max(len(word1), len(word2))
    if max_length == 0:
        return 1.0
    return 1.0 - levenshtein_distance(word1, word2) / max_length
