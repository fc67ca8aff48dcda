"""Comparison engine for dictation attempts.

Tokenizes both texts, aligns them word by word and scores the result.
Everything here is pure: no I/O, no shared state, no errors raised.
"""

from dictation_master.comparison.diff import (
    FUZZY_MATCH_THRESHOLD,
    DiffKind,
    DiffPart,
    calculate_accuracy,
    calculate_diff,
    count_kinds,
    is_match,
)
from dictation_master.comparison.proper_nouns import (
    ProperNounSet,
    proper_noun_candidate,
    proper_noun_candidates,
)
from dictation_master.comparison.similarity import letter_accuracy, levenshtein_distance
from dictation_master.comparison.tokenizer import Token, normalize, tokenize, tokenize_words

__all__ = [
    "FUZZY_MATCH_THRESHOLD",
    "DiffKind",
    "DiffPart",
    "calculate_accuracy",
    "calculate_diff",
    "count_kinds",
    "is_match",
    "ProperNounSet",
    "proper_noun_candidate",
    "proper_noun_candidates",
    "letter_accuracy",
    "levenshtein_distance",
    "Token",
    "normalize",
    "tokenize",
    "tokenize_words",
]
