"""Word tokenization and normalization for dictation comparison."""

from __future__ import annotations

import re
from dataclasses import dataclass

_NON_WORD_RE = re.compile(r"\W")


@dataclass(frozen=True)
class Token:
    """A whitespace-delimited word.

    Attributes:
        surface: The word exactly as typed or pasted
        key: Normalized form used for comparisons
    """

    surface: str
    key: str

    @classmethod
    def from_word(cls, word: str) -> "Token":
        return cls(surface=word, key=normalize(word))

    @property
    def is_punctuation(self) -> bool:
        """True when the word has no letters or digits at all."""
        return not self.key


def tokenize(text: str) -> list[str]:
    """Split text into words on runs of whitespace.

    Args:
        text: Any string, including empty or whitespace-only

    Returns:
        Surface forms in order; empty list when there are no words
    """
    return text.split()


def normalize(word: str) -> str:
    """Build the comparison key for a word.

    Strips every non-word character (anything but Unicode letters, digits
    and underscore) and lowercases what remains, so ``"Hello,"`` and
    ``"hello"`` compare equal and ``"--"`` becomes ``""``.
    """
    return _NON_WORD_RE.sub("", word).lower()


def tokenize_words(text: str) -> list[Token]:
    """Tokenize text and normalize each word in one pass."""
    return [Token.from_word(word) for word in tokenize(text)]
