"""Dictation Master - word-level dictation practice and scoring.

Type what you hear, supply the reference text, and get a word-by-word
comparison of correct, missed and extra words with an accuracy score.
Practice is organised into numbered sessions with repeated attempts.
"""

__version__ = "0.1.0"
