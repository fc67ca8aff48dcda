"""Rich rendering of comparison results for the terminal."""

from __future__ import annotations

from collections.abc import Container

from rich.table import Table
from rich.text import Text

from dictation_master.comparison import DiffKind, DiffPart, count_kinds, proper_noun_candidates

PART_STYLES = {
    DiffKind.MATCH: "",
    DiffKind.ADD: "red strike",  # extra word typed
    DiffKind.REMOVE: "bold red underline",  # missed or mistyped word
}


def accuracy_style(accuracy: int) -> str:
    if accuracy == 100:
        return "bold green"
    if accuracy > 80:
        return "bold blue"
    return "bold dark_orange"


def render_diff(parts: list[DiffPart]) -> Text:
    """Render diff parts as one line of styled words.

    User text is added as plain ``Text`` so brackets in it are never
    read as markup.
    """
    text = Text()
    for index, part in enumerate(parts):
        if index:
            text.append(" ")
        text.append(part.text, style=PART_STYLES[part.kind])
    return text


def render_accuracy(accuracy: int) -> Text:
    return Text(f"Match Accuracy: {accuracy}%", style=accuracy_style(accuracy))


def render_legend() -> Text:
    legend = Text()
    legend.append("extra word", style=PART_STYLES[DiffKind.ADD])
    legend.append("  ")
    legend.append("missed/wrong", style=PART_STYLES[DiffKind.REMOVE])
    legend.append("  correct")
    return legend


def summary_table(parts: list[DiffPart], proper_nouns: Container[str]) -> Table:
    """Counts per kind plus missed words that could be proper nouns."""
    counts = count_kinds(parts)
    table = Table(show_header=True, header_style="bold")
    table.add_column("Correct", style="green", justify="right")
    table.add_column("Missed", style="red", justify="right")
    table.add_column("Extra", style="red", justify="right")
    table.add_column("Proper noun?", style="cyan")

    candidates = proper_noun_candidates(parts, proper_nouns)

    table.add_row(
        str(counts[DiffKind.MATCH]),
        str(counts[DiffKind.REMOVE]),
        str(counts[DiffKind.ADD]),
        ", ".join(candidates) or "-",
    )
    return table
