"""Command-line interface for dictation-master.

Uses Typer for a modern, type-hinted CLI experience.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dictation_master import __version__
from dictation_master.comparison import (
    DiffPart,
    ProperNounSet,
    calculate_accuracy,
    calculate_diff,
    normalize,
    proper_noun_candidates,
)
from dictation_master.config import AppConfig, get_data_root, load_app_config, save_app_config
from dictation_master.display import (
    accuracy_style,
    render_accuracy,
    render_diff,
    render_legend,
    summary_table,
)
from dictation_master.errors import (
    ConfigurationError,
    DictationError,
    ValidationError,
    format_error_for_display,
)
from dictation_master.featured import FeaturedNotes
from dictation_master.logging import LogLevel, enable_file_logging, set_verbosity
from dictation_master.models import Note, Session
from dictation_master.pagination import paginate
from dictation_master.storage import NoteStore, ProperNounStore, SessionStore
from dictation_master.transfer import (
    default_backup_filename,
    export_backup,
    import_backup,
    read_backup,
)

# Local .env overrides the user-level one
_user_env = Path.home() / ".dictation-master" / ".env"
if _user_env.exists():
    load_dotenv(_user_env)
load_dotenv()

app = typer.Typer(
    name="dictation-master",
    help="Practice dictation: type what you hear and compare it word by word.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dictation-master version {__version__}")
        raise typer.Exit()


def _fail(error: Exception) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(format_error_for_display(error))}")
    return typer.Exit(1)


def _read_text(value: str) -> str:
    """Read a text argument; ``-`` means standard input."""
    if value == "-":
        return sys.stdin.read()
    return value


def _config() -> AppConfig:
    return load_app_config(get_data_root())


def _print_comparison(parts: list[DiffPart], proper_nouns: ProperNounSet) -> None:
    accuracy = calculate_accuracy(parts)
    console.print(render_accuracy(accuracy))
    console.print()
    console.print(render_diff(parts))
    console.print()
    console.print(render_legend())
    console.print(summary_table(parts, proper_nouns))


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-V", count=True, help="More log output (repeat for debug)."),
    ] = 0,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Also write logs to this file."),
    ] = None,
) -> None:
    """Dictation Master - word-level dictation practice.

    Record attempts in numbered [bold]sessions[/bold], add the original text,
    and review which words were [green]correct[/green], [red]missed[/red] or extra.
    """
    if verbose:
        set_verbosity(LogLevel(min(LogLevel.NORMAL + verbose, LogLevel.DEBUG)))
    if log_file:
        enable_file_logging(log_file)
    if ctx.invoked_subcommand == "config":
        # config must still run when config.json is broken
        return
    try:
        console.no_color = not _config().color
    except DictationError as e:
        raise _fail(e)


@app.command()
def compare(
    user_text: Annotated[str, typer.Argument(help="What you typed ('-' reads stdin)")],
    original_text: Annotated[str, typer.Argument(help="The original text")],
    noun: Annotated[
        Optional[list[str]],
        typer.Option("--noun", "-n", help="Extra proper noun to match fuzzily"),
    ] = None,
    no_store: Annotated[
        bool,
        typer.Option("--no-store", help="Ignore the saved proper nouns"),
    ] = False,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print accuracy and parts as JSON"),
    ] = False,
) -> None:
    """Compare a dictation against the original without saving anything."""
    try:
        nouns = ProperNounSet() if no_store else ProperNounStore(get_data_root()).load()
    except DictationError as e:
        raise _fail(e)
    for extra in noun or []:
        nouns.add(normalize(extra))

    parts = calculate_diff(_read_text(user_text), original_text, nouns)
    if as_json:
        console.print_json(data={
            "accuracy": calculate_accuracy(parts),
            "parts": [part.to_dict() for part in parts],
        })
        return
    _print_comparison(parts, nouns)


@app.command()
def info() -> None:
    """Show where data is stored and how much of it there is."""
    data_root = get_data_root()
    try:
        config = _config()
        sessions = SessionStore(data_root).load()
        notes = NoteStore(data_root).load()
        nouns = ProperNounStore(data_root).load()
    except DictationError as e:
        raise _fail(e)

    attempts = sum(len(s.attempts) for s in sessions)
    console.print(Panel(
        f"[cyan]Location:[/cyan] {escape(str(data_root))}\n"
        f"[cyan]Sessions:[/cyan] {len(sessions)}\n"
        f"[cyan]Attempts:[/cyan] {attempts}\n"
        f"[cyan]Notes:[/cyan] {len(notes)}\n"
        f"[cyan]Proper nouns:[/cyan] {len(nouns)}\n\n"
        f"[cyan]Sessions per page:[/cyan] {config.items_per_page}",
        title=f"dictation-master {__version__}",
    ))


@app.command("config")
def config_cmd(
    items_per_page: Annotated[
        Optional[int],
        typer.Option("--items-per-page", min=1, help="Sessions per page in `session list`"),
    ] = None,
    featured_notes: Annotated[
        Optional[int],
        typer.Option("--featured-notes", min=1, help="Notes shown by `notes featured`"),
    ] = None,
    color: Annotated[
        Optional[bool],
        typer.Option("--color/--no-color", help="Colored output"),
    ] = None,
) -> None:
    """Show settings, or change the ones given."""
    data_root = get_data_root()
    updates = {
        "items_per_page": items_per_page,
        "featured_notes": featured_notes,
        "color": color,
    }
    updates = {k: v for k, v in updates.items() if v is not None}

    try:
        config = load_app_config(data_root)
    except ConfigurationError as e:
        if not updates:
            raise _fail(e)
        console.print("[yellow]Existing config is invalid; starting from defaults.[/yellow]")
        config = AppConfig()

    if updates:
        config = config.model_copy(update=updates)
        try:
            config_path = save_app_config(config, data_root)
        except DictationError as e:
            raise _fail(e)
        console.print(f"[green]Saved settings to[/green] {escape(str(config_path))}")

    for key, value in config.model_dump().items():
        console.print(f"  [cyan]{key}:[/cyan] {value}")


# =============================================================================
# Session Commands
# =============================================================================

session_app = typer.Typer(name="session", help="Numbered practice sessions.")
app.add_typer(session_app, name="session")


def _review_session(session: Session, attempt_id: str | None, nouns: ProperNounSet) -> None:
    parts = session.compare(attempt_id, nouns)
    _print_comparison(parts, nouns)


@session_app.command("new")
def session_new() -> None:
    """Start the next numbered session."""
    try:
        session = SessionStore(get_data_root()).create()
    except DictationError as e:
        raise _fail(e)
    console.print(f"[green]Created session No. {session.id}[/green]")
    console.print(f"Next: dictation-master session attempt {session.id} \"<what you heard>\"")


@session_app.command("list")
def session_list(
    page: Annotated[int, typer.Option("--page", "-p", help="Page number")] = 1,
) -> None:
    """List sessions, oldest first."""
    try:
        sessions = SessionStore(get_data_root()).load()
        current = paginate(sessions, page, _config().items_per_page)
    except DictationError as e:
        raise _fail(e)

    if not sessions:
        console.print("[yellow]No sessions yet.[/yellow]")
        console.print("Start one with: dictation-master session new")
        return

    table = Table(title=f"Sessions (page {current.number} of {current.total_pages})")
    table.add_column("No.", style="cyan", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Attempts", justify="right")
    table.add_column("Best", justify="right")
    table.add_column("Original", style="dim")

    for session in current.items:
        best = session.best_accuracy
        table.add_row(
            str(session.id),
            session.created_at.strftime("%Y-%m-%d"),
            str(len(session.attempts)),
            f"[{accuracy_style(best)}]{best}%[/]" if best is not None else "-",
            "yes" if session.has_original else "missing",
        )

    console.print(table)
    console.print(f"Showing {len(current.items)} of {current.total_items} sessions")


@session_app.command("show")
def session_show(
    session_id: Annotated[int, typer.Argument(help="Session number")],
) -> None:
    """Show a session's original text and attempt history."""
    try:
        session = SessionStore(get_data_root()).get(session_id)
    except DictationError as e:
        raise _fail(e)

    console.print(Panel(
        escape(session.original_text) if session.original_text else "[dim]Not entered yet[/dim]",
        title=f"No. {session.id} - {session.created_at:%Y-%m-%d} - {len(session.attempts)} attempts",
    ))

    if not session.attempts:
        console.print("[dim]No attempts yet.[/dim]")
        return

    table = Table(title="Previous Attempts")
    table.add_column("ID", style="cyan")
    table.add_column("When", style="dim")
    table.add_column("Accuracy", justify="right")
    table.add_column("Text")

    for attempt in reversed(session.attempts):
        accuracy = attempt.accuracy
        table.add_row(
            attempt.id,
            attempt.timestamp.strftime("%Y-%m-%d %H:%M"),
            f"[{accuracy_style(accuracy)}]{accuracy}%[/]" if accuracy is not None else "-",
            escape(attempt.user_text),
        )
    console.print(table)


@session_app.command("attempt")
def session_attempt(
    session_id: Annotated[int, typer.Argument(help="Session number")],
    text: Annotated[str, typer.Argument(help="What you typed ('-' reads stdin)")],
) -> None:
    """Save a dictation attempt and review it when the original is known."""
    data_root = get_data_root()
    store = SessionStore(data_root)
    try:
        session = store.get(session_id)
        nouns = ProperNounStore(data_root).load()
        attempt = session.add_attempt(_read_text(text), nouns)
        store.save(session)
    except DictationError as e:
        raise _fail(e)

    console.print(f"[green]Saved attempt {attempt.id}[/green]")
    if not session.has_original:
        console.print(
            f"Next: paste the original text with "
            f"dictation-master session original {session.id} \"<original>\""
        )
        return
    _review_session(session, attempt.id, nouns)


@session_app.command("original")
def session_original(
    session_id: Annotated[int, typer.Argument(help="Session number")],
    text: Annotated[str, typer.Argument(help="The original text ('-' reads stdin)")],
) -> None:
    """Set or correct a session's original text; attempts are rescored."""
    data_root = get_data_root()
    store = SessionStore(data_root)
    try:
        session = store.get(session_id)
        nouns = ProperNounStore(data_root).load()
        session.set_original_text(_read_text(text), nouns)
        store.save(session)
    except DictationError as e:
        raise _fail(e)

    console.print(f"[green]Saved original text for No. {session.id}[/green]")
    if session.latest_attempt is not None:
        _review_session(session, None, nouns)


@session_app.command("review")
def session_review(
    session_id: Annotated[int, typer.Argument(help="Session number")],
    attempt_id: Annotated[
        Optional[str],
        typer.Option("--attempt", "-a", help="Attempt ID (default: latest)"),
    ] = None,
) -> None:
    """Compare an attempt against the session's original text."""
    data_root = get_data_root()
    try:
        session = SessionStore(data_root).get(session_id)
        nouns = ProperNounStore(data_root).load()
        _review_session(session, attempt_id, nouns)
    except DictationError as e:
        raise _fail(e)


# =============================================================================
# Proper Noun Commands
# =============================================================================

nouns_app = typer.Typer(name="nouns", help="Proper nouns matched with typo tolerance.")
app.add_typer(nouns_app, name="nouns")


@nouns_app.command("list")
def nouns_list() -> None:
    """List registered proper nouns."""
    try:
        nouns = ProperNounStore(get_data_root()).load()
    except DictationError as e:
        raise _fail(e)

    if not nouns:
        console.print("[yellow]No proper nouns registered.[/yellow]")
        return
    for noun in sorted(nouns):
        console.print(f"  {escape(noun)}")
    console.print(f"\n{len(nouns)} proper nouns")


@nouns_app.command("add")
def nouns_add(
    word: Annotated[str, typer.Argument(help="Word to treat as a proper noun")],
) -> None:
    """Register a proper noun so close misspellings still count."""
    key = normalize(word)
    try:
        if not key:
            raise ValidationError("A proper noun needs at least one letter or digit.")
        data_root = get_data_root()
        noun_store = ProperNounStore(data_root)
        added = noun_store.add(key)
        if added:
            SessionStore(data_root).rescore_all(noun_store.load())
    except DictationError as e:
        raise _fail(e)

    if added:
        console.print(f"[green]Registered:[/green] {escape(key)}")
    else:
        console.print(f"[yellow]Already registered:[/yellow] {escape(key)}")


@nouns_app.command("remove")
def nouns_remove(
    word: Annotated[str, typer.Argument(help="Proper noun to remove")],
) -> None:
    """Stop treating a word as a proper noun."""
    key = normalize(word)
    try:
        data_root = get_data_root()
        noun_store = ProperNounStore(data_root)
        removed = noun_store.remove(key)
        if removed:
            SessionStore(data_root).rescore_all(noun_store.load())
    except DictationError as e:
        raise _fail(e)

    if not removed:
        console.print(f"[red]Error:[/red] '{escape(key)}' is not registered.")
        raise typer.Exit(1)
    console.print(f"[green]Removed:[/green] {escape(key)}")


@nouns_app.command("suggest")
def nouns_suggest(
    session_id: Annotated[int, typer.Argument(help="Session number")],
    attempt_id: Annotated[
        Optional[str],
        typer.Option("--attempt", "-a", help="Attempt ID (default: latest)"),
    ] = None,
    add: Annotated[
        bool,
        typer.Option("--add", help="Register every suggestion"),
    ] = False,
) -> None:
    """Suggest missed words from an attempt that could be proper nouns."""
    data_root = get_data_root()
    noun_store = ProperNounStore(data_root)
    session_store = SessionStore(data_root)
    try:
        session = session_store.get(session_id)
        nouns = noun_store.load()
        candidates = proper_noun_candidates(session.compare(attempt_id, nouns), nouns)
        if add and candidates:
            for key in candidates:
                nouns.add(key)
            noun_store.save(nouns)
            session_store.rescore_all(nouns)
    except DictationError as e:
        raise _fail(e)

    if not candidates:
        console.print("[green]No missed words to suggest.[/green]")
        return
    for key in candidates:
        console.print(f"  {escape(key)}")
    if add:
        console.print(f"[green]Registered {len(candidates)} proper nouns.[/green]")
    else:
        console.print("Register one with: dictation-master nouns add <word>")


# =============================================================================
# Note Commands
# =============================================================================

notes_app = typer.Typer(name="notes", help="Study notes.")
app.add_typer(notes_app, name="notes")


@notes_app.command("add")
def notes_add(
    content: Annotated[str, typer.Argument(help="Note text ('-' reads stdin)")],
) -> None:
    """Add a study note."""
    try:
        note = NoteStore(get_data_root()).create(_read_text(content))
    except DictationError as e:
        raise _fail(e)
    console.print(f"[green]Added note {note.id}[/green]")


@notes_app.command("list")
def notes_list(
    search: Annotated[
        str,
        typer.Option("--search", "-s", help="Only notes containing this text"),
    ] = "",
) -> None:
    """List notes, most recently edited first."""
    store = NoteStore(get_data_root())
    try:
        notes = store.search(search)
        total = len(store.load())
    except DictationError as e:
        raise _fail(e)

    if total == 0:
        console.print("[yellow]No notes yet.[/yellow]")
        return
    if not notes:
        console.print(f"[yellow]No notes found matching \"{escape(search)}\"[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Updated", style="dim")
    table.add_column("Note")
    for note in notes:
        table.add_row(note.id, note.updated_at.strftime("%Y-%m-%d %H:%M"), escape(note.content))
    console.print(table)


@notes_app.command("edit")
def notes_edit(
    note_id: Annotated[str, typer.Argument(help="Note ID")],
    content: Annotated[str, typer.Argument(help="New text ('-' reads stdin)")],
) -> None:
    """Replace a note's text."""
    try:
        NoteStore(get_data_root()).update(note_id, _read_text(content))
    except DictationError as e:
        raise _fail(e)
    console.print(f"[green]Updated note {note_id}[/green]")


@notes_app.command("delete")
def notes_delete(
    note_id: Annotated[str, typer.Argument(help="Note ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a note."""
    if not yes and not typer.confirm("Delete this note?"):
        console.print("[yellow]Cancelled.[/yellow]")
        return

    try:
        deleted = NoteStore(get_data_root()).delete(note_id)
    except DictationError as e:
        raise _fail(e)

    if not deleted:
        console.print(f"[red]Error:[/red] Note '{escape(note_id)}' not found.")
        raise typer.Exit(1)
    console.print(f"[green]Deleted note {note_id}[/green]")


def _print_featured(featured: list[Note]) -> None:
    if not featured:
        console.print("[yellow]No notes yet.[/yellow]")
        return
    for note in featured:
        console.print(Panel(escape(note.content), title=note.id, title_align="left"))


@notes_app.command("featured")
def notes_featured() -> None:
    """Show a few random notes as reminders."""
    data_root = get_data_root()
    try:
        notes = NoteStore(data_root).load()
        featured = FeaturedNotes(data_root, limit=_config().featured_notes).current(notes)
    except DictationError as e:
        raise _fail(e)
    _print_featured(featured)


@notes_app.command("got-it")
def notes_got_it(
    note_id: Annotated[str, typer.Argument(help="ID of a featured note")],
) -> None:
    """Dismiss a featured note and show another one instead."""
    data_root = get_data_root()
    try:
        notes = NoteStore(data_root).load()
        featured = FeaturedNotes(data_root, limit=_config().featured_notes).got_it(note_id, notes)
    except DictationError as e:
        raise _fail(e)
    _print_featured(featured)


# =============================================================================
# Backup Commands
# =============================================================================


@app.command("export")
def export_cmd(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Backup file (default: dated name in cwd)"),
    ] = None,
) -> None:
    """Export all sessions and proper nouns to a JSON backup."""
    target = output or Path.cwd() / default_backup_filename()
    try:
        backup = export_backup(get_data_root(), target)
    except DictationError as e:
        raise _fail(e)
    console.print(
        f"[green]Exported {len(backup.sessions)} sessions and "
        f"{len(backup.proper_nouns or [])} proper nouns to[/green] {escape(str(target))}"
    )


@app.command("import")
def import_cmd(
    path: Annotated[Path, typer.Argument(help="Backup file to restore")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Restore a JSON backup, replacing current sessions."""
    try:
        backup = read_backup(path)
    except DictationError as e:
        raise _fail(e)

    if not yes and not typer.confirm(
        f"Found {len(backup.sessions)} records. This will overwrite your current data. Continue?"
    ):
        console.print("[yellow]Cancelled.[/yellow]")
        return

    try:
        import_backup(get_data_root(), backup)
    except DictationError as e:
        raise _fail(e)
    console.print("[green]Data imported successfully![/green]")


if __name__ == "__main__":
    app()
