"""Backup export and import.

A backup bundles every session together with the proper-noun list:

    {"version": 2, "sessions": [...], "properNouns": ["john", ...]}

Older backups were a bare JSON array of sessions; those still import,
keeping whatever proper nouns are already registered.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from dictation_master.comparison import ProperNounSet
from dictation_master.errors import ErrorContext, ValidationError
from dictation_master.logging import get_logger, log_operation_complete, log_operation_start
from dictation_master.models import Session
from dictation_master.storage import (
    NotFoundError,
    ProperNounStore,
    SessionStore,
    StorageError,
    atomic_write,
    atomic_write_json,
    dump_models,
    load_models,
    read_json,
)

logger = get_logger(__name__)

BACKUP_VERSION = 2


@dataclass
class Backup:
    """Parsed contents of a backup file.

    Attributes:
        sessions: Sessions to restore
        proper_nouns: Proper nouns to restore, or None for a legacy backup
            that doesn't carry any
        version: Format version the data was read from (1 = legacy array)
    """

    sessions: list[Session]
    proper_nouns: list[str] | None
    version: int = BACKUP_VERSION

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "version": BACKUP_VERSION,
            "sessions": dump_models(self.sessions),
            "properNouns": list(self.proper_nouns or []),
        }


def default_backup_filename(today: date | None = None) -> str:
    """Name such as ``dictation-backup-2024-05-01.json``."""
    return f"dictation-backup-{(today or date.today()).isoformat()}.json"


def parse_backup(data: Any, source: str = "backup") -> Backup:
    """Interpret decoded backup JSON.

    Args:
        data: Parsed JSON
        source: Name used in error messages

    Returns:
        Backup with validated sessions

    Raises:
        ValidationError: If the data is neither format
        StorageError: If a session record is malformed
    """
    if isinstance(data, list):
        return Backup(
            sessions=load_models(data, Session, source),
            proper_nouns=None,
            version=1,
        )

    if isinstance(data, dict) and isinstance(data.get("sessions"), list):
        nouns = data.get("properNouns")
        return Backup(
            sessions=load_models(data["sessions"], Session, source),
            proper_nouns=[str(n) for n in nouns] if isinstance(nouns, list) else [],
            version=int(data.get("version", BACKUP_VERSION)),
        )

    raise ValidationError("Invalid format", context={"source": source})


def read_backup(path: Path) -> Backup:
    """Load and parse a backup file.

    Raises:
        NotFoundError: If the file doesn't exist
        StorageError: If a session record is malformed
        ValidationError: If the file isn't JSON or isn't a backup
    """
    try:
        data = read_json(path)
    except NotFoundError:
        raise
    except StorageError as e:
        raise ValidationError(
            "Failed to parse file. Please select a valid backup JSON.",
            context={"path": str(path)},
        ) from e
    return parse_backup(data, source=path.name)


def export_backup(data_root: Path, output: Path) -> Backup:
    """Write all sessions and proper nouns to ``output``.

    Returns:
        The exported backup
    """
    log_operation_start(logger, "export", path=str(output))
    backup = Backup(
        sessions=SessionStore(data_root).load(),
        proper_nouns=ProperNounStore(data_root).load().to_list(),
    )
    atomic_write_json(output, backup.to_dict())
    log_operation_complete(
        logger,
        "export",
        path=str(output),
        sessions=len(backup.sessions),
    )
    return backup


def import_backup(data_root: Path, backup: Backup) -> None:
    """Replace stored sessions (and proper nouns, if included) with a backup.

    Both files are written together; if writing the proper nouns fails
    the previous sessions file is put back as it was. The existing file
    is not parsed, so a corrupt ``sessions.json`` can be restored over.
    """
    session_store = SessionStore(data_root)
    noun_store = ProperNounStore(data_root)
    log_operation_start(logger, "import", sessions=len(backup.sessions))

    previous: str | None = None
    if session_store.path.exists():
        try:
            previous = session_store.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot keep a copy of {session_store.path} for rollback: {e}")

    def restore_sessions() -> None:
        if previous is None:
            session_store.path.unlink(missing_ok=True)
        else:
            atomic_write(session_store.path, previous)

    with ErrorContext(
        "import",
        rollback=restore_sessions,
        context={"sessions": len(backup.sessions)},
    ):
        session_store.replace_all(backup.sessions)
        if backup.proper_nouns is not None:
            noun_store.save(ProperNounSet(backup.proper_nouns))

    log_operation_complete(
        logger,
        "import",
        sessions=len(backup.sessions),
        legacy=backup.proper_nouns is None,
    )
