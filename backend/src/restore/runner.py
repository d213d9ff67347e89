"""Interactive restore of a saved SQL dump through psql."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from backup.manager import BACKUP_SUFFIX, ensure_backup_directory, list_backup_files
from backup.process import BackupError, CommandError, CommandRunner
from db.urls import POSTGRES_SCHEME, is_postgres_url, mask_url

from .prompts import Prompter


logger = logging.getLogger(__name__)

SELECT_MESSAGE = "Select a backup to restore"
TARGET_MESSAGE = "Enter target PostgreSQL URL"


class NoBackupsError(BackupError):
    """Raised when the backup directory holds no ``.sql`` files."""


class RestoreOutcome(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


def validate_target_url(value: str) -> Optional[str]:
    if is_postgres_url(value):
        return None
    return f"Must start with {POSTGRES_SCHEME}"


def restore_command(target: str, dump_file: Path, psql: str = "psql") -> list[str]:
    return [psql, target, "-f", str(dump_file)]


def _resolve_dump_file(path: Path) -> Path:
    candidate = path.expanduser().resolve()
    if not candidate.is_file():
        raise BackupError(f"Backup not found: {candidate}")
    if not candidate.name.endswith(BACKUP_SUFFIX):
        raise BackupError(f"Not a SQL backup: {candidate}")
    return candidate


def run_restore(
    directory: Path,
    prompter: Prompter,
    *,
    runner: Optional[CommandRunner] = None,
    psql: str = "psql",
    dump_file: Optional[Path] = None,
    target: Optional[str] = None,
) -> RestoreOutcome:
    """Restore one backup into one target database.

    The steps run in a fixed order: list the backups, let the operator pick
    one, ask for the target connection string and stream the file through
    ``psql`` with the terminal attached. ``dump_file`` and ``target`` answer
    the corresponding prompt in advance.
    """

    runner = runner or CommandRunner()

    if dump_file is None:
        backup_dir = ensure_backup_directory(directory)
        files = list_backup_files(backup_dir)
        if not files:
            raise NoBackupsError(f"No backup files found in {directory}")
        by_name = {item.name: item for item in files}
        choice = prompter.select(SELECT_MESSAGE, list(by_name))
        if choice is None:
            logger.info("No file selected")
            return RestoreOutcome.CANCELLED
        dump_file = by_name[choice]
    else:
        dump_file = _resolve_dump_file(dump_file)

    if target is None:
        target = prompter.text(TARGET_MESSAGE, validate_target_url)
        if target is None:
            logger.info("No target database given")
            return RestoreOutcome.CANCELLED
    else:
        error = validate_target_url(target)
        if error is not None:
            raise BackupError(error)

    logger.info("Restoring %s -> %s", dump_file, mask_url(target))
    try:
        runner.passthrough(restore_command(target, dump_file, psql))
    except CommandError as exc:
        logger.error("Restore of %s failed: %s", dump_file.name, exc)
        return RestoreOutcome.FAILED
    logger.info("Restore completed from %s", dump_file)
    return RestoreOutcome.COMPLETED
