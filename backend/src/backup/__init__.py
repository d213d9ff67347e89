"""Backup utilities for PostgreSQL databases."""

from .manager import (
    BackupInfo,
    BackupResult,
    describe_backups,
    ensure_backup_directory,
    format_timestamp,
    list_backup_files,
    run_backups,
)
from .process import BackupError, CommandError, CommandResult, CommandRunner

__all__ = [
    "BackupError",
    "BackupInfo",
    "BackupResult",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "describe_backups",
    "ensure_backup_directory",
    "format_timestamp",
    "list_backup_files",
    "run_backups",
]
