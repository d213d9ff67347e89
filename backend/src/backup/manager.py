"""pg_dump batch backups into a flat directory of timestamped SQL files."""

from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from db.urls import database_name, mask_url

from .process import BackupError, CommandError, CommandRunner


logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".sql"
TIMESTAMP_FORMAT = "%Y_%m_%d_%H_%M_%S"
TIMESTAMP_SUFFIX = re.compile(r"_(\d{4}_\d{2}_\d{2}_\d{2}_\d{2}_\d{2})$")

PG_DUMP_FLAGS = (
    "--no-owner",
    "--no-privileges",
    "--format=plain",
    "--encoding=UTF8",
)


@dataclass(frozen=True)
class BackupResult:
    url: str
    database: str
    path: Path
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BackupInfo:
    name: str
    path: Path
    size_bytes: int
    modified: dt.datetime


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def ensure_backup_directory(directory: Path) -> Path:
    """Create the backup directory if needed and return it resolved."""

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise BackupError(f"Cannot create backup directory {directory}: {exc}") from exc
    return directory.resolve()


def format_timestamp(moment: dt.datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def backup_path_for(directory: Path, url: str, timestamp: str) -> Path:
    return directory / f"{database_name(url)}_{timestamp}{BACKUP_SUFFIX}"


def dump_command(url: str, pg_dump: str = "pg_dump") -> list[str]:
    return [pg_dump, *PG_DUMP_FLAGS, url]


def run_backups(
    urls: Iterable[str],
    directory: Path,
    *,
    runner: Optional[CommandRunner] = None,
    now: Optional[Callable[[], dt.datetime]] = None,
    pg_dump: str = "pg_dump",
) -> list[BackupResult]:
    """Dump every database in ``urls`` into ``directory``, one at a time.

    A failing database is logged and recorded in its :class:`BackupResult`;
    the remaining databases are still attempted. Only a backup directory that
    cannot be created aborts the batch.
    """

    runner = runner or CommandRunner()
    target_dir = ensure_backup_directory(directory)
    timestamp = format_timestamp((now or _utcnow)())

    results: list[BackupResult] = []
    for url in urls:
        name = database_name(url)
        target = backup_path_for(target_dir, url, timestamp)
        logger.info("Backing up %s (%s) ...", name, mask_url(url))
        try:
            result = runner.capture(dump_command(url, pg_dump))
            target.write_bytes(result.stdout)
        except (CommandError, OSError) as exc:
            logger.error("Failed to back up %s: %s", name, exc)
            results.append(BackupResult(url=url, database=name, path=target, error=str(exc)))
            continue
        logger.info("Backup saved to %s", target)
        results.append(BackupResult(url=url, database=name, path=target))
    return results


def backup_timestamp(path: Path) -> Optional[str]:
    """Return the ``YYYY_MM_DD_HH_MM_SS`` part of a backup file name, if any."""

    stem = path.name[: -len(BACKUP_SUFFIX)] if path.name.endswith(BACKUP_SUFFIX) else path.name
    match = TIMESTAMP_SUFFIX.search(stem)
    return match.group(1) if match else None


def list_backup_files(directory: Path) -> list[Path]:
    """Return the ``.sql`` files in ``directory``, newest first.

    Files are ordered by the timestamp in their name, newest first, with ties
    in name order. Files without a timestamp come last, in name order.
    """

    if not directory.exists():
        return []
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise BackupError(f"Cannot read backup directory {directory}: {exc}") from exc

    files = [item for item in entries if item.is_file() and item.name.endswith(BACKUP_SUFFIX)]
    stamped = sorted((item for item in files if backup_timestamp(item)), key=lambda item: item.name)
    stamped.sort(key=backup_timestamp, reverse=True)
    unstamped = sorted((item for item in files if not backup_timestamp(item)), key=lambda item: item.name)
    return stamped + unstamped


def describe_backups(directory: Path) -> list[BackupInfo]:
    infos = []
    for path in list_backup_files(directory):
        stat = path.stat()
        infos.append(
            BackupInfo(
                name=path.name,
                path=path,
                size_bytes=stat.st_size,
                modified=dt.datetime.fromtimestamp(stat.st_mtime, dt.timezone.utc),
            )
        )
    return infos
