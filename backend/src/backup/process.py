"""Subprocess execution for the PostgreSQL client tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence


logger = logging.getLogger(__name__)


class BackupError(RuntimeError):
    """Raised when a backup or restore operation fails."""


class CommandError(BackupError):
    """Raised when an external command cannot be spawned or exits non-zero."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


@dataclass(frozen=True)
class CommandResult:
    command: tuple[str, ...]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Run a command either capturing its output or attached to the terminal.

    Both modes raise :class:`CommandError` when the executable is missing or
    the child exits with a non-zero status.
    """

    def capture(self, command: Sequence[str]) -> CommandResult:
        """Run ``command`` and buffer its stdout and stderr in memory."""

        logger.debug("Running (captured): %s", command[0])
        try:
            completed = subprocess.run(list(command), capture_output=True, check=False)
        except OSError as exc:
            raise _spawn_error(command, exc) from exc
        result = CommandResult(
            command=tuple(command),
            returncode=completed.returncode,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
        )
        _raise_for_status(result)
        return result

    def passthrough(self, command: Sequence[str]) -> CommandResult:
        """Run ``command`` with stdout and stderr inherited from this process."""

        logger.debug("Running (passthrough): %s", command[0])
        try:
            completed = subprocess.run(list(command), check=False)
        except OSError as exc:
            raise _spawn_error(command, exc) from exc
        result = CommandResult(command=tuple(command), returncode=completed.returncode)
        _raise_for_status(result)
        return result


def _spawn_error(command: Sequence[str], exc: OSError) -> CommandError:
    if isinstance(exc, FileNotFoundError):
        message = f"Required command not found: {command[0]}"
    else:
        message = f"Could not start {command[0]}: {exc}"
    return CommandError(message, command=command)


def _raise_for_status(result: CommandResult) -> None:
    if result.ok:
        return
    stderr = result.stderr.decode("utf-8", errors="replace").strip()
    message = stderr or f"{result.command[0]} exited with status {result.returncode}"
    raise CommandError(message, command=result.command, returncode=result.returncode, stderr=stderr)
