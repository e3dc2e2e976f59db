"""Exception hierarchy for the music library crud purge."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import RunSummary


class PurgeError(Exception):
    """Base exception for all purge errors."""


class ConfigError(PurgeError):
    """Invalid library/backup path or missing permissions.

    Raised before any traversal starts.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class BackupError(PurgeError):
    """A single file could not be backed up; the source stays in place."""

    def __init__(self, path: Path, target: Path, error: OSError | None = None) -> None:
        reason = (error.strerror or str(error)) if error else "backup copy not found"
        super().__init__(f"Could not backup: {path} -> {target} ({reason})")
        self.path = path
        self.target = target
        self.error = error


class TraversalError(PurgeError):
    """A directory inside the library could not be listed. Aborts the run."""

    def __init__(self, path: Path, error: OSError, summary: RunSummary) -> None:
        super().__init__(f"Could not read directory {path}: {error.strerror or error}")
        self.path = path
        self.error = error
        self.summary = summary
