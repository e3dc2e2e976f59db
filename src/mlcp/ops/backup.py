"""Backup and delete helpers for purged files.

The backup root mirrors the library's folder structure, so a backup can be
merged back by copying the backup root over the library root.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger

from ..errors import BackupError

log = logger.bind(stage="backup")


def backup_target(path: Path, library_root: Path, backup_root: Path) -> Path:
    """Mirrored location of a library file under the backup root."""
    return backup_root / path.relative_to(library_root)


def ensure_backup_dir(target_dir: Path, source: Path) -> None:
    """Create a backup folder (and its parents) if it does not exist yet."""
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.warning(f"Could not create backup directory: {target_dir} ({e})")
        raise BackupError(source, target_dir, e) from e


def backup_file(path: Path, library_root: Path, backup_root: Path) -> Path:
    """Copy a library file to its mirrored backup location.

    The backup root may sit on another volume. The copy keeps timestamps
    (copy2) and is confirmed present with the source's size before
    returning. Raises BackupError on any failure; the source file is never
    touched here.
    """
    target = backup_target(path, library_root, backup_root)
    ensure_backup_dir(target.parent, path)

    try:
        shutil.copy2(path, target, follow_symlinks=False)
    except OSError as e:
        log.warning(f"Could not backup: {path} -> {target} ({e})")
        raise BackupError(path, target, e) from e

    if not _copy_confirmed(path, target):
        log.warning(f"Backup copy missing or incomplete: {target}")
        raise BackupError(path, target)

    log.debug(f"Backed up {path} -> {target}")
    return target


def _copy_confirmed(source: Path, target: Path) -> bool:
    try:
        return target.lstat().st_size == source.lstat().st_size
    except OSError:
        return False


def remove_file(path: Path) -> None:
    """Delete a single library file (the link itself for symlinks)."""
    path.unlink()
    log.debug(f"Removed {path}")
