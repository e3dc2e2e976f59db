"""Purge engine -- walks a music library and removes (or backs up) crud.

Every file is classified and decided the same way whether or not the run
mutates anything; only _apply() touches the file system, and only when
config.purge is set. Per-file failures are logged, counted and skipped.
Only a bad configuration (pre-flight) or an unreadable directory aborts.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ..classify import classify, decide, folder_has_music
from ..config import PurgeConfig
from ..errors import BackupError, ConfigError, TraversalError
from ..models import Category, CategorySets, Decision, RunSummary
from .backup import backup_file, backup_target, remove_file

log = logger.bind(stage="purge")

ProgressCallback = Callable[[Path], None]


@dataclass
class LibraryFolder:
    """One directory's worth of walk results."""

    path: Path
    files: list[Path] = field(default_factory=list)
    subdirs: list[Path] = field(default_factory=list)
    unreadable: list[Path] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Pre-flight
# ---------------------------------------------------------------------------


def preflight(config: PurgeConfig) -> None:
    """Fail fast on unusable paths before any file is touched.

    Write access is only required when the run will actually purge.
    """
    library = config.library_path
    if not library.exists():
        raise ConfigError(f'Library path "{library}" does not exist.', library)
    if not library.is_dir():
        raise ConfigError(f'Library path "{library}" is not a directory.', library)
    if not os.access(library, os.R_OK | os.X_OK):
        raise ConfigError(f'Library path "{library}" is not readable.', library)

    backup = config.backup_path
    if backup is not None:
        if not backup.exists():
            raise ConfigError(f'Backup path "{backup}" does not exist.', backup)
        if not backup.is_dir():
            raise ConfigError(f'Backup path "{backup}" is not a directory.', backup)
        if backup.resolve() == library.resolve():
            raise ConfigError(
                f'Backup path "{backup}" must differ from the library path.', backup
            )

    if not config.purge:
        return

    if not os.access(library, os.W_OK):
        raise ConfigError(f'Library path "{library}" is not writable.', library)
    if backup is not None and not os.access(backup, os.W_OK):
        raise ConfigError(f'Backup path "{backup}" is not writable.', backup)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def _scan(directory: Path, skip: frozenset[Path]) -> LibraryFolder:
    """List one directory. Raises OSError if it cannot be read."""
    folder = LibraryFolder(path=directory)
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        path = Path(entry.path)
        try:
            if entry.is_dir(follow_symlinks=False):
                if path in skip:
                    log.debug(f"Skipping backup root inside library: {path}")
                else:
                    folder.subdirs.append(path)
            elif entry.is_symlink() and entry.is_dir():
                log.warning(f"Not following directory symlink, skipping: {path}")
            else:
                folder.files.append(path)
        except OSError as e:
            log.warning(f"Cannot stat {path}, skipping ({e})")
            folder.unreadable.append(path)

    return folder


def walk_library(
    root: Path, skip: frozenset[Path] = frozenset()
) -> Iterator[LibraryFolder]:
    """Yield every folder under root (root included) with its files.

    Uses an explicit stack so deeply nested libraries can't exhaust the
    call stack. Symlinked directories are never descended into. Raises
    OSError when a directory cannot be listed.
    """
    stack = [root]
    while stack:
        folder = _scan(stack.pop(), skip)
        # Reversed so folders come off the stack in name order
        stack.extend(reversed(folder.subdirs))
        yield folder


def count_library_files(root: Path, skip: frozenset[Path] = frozenset()) -> int:
    """Number of files a run would examine (best effort, for progress bars)."""
    total = 0
    try:
        for folder in walk_library(root, skip):
            total += len(folder.files)
    except OSError as e:
        log.debug(f"File count stopped early: {e}")
    return total


def _skip_paths(library_root: Path, backup_root: Path | None) -> frozenset[Path]:
    if backup_root is None:
        return frozenset()
    backup_root = backup_root.resolve()
    if backup_root.is_relative_to(library_root):
        return frozenset({backup_root})
    return frozenset()


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class PurgeEngine:
    """Runs one purge (or simulation) over a library."""

    def __init__(
        self,
        config: PurgeConfig,
        category_sets: CategorySets | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self.category_sets = category_sets or config.category_sets()
        self.progress = progress
        self.library_root = config.library_path.resolve()
        self.backup_root = (
            config.backup_path.resolve() if config.backup_path is not None else None
        )
        self.summary = RunSummary(operation=config.operation)
        self._skip = _skip_paths(self.library_root, self.backup_root)
        self._failed_dirs: set[Path] = set()

    def count_files(self) -> int:
        """Files this run will examine; used to size the CLI progress bar."""
        return count_library_files(self.library_root, self._skip)

    def run(self) -> RunSummary:
        preflight(self.config)
        log.info(
            f"Starting {self.summary.operation.value.lower()} run: "
            f"library={self.library_root} backup={self.backup_root} "
            f"art={self.config.art} documents={self.config.documents} "
            f"other_audio={self.config.other_audio}"
        )

        walker = walk_library(self.library_root, self._skip)
        while True:
            try:
                folder = next(walker)
            except StopIteration:
                break
            except OSError as e:
                path = Path(e.filename) if e.filename else self.library_root
                log.error(f"Could not read directory {path}: {e}")
                raise TraversalError(path, e, self.summary) from e
            self._process_folder(folder)

        s = self.summary
        log.info(
            f"Run complete: {s.examined} examined, {s.kept} kept, "
            f"{s.removed} removed, {s.backed_up} backed up, {s.errors} errors"
        )
        return s

    def _process_folder(self, folder: LibraryFolder) -> None:
        for path in folder.unreadable:
            self.summary.failed += 1
            self._report("ERROR", path)

        has_music = folder_has_music(
            (p.name for p in folder.files), self.category_sets
        )
        for path in folder.files:
            self._process_file(path, has_music)
            if self.progress is not None:
                self.progress(path)

    def _process_file(self, path: Path, in_music_folder: bool) -> None:
        config = self.config
        summary = self.summary
        summary.examined += 1

        category = classify(path, self.category_sets, in_music_folder)
        decision = decide(
            category,
            art=config.art,
            documents=config.documents,
            other_audio=config.other_audio,
        )
        log.debug(f"{category.value} -> {decision.value}: {path}")

        if decision == Decision.KEEP:
            summary.kept += 1
            if category == Category.RESOURCE_FORK:
                self._report("RES", path)
            return

        if not config.purge:
            summary.removed += 1
            if config.backup_enabled:
                summary.backed_up += 1
            self._report(summary.operation.value, path)
            return

        self._apply(path)

    def _apply(self, path: Path) -> None:
        """Back up (when configured) and delete one file."""
        summary = self.summary

        if self.backup_root is not None:
            target_dir = backup_target(path, self.library_root, self.backup_root).parent
            if self._under_failed_dir(target_dir):
                log.warning(f"Skipping {path}: backup directory {target_dir} unusable")
                summary.skipped_due_to_backup_failure += 1
                self._report("ERROR", path)
                return
            try:
                backup_file(path, self.library_root, self.backup_root)
            except BackupError as e:
                if e.target == target_dir:
                    self._failed_dirs.add(target_dir)
                summary.skipped_due_to_backup_failure += 1
                self._report("ERROR", path)
                return

        try:
            remove_file(path)
        except OSError as e:
            log.warning(f"Could not purge: {path} ({e})")
            summary.failed += 1
            self._report("ERROR", path)
            return

        if self.backup_root is not None:
            summary.backed_up += 1
        summary.removed += 1
        self._report(summary.operation.value, path)

    def _under_failed_dir(self, target_dir: Path) -> bool:
        return any(
            target_dir == d or d in target_dir.parents for d in self._failed_dirs
        )

    def _report(self, label: str, path: Path) -> None:
        if self.config.verbose:
            self.summary.lines.append(f"[{label}] {path}")


def run(
    config: PurgeConfig,
    category_sets: CategorySets | None = None,
    progress: ProgressCallback | None = None,
) -> RunSummary:
    """Purge (or simulate purging) the configured library.

    Raises ConfigError before touching anything if the paths are unusable,
    and TraversalError (carrying the partial summary) if a directory inside
    the library cannot be read.
    """
    return PurgeEngine(config, category_sets=category_sets, progress=progress).run()
