"""Core enums, extension tables, and result types for the crud purge.

Enums:
    Category   -- File classification bucket (music, other-audio, document,
                  album art, resource fork, unknown).
    Decision   -- Keep or remove, per category and option flags.
    Operation  -- What a run does to removed files (purged, backed-up, simulated).
    ArtPolicy  -- How image files are recognized as folder-level album art.
"""

from dataclasses import dataclass, field
from enum import StrEnum


class Category(StrEnum):
    MUSIC = "music"
    OTHER_AUDIO = "other-audio"
    DOCUMENT = "document"
    ALBUM_ART = "album-art"
    RESOURCE_FORK = "resource-fork"
    UNKNOWN = "unknown"


class Decision(StrEnum):
    KEEP = "keep"
    REMOVE = "remove"


class Operation(StrEnum):
    PURGE = "PURGED"
    BACKUP = "BACKED-UP"
    SIMULATE = "SIMULATED"


class ArtPolicy(StrEnum):
    """Album art recognition heuristic.

    music-folder -- any art-type image in a folder that also holds music
    named        -- only well-known art file names (cover.jpg, folder.png, ...)
    any          -- any art-type image, wherever it is
    """

    MUSIC_FOLDER = "music-folder"
    NAMED = "named"
    ANY = "any"


# File extensions typically associated with music/album files.
MUSIC_FILE_TYPES: tuple[str, ...] = (
    "aac", "aiff", "ape", "dff", "dsd", "dsf", "dxd", "flac", "iso", "m4a",
    "m4p", "mp3", "oga", "ogg", "wav", "wma", "wmv",
)  # fmt: skip

# File extensions typically associated with non-music audio files.
AUDIO_FILE_TYPES: tuple[str, ...] = (
    "3gp", "aa", "aax", "act", "amr", "au", "awb", "dct", "dss", "dvf", "gsm",
    "iklax", "ivs", "m4b", "mmf", "mpc", "msv", "mogg", "opus", "ra", "rm",
    "raw", "sln", "tta", "vox", "wmv", "wv", "webm",
)  # fmt: skip

# Common document/booklet file extensions.
DOCUMENT_FILE_TYPES: tuple[str, ...] = ("txt", "pdf")

# Folder-level album art file names (without extension)
ALBUM_ART_FILENAMES: tuple[str, ...] = (
    "album", "cover", "small_cover", "large_cover", "folder", "thumb",
    "albumartsmall", "albumartmedium", "albumartlarge",
)  # fmt: skip

ALBUM_ART_EXTENSIONS: tuple[str, ...] = ("jpg", "jpeg", "png")

# macOS AppleDouble prefix ("._cover.jpg")
RESOURCE_FORK_PREFIX = "._"

# Exit status is the per-file error count, capped to what a process can return
MAX_EXIT_CODE = 255


def normalize_extensions(extensions) -> tuple[str, ...]:
    """Lowercase and strip leading dots, keeping first-seen order."""
    seen: dict[str, None] = {}
    for ext in extensions:
        norm = str(ext).strip().lstrip(".").lower()
        if norm:
            seen.setdefault(norm, None)
    return tuple(seen)


@dataclass(frozen=True)
class CategorySets:
    """Extension tables and art heuristics used by the classifier.

    Built once per run and passed by reference; never mutated.
    """

    music: tuple[str, ...] = MUSIC_FILE_TYPES
    other_audio: tuple[str, ...] = AUDIO_FILE_TYPES
    document: tuple[str, ...] = DOCUMENT_FILE_TYPES
    art_extensions: tuple[str, ...] = ALBUM_ART_EXTENSIONS
    art_filenames: tuple[str, ...] = ALBUM_ART_FILENAMES
    art_policy: ArtPolicy = ArtPolicy.MUSIC_FOLDER

    def is_music(self, extension: str) -> bool:
        return extension.lower() in self.music


@dataclass
class RunSummary:
    """Counts and per-file report lines accumulated during one run.

    ``removed`` counts files taken out of the library (or that would be, in a
    simulation); ``backed_up`` is the subset that were copied to the backup
    root first.
    """

    operation: Operation = Operation.SIMULATE
    examined: int = 0
    kept: int = 0
    backed_up: int = 0
    removed: int = 0
    skipped_due_to_backup_failure: int = 0
    failed: int = 0
    lines: list[str] = field(default_factory=list)

    @property
    def errors(self) -> int:
        return self.skipped_due_to_backup_failure + self.failed

    @property
    def affected(self) -> int:
        """Files removed (or to be removed) plus failures; kept files excluded."""
        return self.removed + self.errors

    @property
    def exit_code(self) -> int:
        return min(self.errors, MAX_EXIT_CODE)

    def to_dict(self) -> dict:
        return {
            "operation": self.operation.value,
            "examined": self.examined,
            "kept": self.kept,
            "backed_up": self.backed_up,
            "removed": self.removed,
            "skipped_due_to_backup_failure": self.skipped_due_to_backup_failure,
            "failed": self.failed,
            "errors": self.errors,
            "affected": self.affected,
        }
