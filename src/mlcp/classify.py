"""File classification and keep/remove policy.

classify() buckets a file by its extension (and, for album art, by its name
and folder); decide() applies the option flags to a bucket. Neither touches
the file system.
"""

from pathlib import Path

from .models import (
    RESOURCE_FORK_PREFIX,
    ArtPolicy,
    Category,
    CategorySets,
    Decision,
)


def file_extension(path: Path | str) -> str:
    """Lowercased extension without the dot ("" when there is none)."""
    return Path(path).suffix.lstrip(".").lower()


def is_resource_fork(file_name: str) -> bool:
    """True for macOS AppleDouble files ("._name")."""
    return file_name.startswith(RESOURCE_FORK_PREFIX)


def folder_has_music(file_names, category_sets: CategorySets) -> bool:
    """Whether any of a folder's file names carries a music extension."""
    return any(
        category_sets.is_music(file_extension(name))
        for name in file_names
        if not is_resource_fork(name)
    )


def _is_album_art(
    path: Path, ext: str, category_sets: CategorySets, in_music_folder: bool
) -> bool:
    if ext not in category_sets.art_extensions:
        return False
    policy = category_sets.art_policy
    if policy == ArtPolicy.ANY:
        return True
    if policy == ArtPolicy.NAMED:
        return path.stem.lower() in category_sets.art_filenames
    return in_music_folder


def classify(
    path: Path | str,
    category_sets: CategorySets,
    in_music_folder: bool = False,
) -> Category:
    """Return the category of a file.

    Tables are checked in the order music, other audio, document, so an
    extension listed twice (wmv) counts as music. Images become album art
    according to ``category_sets.art_policy``; ``in_music_folder`` is only
    consulted by the music-folder policy.
    """
    path = Path(path)
    if is_resource_fork(path.name):
        return Category.RESOURCE_FORK

    ext = file_extension(path)
    if ext in category_sets.music:
        return Category.MUSIC
    if ext in category_sets.other_audio:
        return Category.OTHER_AUDIO
    if ext in category_sets.document:
        return Category.DOCUMENT
    if _is_album_art(path, ext, category_sets, in_music_folder):
        return Category.ALBUM_ART
    return Category.UNKNOWN


def decide(
    category: Category,
    art: bool = False,
    documents: bool = False,
    other_audio: bool = False,
) -> Decision:
    """Keep or remove a file of the given category.

    art         -- remove album art (kept by default)
    documents   -- keep documents (removed by default)
    other_audio -- keep non-music audio (removed by default)
    """
    if category in (Category.MUSIC, Category.RESOURCE_FORK):
        return Decision.KEEP
    if category == Category.ALBUM_ART:
        return Decision.REMOVE if art else Decision.KEEP
    if category == Category.DOCUMENT:
        return Decision.KEEP if documents else Decision.REMOVE
    if category == Category.OTHER_AUDIO:
        return Decision.KEEP if other_audio else Decision.REMOVE
    return Decision.REMOVE
