"""Purge configuration via pydantic-settings (.env + MLCP_* env vars)."""

import sys
from pathlib import Path

from loguru import logger
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import (
    AUDIO_FILE_TYPES,
    DOCUMENT_FILE_TYPES,
    MUSIC_FILE_TYPES,
    ArtPolicy,
    CategorySets,
    Operation,
    normalize_extensions,
)


class PurgeConfig(BaseSettings):
    """Validated, immutable purge configuration with layered resolution:
    .env file < MLCP_* environment variables < constructor kwargs.
    """

    model_config = SettingsConfigDict(
        env_prefix="MLCP_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # -- Paths --
    library_path: Path
    backup_path: Path | None = None

    # -- Options --
    purge: bool = False  # False = simulate only
    art: bool = False  # purge folder-level album art
    documents: bool = False  # keep documents/booklets
    other_audio: bool = False  # keep non-music audio
    verbose: bool = False
    art_policy: ArtPolicy = ArtPolicy.MUSIC_FOLDER

    # -- Category tables (JSON lists when set from the environment) --
    music_types: tuple[str, ...] = MUSIC_FILE_TYPES
    other_audio_types: tuple[str, ...] = AUDIO_FILE_TYPES
    document_types: tuple[str, ...] = DOCUMENT_FILE_TYPES

    # -- Logging --
    log_level: str = "WARNING"
    log_file: Path | None = None

    @field_validator("music_types", "other_audio_types", "document_types")
    @classmethod
    def _normalize_types(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return normalize_extensions(value)

    @property
    def backup_enabled(self) -> bool:
        return self.backup_path is not None

    @property
    def operation(self) -> Operation:
        """What happens to files decided for removal."""
        if self.purge and self.backup_enabled:
            return Operation.BACKUP
        if self.purge:
            return Operation.PURGE
        return Operation.SIMULATE

    def category_sets(self) -> CategorySets:
        """Build the classifier tables for this configuration."""
        return CategorySets(
            music=self.music_types,
            other_audio=self.other_audio_types,
            document=self.document_types,
            art_policy=self.art_policy,
        )

    def setup_logging(self) -> None:
        """Configure loguru for the purge."""
        logger.remove()  # Remove default stderr handler

        log_format = (
            "{time:YYYY-MM-DDTHH:mm:ssZ} | {level:<8} | "
            "{extra[stage]:<8} | {message}"
        )

        def _default_extra(record):
            record["extra"].setdefault("stage", "")
            return True

        logger.add(
            sys.stderr,
            format=log_format,
            level=self.log_level.upper(),
            filter=_default_extra,
        )

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(self.log_file),
                format=log_format,
                level="DEBUG",
                rotation="10 MB",
                retention="30 days",
                filter=_default_extra,
            )
