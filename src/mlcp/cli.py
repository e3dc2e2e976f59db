"""CLI entry point for the music library crud purge."""

import sys
from pathlib import Path

import click
from loguru import logger
from pydantic import ValidationError

from .config import PurgeConfig
from .errors import ConfigError, TraversalError
from .models import (
    AUDIO_FILE_TYPES,
    DOCUMENT_FILE_TYPES,
    MUSIC_FILE_TYPES,
    ArtPolicy,
    RunSummary,
)
from .ops.purge import PurgeEngine, preflight

log = logger.bind(stage="cli")


def print_types() -> None:
    """Print the music (kept) and other audio/document (purged) file types."""
    _print_list("Music file types: ", MUSIC_FILE_TYPES, keep=True)
    _print_list("Audio file types: ", AUDIO_FILE_TYPES, keep=False)
    _print_list("Document/booklet file types: ", DOCUMENT_FILE_TYPES, keep=False)


def _print_list(prefix: str, extensions: tuple[str, ...], keep: bool) -> None:
    # Green = never purged, red = purged by default
    styled = click.style(prefix, fg="green" if keep else "red")
    click.echo(styled + ", ".join(extensions))


def _print_summary(summary: RunSummary, aborted: bool = False) -> None:
    for line in summary.lines:
        if line.startswith("[ERROR]"):
            click.secho(line, fg="red")
        else:
            click.echo(line)
    if aborted:
        return

    op = summary.operation.value
    if summary.errors == 0:
        click.echo(f"{summary.affected} files successfully {op}.")
    else:
        click.secho(
            f"{summary.errors} errors out of {summary.affected} files.", fg="red"
        )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("library_path", required=False, type=click.Path(path_type=Path))
@click.argument("backup_path", required=False, type=click.Path(path_type=Path))
@click.option(
    "-p",
    "--purge",
    is_flag=True,
    help="Perform the actual purge. Without it nothing changes (simulation).",
)
@click.option("-a", "--art", is_flag=True, help="Purge folder-level album art.")
@click.option(
    "-o", "--other-audio", is_flag=True, help="Keep other (non-music) audio files."
)
@click.option(
    "-d", "--documents", is_flag=True, help="Keep document/booklet files (txt, pdf)."
)
@click.option(
    "-l",
    "--list-types",
    is_flag=True,
    help="List music (kept) vs. other audio and document (purged) file types.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Print every affected file with its operation.",
)
@click.option(
    "--art-policy",
    type=click.Choice([p.value for p in ArtPolicy]),
    default=None,
    help="How images are recognized as album art (default: music-folder).",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to .env file with MLCP_* settings.",
)
@click.version_option(package_name="mlcp")
def main(
    library_path: Path | None,
    backup_path: Path | None,
    purge: bool,
    art: bool,
    other_audio: bool,
    documents: bool,
    list_types: bool,
    verbose: bool,
    art_policy: str | None,
    config_file: Path | None,
) -> None:
    """Purge, or back up, "crud" files from a music library.

    Crud files are files that aren't one of the types designated to keep. By
    default every non-music file and document/booklet is removed, while
    folder-level album art is preserved.

    If BACKUP_PATH is given, purged files are copied there first, mirroring
    the library's folder structure, so they can be merged back later.

    Unless --purge is given NO changes are made: the run is simulated so its
    effects can be reviewed (with --verbose) first.
    """
    if list_types:
        others = (
            library_path,
            backup_path,
            purge,
            art,
            other_audio,
            documents,
            verbose,
            art_policy,
            config_file,
        )
        if any(others):
            raise click.UsageError(
                "--list-types cannot be combined with other options."
            )
        print_types()
        return

    # Only pass flags that were set so MLCP_* env vars can supply defaults
    config_kwargs: dict = {
        k: v
        for k, v in {
            "purge": purge,
            "art": art,
            "other_audio": other_audio,
            "documents": documents,
            "verbose": verbose,
        }.items()
        if v
    }
    if library_path is not None:
        config_kwargs["library_path"] = library_path
    if backup_path is not None:
        config_kwargs["backup_path"] = backup_path
    if art_policy is not None:
        config_kwargs["art_policy"] = ArtPolicy(art_policy)

    try:
        config = PurgeConfig(_env_file=config_file or ".env", **config_kwargs)
    except ValidationError as e:
        missing = any(err["loc"] == ("library_path",) for err in e.errors())
        if missing and library_path is None:
            raise click.UsageError("Missing argument 'LIBRARY_PATH'.") from e
        raise click.UsageError(str(e)) from e

    config.setup_logging()
    if config_file:
        log.debug(f"Loaded settings from {config_file}")

    engine = PurgeEngine(config)
    if not config.purge:
        click.echo("[DRY-RUN] No changes will be made (use --purge to apply)")

    try:
        # Check paths before the progress bar pre-pass walks the library
        preflight(config)
        if config.verbose:
            summary = engine.run()
        else:
            with click.progressbar(
                length=engine.count_files(),
                label=config.operation.value.capitalize(),
                show_pos=True,
                item_show_func=lambda p: p.name if p else "",
            ) as bar:
                engine.progress = lambda p: bar.update(1, p)
                summary = engine.run()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    except TraversalError as e:
        if config.verbose:
            _print_summary(e.summary, aborted=True)
        raise click.ClickException(str(e)) from e

    if config.verbose:
        _print_summary(summary)
    elif summary.errors:
        click.secho(
            f"{summary.errors} errors out of {summary.affected} files "
            "(use --verbose for details).",
            fg="red",
        )

    if summary.exit_code:
        sys.exit(summary.exit_code)
