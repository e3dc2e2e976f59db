"""Music Library Crud Purge -- remove (or back up) non-music files from a music library.

Core modules:
    config    -- Purge configuration via pydantic-settings (MLCP_* env vars, .env).
                 CLI flags passed as kwargs to PurgeConfig; frozen once built.
                 Also owns loguru setup.
    cli       -- Click CLI entry point (mlcp command). Dry-run unless --purge,
                 --list-types reference tables, progress bar or verbose report.
    classify  -- Extension-based classification (music, other audio, document,
                 album art, resource fork, unknown) and the keep/remove policy
                 for the --art / --documents / --other-audio flags.
    models    -- Enums, static extension tables, CategorySets, RunSummary.
    errors    -- ConfigError (fatal, pre-flight), BackupError (per file),
                 TraversalError (unreadable directory, fatal).

Subpackages:
    ops -- File operations (library walk, backup mirroring, deletion)
"""
