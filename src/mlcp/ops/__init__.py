"""File operations for the crud purge.

Submodules:
    purge  -- Library walk with an explicit stack (no recursion), per-folder
              music detection for album art, pre-flight path/permission checks,
              and PurgeEngine/run() which classify, decide and -- only in purge
              mode -- back up and delete each file. Per-file failures are
              counted in RunSummary and never abort the walk; an unreadable
              directory raises TraversalError with the partial summary.
    backup -- Mirrored backup paths (library/a/b.txt -> backup/a/b.txt),
              create-if-absent backup folders, copy2 with size confirmation
              before the caller deletes the source.
"""
