"""
This package contains the core domain models of the Opus Finalizer.

The domain layer represents the fundamental concepts of finalizing a batch of
downloaded tracks: the immutable batch settings, the tracks themselves, the
per-track cover art state, the batch-wide fallback cover and the records of
failures. It is independent of the CLI and of the external tools.

Modules:
    exceptions.py: Custom exception types. Stage exceptions are recoverable at
                   the per-track stage boundary; fatal exceptions abort a run
                   before the pipeline starts.
    models.py: `BatchConfig`, `Track`, `CoverArtState`, `BatchCoverMemory`
               and `ErrorRecord`.
"""
