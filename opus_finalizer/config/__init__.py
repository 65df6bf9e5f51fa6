"""
Configuration Package for the Opus Finalizer.

This package centralizes the static configuration settings for the application.
Keeping configuration apart from the pipeline logic makes it easy to adjust
tool names, directory defaults and encoding parameters without touching the
core code.

This package includes settings for:
- Common application settings like logging formats, default directories and
  the names of external executables.
- Audio file identification and encoding parameters.
- Cover art geometry and temporary cover file naming.
"""
