"""
This package contains utility modules for the Opus Finalizer.

These modules provide helper functions that don't belong to a specific domain
model or service: running and probing external tools, locating executables,
and formatting values for log output.
"""
