"""
Opus Finalizer: turn a directory of downloaded tracks into low-bitrate Opus
files with square cover art, replacing each original only after its
replacement has been verified.
"""

__version__ = "0.1.0"
