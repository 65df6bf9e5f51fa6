"""
Configuration settings related to audio processing.

This module defines the accepted source extensions, the target codec and
bitrate, and the naming of temporary transcode files.
"""

# ======================================================================================
# Audio File Identification
# ======================================================================================

# Source extensions accepted by the track enumerator (compared lowercased).
AUDIO_EXTENSIONS = (".opus", ".mp3", ".flac", ".m4a", ".ogg", ".wav")

# Suffix yt-dlp gives to downloads that are still in progress.
PARTIAL_DOWNLOAD_SUFFIX = ".part"


# ======================================================================================
# Audio Encoding Parameters
# ======================================================================================

DEFAULT_AUDIO_ENCODER = "libopus"

# Codec name ffprobe reports for a correctly transcoded output.
EXPECTED_OUTPUT_CODEC = "opus"

# Constant target bitrate handed to ffmpeg as-is.
DEFAULT_BITRATE = "64k"

OUTPUT_EXTENSION = ".opus"


# ======================================================================================
# Temporary File Naming
# ======================================================================================

# Suffix replacing a track's extension for the in-progress transcode,
# e.g. "song.tmp.opus".
TEMP_TRANSCODE_SUFFIX = ".tmp.opus"
