"""
Configuration settings related to cover art handling.
"""

# Edge length in pixels of the square cover embedded into every track.
COVER_SIZE = 512

# Extension used for extracted covers when the embedded image codec is unknown.
DEFAULT_COVER_EXTENSION = "jpg"

# ffprobe codec names mapped to the file extension the extracted stream is
# written with. Codecs not listed here use their codec name as extension.
COVER_CODEC_EXTENSIONS = {
    "mjpeg": "jpg",
    "jpeg": "jpg",
    "png": "png",
    "webp": "webp",
    "bmp": "bmp",
    "gif": "gif",
}

# Per-track cover naming, e.g. "song.cover.tmp.png" and "song.cover.jpg".
EXTRACTED_COVER_SUFFIX = ".cover.tmp"
CROPPED_COVER_SUFFIX = ".cover.jpg"

# Fixed name of the batch-wide fallback cover, distinct from any per-track name.
FALLBACK_COVER_NAME = "cover.fallback.jpg"

# Marker of the cover copy placed next to the file kid3-cli modifies, e.g.
# "3f2a9c0d1e4b.inject.jpg". The stem is a hex digest, so the name never
# needs quoting in a kid3-cli command.
INJECTION_COVER_MARKER = ".inject"

# Picture type passed to kid3-cli.
COVER_PICTURE_TYPE = "Cover (front)"
