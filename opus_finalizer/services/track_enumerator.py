"""
Discovers the tracks of a batch in the working directory.

The working directory doubles as scratch space, so besides the downloaded
tracks it may hold temporary transcodes, per-track cover images, the batch
fallback cover and partial downloads. Only real tracks are returned.
"""

import re
from collections import Counter
from pathlib import Path

from loguru import logger

from ..config.audio import AUDIO_EXTENSIONS, PARTIAL_DOWNLOAD_SUFFIX, TEMP_TRANSCODE_SUFFIX
from ..config.cover import (
    CROPPED_COVER_SUFFIX,
    EXTRACTED_COVER_SUFFIX,
    FALLBACK_COVER_NAME,
    INJECTION_COVER_MARKER,
)
from ..domain.models import BatchConfig, Track
from ..utils.format_utils import contains_any_extensions

# "<base>.cover.tmp.<ext>" and "<digest>.inject.<ext>", with a single extension.
_COVER_COPY_PATTERN = re.compile(
    rf"({re.escape(EXTRACTED_COVER_SUFFIX)}|{re.escape(INJECTION_COVER_MARKER)})\.[^.]+$"
)


def is_transient_artifact(path: Path) -> bool:
    """
    True for files this application (or yt-dlp) creates as intermediates.

    Only the exact suffixes written by the pipeline count, so a track whose
    own title contains ".tmp." or ".cover." is still processed.
    """
    name = path.name.lower()
    return (
        name.endswith(TEMP_TRANSCODE_SUFFIX)
        or name.endswith(CROPPED_COVER_SUFFIX)
        or name == FALLBACK_COVER_NAME
        or name.endswith(PARTIAL_DOWNLOAD_SUFFIX)
        or _COVER_COPY_PATTERN.search(name) is not None
    )


def enumerate_tracks(config: BatchConfig) -> list[Track]:
    """
    Lists the eligible media files of the working directory, sorted by file name.

    The listing is not recursive and has no side effects. A missing or empty
    working directory yields an empty list.
    """
    working_dir = config.working_dir
    if not working_dir.is_dir():
        logger.warning(f"Working directory does not exist: {working_dir}")
        return []

    candidates = sorted(
        (p for p in working_dir.iterdir() if p.is_file()),
        key=lambda p: p.name,
    )
    tracks = []
    for path in candidates:
        if not contains_any_extensions(path, AUDIO_EXTENSIONS):
            continue
        if is_transient_artifact(path):
            logger.info(f"Skipping leftover temp file: {path.name}")
            continue
        tracks.append(Track.from_path(path, config))

    base_names = Counter(t.base_name for t in tracks)
    for base_name, count in base_names.items():
        if count > 1:
            # Same destination for every one of them; the last processed wins.
            logger.warning(f"{count} tracks share the name '{base_name}' and will overwrite each other")

    logger.debug(f"Found {len(tracks)} track(s) in {working_dir}")
    return tracks
