"""
Moves verified output into place and cleans up after a track.
"""

import shutil

from loguru import logger

from ..domain.exceptions import FinalizeFailedException
from ..domain.models import CoverArtState, Track
from ..utils.format_utils import file_size_text


class Finalizer:
    """
    Last stage of a track.

    Transient cover files are removed whatever happened earlier. The transcoded
    file replaces the original only when `verified` is True; otherwise the
    original and the failed temp file are both left in the working directory
    for inspection.
    """

    def cleanup_covers(self, track: Track, state: CoverArtState):
        paths = set(track.transient_cover_paths())
        for path in (state.extracted_path, state.cropped_path):
            if path is not None:
                paths.add(path)
        for path in sorted(paths):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"  Could not remove {path.name}: {e}")

    def finalize(self, track: Track, state: CoverArtState, verified: bool):
        logger.info("  Cleanup")
        self.cleanup_covers(track, state)

        if not verified:
            logger.warning(
                f"  Keeping original {track.filename}; nothing moved to {track.destination_path.parent}"
            )
            return

        try:
            track.destination_path.parent.mkdir(parents=True, exist_ok=True)
            # shutil.move overwrites an existing destination file.
            shutil.move(str(track.temp_path), str(track.destination_path))
        except OSError as e:
            raise FinalizeFailedException(
                f"could not move {track.temp_path.name} to {track.destination_path}: {e}"
            ) from e

        if track.source_path.resolve() == track.destination_path.resolve():
            logger.debug(f"  Source is the destination; {track.filename} replaced in place")
        else:
            track.source_path.unlink(missing_ok=True)

        logger.info(
            f"  Finalized {track.destination_path.name} ({file_size_text(track.destination_path)})"
        )
