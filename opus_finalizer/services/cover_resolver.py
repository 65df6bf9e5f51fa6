"""
Resolves the square cover image for a track.

Downloaded tracks carry their artwork as an attached picture stream, often in a
widescreen thumbnail shape. The resolver dumps that stream with ffmpeg, falls
back to the batch cover when a track has none, and center-crops the result to
a fixed-size square with ImageMagick.

The absence of a cover is a valid outcome, never an exception to the caller:
`resolve` always returns a `CoverArtState`.
"""

import shutil
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import FFMPEG, MAGICK
from ..config.cover import COVER_CODEC_EXTENSIONS, COVER_SIZE, DEFAULT_COVER_EXTENSION
from ..domain.exceptions import CropFailedException, ExtractionFailedException
from ..domain.models import (
    BatchConfig,
    BatchCoverMemory,
    CoverArtState,
    CoverOutcome,
    ErrorKind,
    Track,
)
from ..utils.ffmpeg_utils import probe_stream_codec, run_cmd
from ..utils.module_updater import Modules
from .logging_service import ErrorTracker


def cover_extension(codec_name: Optional[str]) -> str:
    """File extension for an extracted picture stream of the given codec."""
    if not codec_name:
        return DEFAULT_COVER_EXTENSION
    return COVER_CODEC_EXTENSIONS.get(codec_name.lower(), codec_name.lower())


def _is_nonempty_file(path: Path) -> bool:
    return path.is_file() and path.stat().st_size > 0


class CoverResolver:
    """
    Determines the cover image each track gets.

    Order of preference:
    1. the track's own embedded picture,
    2. the batch fallback cover (only outside collection mode),
    3. no cover at all.

    Whatever image is chosen is cropped to a `COVER_SIZE` square before use.
    """

    def __init__(self, config: BatchConfig):
        self.config = config
        self.ffmpeg_cmd = Modules.tool_path(FFMPEG)
        self.magick_cmd = Modules.tool_path(MAGICK)

    def resolve(
        self, track: Track, memory: BatchCoverMemory, tracker: ErrorTracker
    ) -> CoverArtState:
        if self.config.skip_cover_art:
            logger.debug(f"Cover art skipped for {track.filename}")
            return CoverArtState(outcome=CoverOutcome.UNAVAILABLE)

        logger.info("  Extract album art")
        cover_codec = probe_stream_codec(track.source_path, "v:0")
        extracted_path = track.extracted_cover_path(cover_extension(cover_codec))
        state = CoverArtState(extracted_path=extracted_path)

        try:
            self.extract(track, extracted_path)
            state.outcome = CoverOutcome.EXTRACTED
        except ExtractionFailedException as e:
            if cover_codec:
                # The track announces a picture that ffmpeg could not dump.
                tracker.record(track, e.kind, str(e))
            else:
                logger.info(f"  No embedded cover in {track.filename}")
            if not self._use_fallback(track, state, memory, tracker):
                return state

        logger.info("  Crop album art")
        try:
            self.crop(state.extracted_path, track.cropped_cover_path)
        except CropFailedException as e:
            tracker.record(track, e.kind, str(e))
            state.outcome = CoverOutcome.UNAVAILABLE
            state.cropped_path = None
            return state

        state.cropped_path = track.cropped_cover_path
        return state

    def _use_fallback(
        self,
        track: Track,
        state: CoverArtState,
        memory: BatchCoverMemory,
        tracker: ErrorTracker,
    ) -> bool:
        """
        Copies the batch cover into the track's extracted slot.

        Returns False, leaving `state` unavailable, when no fallback may or can be used.
        """
        if self.config.collection_mode:
            logger.warning(f"  No cover for {track.filename} (collection mode, no fallback)")
            state.outcome = CoverOutcome.UNAVAILABLE
            return False
        if not memory.is_usable:
            logger.warning(f"  No cover for {track.filename} and no batch cover yet")
            state.outcome = CoverOutcome.UNAVAILABLE
            return False

        fallback_slot = track.extracted_cover_path(DEFAULT_COVER_EXTENSION)
        try:
            shutil.copyfile(memory.path, fallback_slot)
        except OSError as e:
            tracker.record(
                track, ErrorKind.EXTRACTION_FAILED, f"could not copy batch cover: {e}"
            )
            state.outcome = CoverOutcome.UNAVAILABLE
            return False

        logger.info(f"  Using batch cover for {track.filename}")
        state.extracted_path = fallback_slot
        state.outcome = CoverOutcome.FALLBACK_USED
        return True

    def extract(self, track: Track, output_path: Path):
        """
        Dumps the first picture stream of the track without re-encoding it.

        Raises:
            ExtractionFailedException: When ffmpeg fails or writes nothing.
        """
        # A leftover from an earlier run must not pass for a fresh extraction.
        output_path.unlink(missing_ok=True)
        cmd_list = [
            self.ffmpeg_cmd,
            "-y",
            "-v", "error",
            "-i", str(track.source_path),
            "-an",
            "-vcodec", "copy",
            str(output_path),
        ]
        res = run_cmd(cmd_list, src_file_for_log=track.source_path, show_cmd=__debug__)
        if res is None:
            raise ExtractionFailedException("ffmpeg could not be started")
        if res.returncode != 0 or not _is_nonempty_file(output_path):
            output_path.unlink(missing_ok=True)
            detail = (res.stderr or "").strip() or "no picture written"
            raise ExtractionFailedException(
                f"ffmpeg exited with {res.returncode}: {detail}"
            )
        logger.debug(f"  Extracted cover to {output_path.name}")

    def measure_square_side(self, image_path: Path) -> int:
        """
        Returns the smaller of the image's width and height.

        Raises:
            CropFailedException: When ImageMagick fails or prints no usable size.
        """
        cmd_list = [
            self.magick_cmd,
            "identify",
            "-format", "%[fx:min(w,h)]",
            f"{image_path}[0]",
        ]
        res = run_cmd(cmd_list, src_file_for_log=image_path, show_cmd=__debug__)
        if res is None:
            raise CropFailedException("magick could not be started")
        if res.returncode != 0:
            raise CropFailedException(
                f"magick identify exited with {res.returncode}: {(res.stderr or '').strip()}"
            )
        try:
            side = int(float((res.stdout or "").strip()))
        except ValueError:
            raise CropFailedException(
                f"magick identify printed no size for {image_path.name}: {res.stdout!r}"
            ) from None
        if side <= 0:
            raise CropFailedException(f"image {image_path.name} has no area")
        return side

    def crop(self, image_path: Path, output_path: Path):
        """
        Center-crops `image_path` to a square and resizes it to `COVER_SIZE`.

        Raises:
            CropFailedException: When measuring or cropping fails, or no output is written.
        """
        output_path.unlink(missing_ok=True)
        side = self.measure_square_side(image_path)
        cmd_list = [
            self.magick_cmd,
            f"{image_path}[0]",
            "-gravity", "center",
            "-crop", f"{side}x{side}+0+0",
            "+repage",
            "-resize", f"{COVER_SIZE}x{COVER_SIZE}",
            str(output_path),
        ]
        res = run_cmd(cmd_list, src_file_for_log=image_path, show_cmd=__debug__)
        if res is None:
            raise CropFailedException("magick could not be started")
        if res.returncode != 0 or not _is_nonempty_file(output_path):
            output_path.unlink(missing_ok=True)
            detail = (res.stderr or "").strip() or "no image written"
            raise CropFailedException(f"magick exited with {res.returncode}: {detail}")
        logger.debug(f"  Cropped cover {side}x{side} -> {COVER_SIZE}x{COVER_SIZE}: {output_path.name}")
