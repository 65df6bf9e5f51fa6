"""
Data models for one batch run.

Everything here lives for the duration of a single run only; the batch's
persistent state is the filesystem layout of the working and destination
directories.
"""
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.audio import OUTPUT_EXTENSION, TEMP_TRANSCODE_SUFFIX
from ..config.cover import (
    CROPPED_COVER_SUFFIX,
    EXTRACTED_COVER_SUFFIX,
    FALLBACK_COVER_NAME,
)


@dataclass(frozen=True)
class BatchConfig:
    """
    Immutable per-run settings, built once by the CLI layer.

    Attributes:
        bitrate: Target Opus bitrate handed to ffmpeg verbatim (e.g. "64k").
        skip_download: Process what is already in `working_dir` without running yt-dlp.
        skip_cover_art: Do not extract, crop or inject any cover art.
        collection_mode: Tracks do not share one album cover, so no track ever
                         inherits another track's art.
        working_dir: Scratch directory holding downloads and in-progress artifacts.
        destination_dir: Directory receiving finalized tracks.
        verbose: Enable debug logging.
        url: Source reference for the downloader; unused by the pipeline itself.
    """

    bitrate: str
    skip_download: bool
    skip_cover_art: bool
    collection_mode: bool
    working_dir: Path
    destination_dir: Path
    verbose: bool = False
    url: Optional[str] = None


@dataclass(frozen=True)
class Track:
    """
    One media file under processing, with every path the pipeline derives from it.

    All transient names are derived from `base_name`, so two tracks never share
    a temporary file and re-running on the same input yields the same names.
    """

    source_path: Path
    base_name: str
    destination_path: Path
    temp_path: Path

    @classmethod
    def from_path(cls, source_path: Path, config: BatchConfig) -> "Track":
        base_name = source_path.stem
        return cls(
            source_path=source_path,
            base_name=base_name,
            destination_path=config.destination_dir / f"{base_name}{OUTPUT_EXTENSION}",
            temp_path=config.working_dir / f"{base_name}{TEMP_TRANSCODE_SUFFIX}",
        )

    @property
    def filename(self) -> str:
        return self.source_path.name

    @property
    def working_dir(self) -> Path:
        return self.source_path.parent

    def extracted_cover_path(self, extension: str) -> Path:
        return self.working_dir / f"{self.base_name}{EXTRACTED_COVER_SUFFIX}.{extension}"

    @property
    def cropped_cover_path(self) -> Path:
        return self.working_dir / f"{self.base_name}{CROPPED_COVER_SUFFIX}"

    def transient_cover_paths(self) -> list[Path]:
        """All per-track cover files that may exist in the working directory."""
        # Prefix match rather than glob: track names routinely contain brackets.
        prefix = f"{self.base_name}{EXTRACTED_COVER_SUFFIX}."
        paths = []
        if self.working_dir.is_dir():
            paths = sorted(
                p for p in self.working_dir.iterdir()
                if p.name.startswith(prefix) and p.is_file()
            )
        paths.append(self.cropped_cover_path)
        return paths


class CoverOutcome(Enum):
    """How a track's cover art was resolved."""

    EXTRACTED = "extracted"
    FALLBACK_USED = "fallback_used"
    UNAVAILABLE = "unavailable"


@dataclass
class CoverArtState:
    """
    Per-track artwork working state. Created fresh per track, discarded after injection.
    """

    outcome: CoverOutcome = CoverOutcome.UNAVAILABLE
    extracted_path: Optional[Path] = None
    cropped_path: Optional[Path] = None

    @property
    def is_available(self) -> bool:
        return self.outcome is not CoverOutcome.UNAVAILABLE and self.cropped_path is not None


class BatchCoverMemory:
    """
    The one piece of state shared across tracks of a batch: the last good cover.

    `remember` copies a successfully cropped cover into a fixed-name fallback
    file, so the per-track cropped file can be cleaned up while the fallback
    survives. There is no way to clear the memory; it is only ever overwritten
    by a later successful crop.
    """

    def __init__(self, working_dir: Path):
        self.fallback_file: Path = working_dir / FALLBACK_COVER_NAME
        self._path: Optional[Path] = None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def is_usable(self) -> bool:
        return (
            self._path is not None
            and self._path.is_file()
            and self._path.stat().st_size > 0
        )

    def remember(self, cropped_cover: Path) -> bool:
        """
        Stores a copy of `cropped_cover` as the new batch fallback.

        Returns False and leaves the previous fallback untouched if the copy fails.
        """
        # Copy then rename, so a failed copy cannot truncate the previous fallback.
        staging_file = self.fallback_file.with_name(f"{self.fallback_file.name}.part")
        try:
            shutil.copyfile(cropped_cover, staging_file)
            os.replace(staging_file, self.fallback_file)
        except OSError as e:
            logger.warning(f"Could not store fallback cover from {cropped_cover.name}: {e}")
            staging_file.unlink(missing_ok=True)
            return False
        self._path = self.fallback_file
        logger.debug(f"Batch fallback cover updated from {cropped_cover.name}")
        return True

    def discard(self):
        """Removes the fallback file at batch end."""
        self.fallback_file.unlink(missing_ok=True)


class ErrorKind(Enum):
    """The pipeline stage a failure occurred in."""

    EXTRACTION_FAILED = "extract cover"
    CROP_FAILED = "crop cover"
    INJECTION_FAILED = "inject cover"
    TRANSCODE_FAILED = "transcode"
    VERIFICATION_FAILED = "verify"
    FINALIZE_FAILED = "finalize"


@dataclass(frozen=True)
class ErrorRecord:
    """A single failure of one stage on one track."""

    track: Track
    kind: ErrorKind
    message: str

    def render(self) -> str:
        return f"[{self.kind.value}] {self.track.filename}: {self.message}"
