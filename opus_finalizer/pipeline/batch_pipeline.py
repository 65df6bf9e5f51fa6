from typing import Optional

from loguru import logger

from ..domain.exceptions import StageException
from ..domain.models import (
    BatchConfig,
    BatchCoverMemory,
    CoverArtState,
    CoverOutcome,
    Track,
)
from ..services.cover_injector import CoverInjector
from ..services.cover_resolver import CoverResolver
from ..services.finalizer import Finalizer
from ..services.logging_service import ErrorLog, ErrorTracker
from ..services.track_enumerator import enumerate_tracks
from ..services.transcoder import Transcoder
from ..services.verifier import Verifier


class BatchPipeline:
    """
    Finalizes every track of the working directory, one at a time.

    Per track the stages run strictly in order: resolve cover -> transcode ->
    inject cover -> verify -> finalize. Stage failures are recorded in the
    `ErrorTracker` and never abort the batch. Cover resolution and injection
    degrade gracefully; a failed transcode or verification keeps the original.
    """

    def __init__(self, config: BatchConfig, tracker: Optional[ErrorTracker] = None):
        self.config = config
        self.tracker = tracker if tracker is not None else ErrorTracker()
        self.cover_memory = BatchCoverMemory(config.working_dir)

        self.cover_resolver = CoverResolver(config)
        self.transcoder = Transcoder()
        self.cover_injector = CoverInjector(config)
        self.verifier = Verifier()
        self.finalizer = Finalizer()

        self.finalized: list[Track] = []

    @property
    def exit_code(self) -> int:
        return 1 if self.tracker.has_errors else 0

    def prepare_dirs(self):
        for directory in (self.config.working_dir, self.config.destination_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def run(self) -> ErrorTracker:
        self.prepare_dirs()
        tracks = enumerate_tracks(self.config)
        logger.info(f"----- Downsample all to {self.config.bitrate} Opus -----")
        if not tracks:
            logger.info(f"No tracks to process in {self.config.working_dir}")

        try:
            for i, track in enumerate(tracks, start=1):
                logger.info(f"[{i}/{len(tracks)}] File: {track.filename}")
                self.process_track(track)
        finally:
            self.cover_memory.discard()

        self.report(len(tracks))
        return self.tracker

    def process_track(self, track: Track):
        state = self.cover_resolver.resolve(track, self.cover_memory, self.tracker)
        logger.debug(f"  Cover outcome: {state.outcome.value}")
        self._remember_cover(state)

        verified = False
        try:
            self.transcoder.transcode(track, self.config.bitrate)
            self._inject(track, state)
            self.verifier.verify(track.temp_path)
            verified = True
        except StageException as e:
            self.tracker.record(track, e.kind, str(e))

        try:
            self.finalizer.finalize(track, state, verified)
        except StageException as e:
            self.tracker.record(track, e.kind, str(e))
            verified = False

        if verified:
            self.finalized.append(track)

    def _inject(self, track: Track, state: CoverArtState):
        try:
            self.cover_injector.inject(state, track.temp_path)
        except StageException as e:
            # The track is still finalized, just without embedded art.
            self.tracker.record(track, e.kind, str(e))

    def _remember_cover(self, state: CoverArtState):
        # Only a track's own cover becomes the batch cover. Collection mode
        # never shares art between tracks.
        if self.config.collection_mode or state.outcome is not CoverOutcome.EXTRACTED:
            return
        if not state.is_available:
            return
        self.cover_memory.remember(state.cropped_path)

    def report(self, track_count: int):
        logger.info("----- Finished -----")
        logger.info(
            f"Tracks: {track_count}, finalized: {len(self.finalized)}, "
            f"errors: {self.tracker.count}"
        )
        if not self.tracker.has_errors:
            logger.success("All tracks finalized without errors.")
            return

        report = self.tracker.render()
        for line in report.splitlines():
            logger.error(line)
        error_log = ErrorLog(self.config.working_dir)
        error_log.write(report)
        logger.info(f"Error report appended to {error_log.log_file_path}")
