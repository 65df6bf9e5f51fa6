"""
This module defines the Transcoder service.

It converts any accepted source format into Opus at a constant target bitrate,
writing into the track's temporary path. The original is never touched here;
replacing it is the Finalizer's job, and only after verification.
"""

from loguru import logger

from ..config.audio import DEFAULT_AUDIO_ENCODER
from ..config.common import FFMPEG
from ..domain.exceptions import TranscodeFailedException
from ..domain.models import Track
from ..utils.ffmpeg_utils import run_cmd
from ..utils.format_utils import file_size_text
from ..utils.module_updater import Modules


class Transcoder:
    """
    Runs ffmpeg to produce a fixed-bitrate Opus copy of a track.

    Attributes:
        encoder_codec_name (str): The ffmpeg audio encoder, 'libopus'.
        ffmpeg_cmd (str): Resolved ffmpeg executable.
    """

    def __init__(self):
        self.encoder_codec_name = DEFAULT_AUDIO_ENCODER
        self.ffmpeg_cmd = Modules.tool_path(FFMPEG)

    def build_cmd(self, track: Track, bitrate: str) -> list[str]:
        # Only the audio is mapped: ffmpeg cannot carry attached pictures into
        # Ogg/Opus, so cover art is re-injected later by kid3-cli.
        return [
            self.ffmpeg_cmd,
            "-y",
            "-v", "error",
            "-i", str(track.source_path),
            "-map", "0:a",
            "-c:a", self.encoder_codec_name,
            "-b:a", bitrate,
            "-map_metadata", "0",
            str(track.temp_path),
        ]

    def transcode(self, track: Track, bitrate: str):
        """
        Writes `track.temp_path` as Opus at exactly `bitrate`, keeping the source tags.

        Raises:
            TranscodeFailedException: When ffmpeg cannot start, exits nonzero, or
                                      reports success without writing the file.
        """
        logger.info(f"  Resample to {bitrate} Opus")
        res = run_cmd(
            self.build_cmd(track, bitrate),
            src_file_for_log=track.source_path,
            show_cmd=__debug__,
        )
        if res is None:
            raise TranscodeFailedException("ffmpeg could not be started")
        if res.returncode != 0:
            detail = (res.stderr or "").strip().splitlines()
            raise TranscodeFailedException(
                f"ffmpeg exited with {res.returncode}"
                + (f": {detail[-1]}" if detail else "")
            )
        if not track.temp_path.is_file():
            raise TranscodeFailedException(
                f"ffmpeg reported success but {track.temp_path.name} is missing"
            )
        logger.debug(
            f"  Transcoded {track.filename} ({file_size_text(track.source_path)}) -> "
            f"{track.temp_path.name} ({file_size_text(track.temp_path)})"
        )
