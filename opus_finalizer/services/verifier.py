"""
Integrity gate between transcoding and finalization.

A transcode can exit cleanly yet leave a truncated or corrupt file behind (a
full disk, a killed process, an encoder bug). The original is deleted only
after its replacement passes every check here.
"""

from pathlib import Path

from loguru import logger

from ..config.audio import EXPECTED_OUTPUT_CODEC
from ..config.common import FFMPEG
from ..domain.exceptions import VerificationFailedException
from ..utils.ffmpeg_utils import probe_stream_codec, run_cmd
from ..utils.module_updater import Modules


class Verifier:
    def __init__(self):
        self.ffmpeg_cmd = Modules.tool_path(FFMPEG)

    def verify(self, temp_path: Path):
        """
        Checks that `temp_path` is a complete, decodable Opus file.

        The checks, in order:
        1. the file exists and is not empty,
        2. ffmpeg decodes the whole file with `-xerror` and reports nothing at error level,
        3. the first audio stream is probed as Opus.

        Raises:
            VerificationFailedException: Naming the temp path and the failed check.
        """
        logger.info("  Verify output")
        if not temp_path.is_file():
            raise VerificationFailedException(f"{temp_path} does not exist")
        if temp_path.stat().st_size == 0:
            raise VerificationFailedException(f"{temp_path} is empty")

        cmd_list = [
            self.ffmpeg_cmd,
            "-v", "error",
            "-xerror",
            "-i", str(temp_path),
            "-f", "null",
            "-",
        ]
        res = run_cmd(cmd_list, src_file_for_log=temp_path, show_cmd=__debug__)
        if res is None:
            raise VerificationFailedException(f"ffmpeg could not be started to check {temp_path}")
        decode_errors = (res.stderr or "").strip()
        if res.returncode != 0 or decode_errors:
            raise VerificationFailedException(
                f"{temp_path} failed decoding (rc={res.returncode}): "
                f"{decode_errors.splitlines()[0] if decode_errors else 'no details'}"
            )

        codec = probe_stream_codec(temp_path, "a:0")
        if codec != EXPECTED_OUTPUT_CODEC:
            raise VerificationFailedException(
                f"{temp_path} has audio codec {codec or 'none'}, expected {EXPECTED_OUTPUT_CODEC}"
            )
        logger.debug(f"  {temp_path.name} passed verification")
