"""
Acquisition of source tracks with yt-dlp.

This runs before the finalization pipeline and is the only step whose failure
aborts a run: without a successful download there is no batch to finalize.
"""

from loguru import logger

from ..config.common import YT_DLP
from ..domain.exceptions import AcquisitionFailedException
from ..domain.models import BatchConfig
from ..utils.ffmpeg_utils import run_cmd
from ..utils.module_updater import Modules

# Prefer YouTube's 64 kbps Opus stream (format 250), then any Opus, then the
# best audio, and video only as a last resort.
YT_DLP_FORMAT = "250/bestaudio[ext=opus]/bestaudio/best"

# "<artist> -- <album> -- <track no.> -- <title>.<ext>"; the zero-padded
# playlist index stands in when the source has no track number.
YT_DLP_OUTPUT_TEMPLATE = (
    "%(artist)s -- %(album)s -- %(0Dtrack_number,playlist_index)s -- %(title)s.%(ext)s"
)


class Downloader:
    def __init__(self, config: BatchConfig):
        self.config = config
        self.yt_dlp_cmd = Modules.tool_path(YT_DLP)

    def build_cmd(self, url: str) -> list[str]:
        return [
            self.yt_dlp_cmd,
            "--format", YT_DLP_FORMAT,
            "--extract-audio",
            "--audio-format", "opus",
            "--add-metadata",
            "--embed-thumbnail",
            # Ignored for pure playlist URLs; picks the single track of a
            # track+playlist URL.
            "--no-playlist",
            "--output", YT_DLP_OUTPUT_TEMPLATE,
            url,
        ]

    def download(self):
        """
        Downloads `config.url` into the working directory.

        Raises:
            AcquisitionFailedException: When no URL is configured, yt-dlp cannot
                                        start, or it exits nonzero.
        """
        url = self.config.url
        if not url:
            raise AcquisitionFailedException("No URL given to download.")

        logger.info("----- Running yt-dlp -----")
        self.config.working_dir.mkdir(parents=True, exist_ok=True)
        res = run_cmd(self.build_cmd(url), show_cmd=True, cwd=self.config.working_dir)
        if res is None:
            raise AcquisitionFailedException(f"yt-dlp could not be started for {url}")
        if res.returncode != 0:
            detail = (res.stderr or "").strip().splitlines()
            raise AcquisitionFailedException(
                f"yt-dlp exited with {res.returncode} for {url}"
                + (f": {detail[-1]}" if detail else "")
            )
        logger.success(f"Download finished: {url}")
