"""
Embeds the resolved cover into the transcoded temp file with kid3-cli.

kid3-cli resolves the picture argument relative to the directory of the file
being modified, not the current directory, and splits its `-c` command on
unquoted whitespace. The cover is therefore copied next to the target under a
digest name that never needs quoting, and both are passed by bare file name.
"""

import hashlib
import shutil
from pathlib import Path

from loguru import logger

from ..config.common import KID3_CLI
from ..config.cover import COVER_PICTURE_TYPE, INJECTION_COVER_MARKER
from ..domain.exceptions import InjectionFailedException
from ..domain.models import BatchConfig, CoverArtState
from ..utils.ffmpeg_utils import run_cmd
from ..utils.module_updater import Modules


def injection_cover_name(target_path: Path, cover_path: Path) -> str:
    """Name of the cover copy for `target_path`: hex digits and dots only."""
    digest = hashlib.sha1(target_path.name.encode("utf-8")).hexdigest()[:12]
    return f"{digest}{INJECTION_COVER_MARKER}{cover_path.suffix.lower()}"


class CoverInjector:
    def __init__(self, config: BatchConfig):
        self.config = config
        self.kid3_cmd = Modules.tool_path(KID3_CLI)

    def colocate(self, cover_path: Path, target_path: Path) -> Path:
        """Returns a copy of the cover in the target's directory, named by `injection_cover_name`."""
        colocated = target_path.parent / injection_cover_name(target_path, cover_path)
        try:
            shutil.copyfile(cover_path, colocated)
        except OSError as e:
            raise InjectionFailedException(
                f"could not place {cover_path.name} next to {target_path.name}: {e}"
            ) from e
        return colocated

    def inject(self, state: CoverArtState, target_path: Path):
        """
        Sets the front cover of `target_path` to the state's cropped image.

        A no-op when cover art is skipped or no cover was resolved.

        Raises:
            InjectionFailedException: When the files cannot be co-located or kid3-cli fails.
        """
        if self.config.skip_cover_art or not state.is_available:
            logger.debug(f"  No cover to inject into {target_path.name}")
            return

        logger.info("  Set album art")
        if not target_path.is_file():
            raise InjectionFailedException(f"target {target_path.name} does not exist")

        cover_path = self.colocate(state.cropped_path, target_path)
        cmd_list = [
            self.kid3_cmd,
            "-c", f"set picture:{cover_path.name} '{COVER_PICTURE_TYPE}'",
            target_path.name,
        ]
        try:
            res = run_cmd(
                cmd_list,
                src_file_for_log=target_path,
                show_cmd=__debug__,
                cwd=target_path.parent,
            )
        finally:
            cover_path.unlink(missing_ok=True)

        if res is None:
            raise InjectionFailedException("kid3-cli could not be started")
        if res.returncode != 0:
            raise InjectionFailedException(
                f"kid3-cli exited with {res.returncode}: {(res.stderr or '').strip()}"
            )
