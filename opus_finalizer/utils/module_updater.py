"""
This module provides the Modules class to locate and verify the external tools
required by the application (ffmpeg, ffprobe, ImageMagick, kid3-cli, yt-dlp).
"""
import shutil
import sys
from typing import Iterable

from loguru import logger

from ..config.common import REQUIRED_TOOLS, TOOLS_DIR, YT_DLP
from ..domain.exceptions import DependencyMissingException


class Modules:
    """
    A utility class for operations related to external executables.

    It reads the tools directory from the user's `config.user.yaml` and falls
    back to the system PATH when no directory is configured or the tool is not
    found there.
    """

    @staticmethod
    def tool_path(name: str) -> str:
        """
        Determines the command or absolute path to use for an executable.

        It prioritizes the configured `tools_dir`, handling the '.exe' suffix on
        Windows, and otherwise returns the bare name for a PATH lookup.
        """
        exe_name = f"{name}.exe" if sys.platform == "win32" else name

        if TOOLS_DIR and TOOLS_DIR.is_dir():
            configured_path = TOOLS_DIR / exe_name
            if configured_path.is_file():
                return str(configured_path)
            logger.debug(f"'{exe_name}' not found in tools_dir '{TOOLS_DIR}'. Falling back to system PATH.")

        return name

    @staticmethod
    def find_missing(tools: Iterable[str]) -> list[str]:
        """Returns the names of the tools that cannot be resolved to an executable."""
        missing = []
        for tool in tools:
            resolved = Modules.tool_path(tool)
            if shutil.which(resolved) is None:
                missing.append(tool)
            else:
                logger.debug(f"Found {tool}: {shutil.which(resolved)}")
        return missing

    @staticmethod
    def verify_dependencies(need_downloader: bool = True):
        """
        Verifies that every required external tool is available.

        Raises:
            DependencyMissingException: Listing every missing tool at once.
        """
        tools = list(REQUIRED_TOOLS)
        if need_downloader:
            tools.append(YT_DLP)

        missing = Modules.find_missing(tools)
        if missing:
            raise DependencyMissingException(
                f"Missing required tool(s): {', '.join(missing)}. Install them or set "
                f"'tools_dir' in config.user.yaml."
            )
        logger.info(f"All required tools found: {', '.join(tools)}")
