"""
This module provides utility functions for running the external tools the
pipeline depends on (ffmpeg, ImageMagick, kid3-cli, yt-dlp) and for probing
media streams through ffmpeg-python.
"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

import ffmpeg
from loguru import logger

from ..config.common import FFPROBE
from .module_updater import Modules


def format_cmd(cmd_list: List[str]) -> str:
    """Returns a copy-pasteable rendering of a command list for logs."""
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def run_cmd(
    cmd_list: List[str],
    src_file_for_log: Path = Path(),
    show_cmd: bool = False,
    cwd: Optional[Path] = None,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its output.

    This is a wrapper around `subprocess.run` that adds logging and turns a
    failure to launch into a `None` result. Every call returns its own result
    object, so callers always inspect the exit status of the command they ran.

    Args:
        cmd_list: The command to execute as a list of arguments (never a shell string).
        src_file_for_log: The track being processed, used for logging context.
        show_cmd: If True, the command is logged at the DEBUG level before execution.
        cwd: Working directory for the command. Some tools (kid3-cli) resolve
             file arguments relative to it.

    Returns:
        A `subprocess.CompletedProcess` with return code, stdout and stderr, or
        `None` if the command could not be started (e.g. executable not found).
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    cmd_list = [str(part) for part in cmd_list]
    display_cmd_str = format_cmd(cmd_list)

    if show_cmd:
        location = f" (cwd: {cwd})" if cwd else ""
        logger.debug(f"Executing: {display_cmd_str}{location}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
            cwd=str(cwd) if cwd else None,
        )
    except FileNotFoundError:
        logger.error(
            f"Command not found: '{cmd_list[0]}'. Ensure it's in your system's PATH or "
            f"set 'tools_dir' in config.user.yaml."
        )
        return None
    except OSError as e:
        logger.error(
            f"Could not execute command for {src_file_for_log.name or 'N/A'}: {e}. "
            f"Command: {display_cmd_str}"
        )
        return None

    if result.stdout and len(result.stdout) > 500:
        logger.trace(f"Command stdout (truncated): {result.stdout[:500]}...")
    elif result.stdout:
        logger.trace(f"Command stdout: {result.stdout}")

    # Distinguish between error output and informational warnings on stderr.
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result


def probe_stream_codec(path: Path, stream_selector: str) -> Optional[str]:
    """
    Returns the codec name of the first stream matching `stream_selector`.

    Uses `ffmpeg.probe` (ffprobe under the hood) with a stream selector such as
    "v:0" for an embedded cover picture or "a:0" for the first audio stream.

    Returns:
        The lowercased codec name, or None when there is no such stream or the
        file cannot be probed.
    """
    try:
        probe = ffmpeg.probe(
            str(path), cmd=Modules.tool_path(FFPROBE), select_streams=stream_selector
        )
    except ffmpeg.Error as e:
        stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
        logger.debug(f"ffmpeg.probe failed for {path.name} ({stream_selector}): {stderr.strip()}")
        return None
    except FileNotFoundError:
        logger.error("ffprobe not found. Cannot probe media streams.")
        return None

    streams = probe.get("streams") or []
    if not streams:
        return None
    codec_name = streams[0].get("codec_name")
    return codec_name.lower() if codec_name else None
