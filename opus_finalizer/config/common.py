"""
Common configuration settings used throughout the application.

This module contains globally shared constants for logging, default directory
layout and external tool names. It also loads user-specific overrides from an
optional YAML file at the project root, so tool locations and directories can
be customized without modifying the source code.
"""
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# This block loads user-specific settings from a 'config.user.yaml' file located
# at the project root. Supported keys (all optional):
#
#   paths:
#     tools_dir: /opt/media-tools/bin
#     working_dir: ~/Downloads/_yt-dlp
#     download_dir: ~/Downloads/yt-dlp

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory containing the external executables (ffmpeg, magick, kid3-cli, ...).
# If not provided, the executables are looked up on the system PATH.
TOOLS_DIR: Path | None = None

# Default scratch directory where downloads land and in-progress artifacts live.
DEFAULT_WORKING_DIR = Path.home() / "Downloads" / "_yt-dlp"

# Default destination directory for finalized tracks.
DEFAULT_DOWNLOAD_DIR = Path.home() / "Downloads" / "yt-dlp"


def load_user_config(config_path: Path = USER_CONFIG_PATH) -> dict:
    """
    Reads the 'paths' section of the user configuration file.

    Returns an empty dict when the file is missing or cannot be parsed; a broken
    user config must never prevent the application from starting.
    """
    if not config_path.is_file():
        logger.debug(f"User config '{config_path}' not found. Using built-in defaults.")
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not load or parse '{config_path}': {e}")
        return {}
    if not isinstance(user_config, dict):
        logger.warning(f"Ignoring '{config_path}': top level is not a mapping.")
        return {}
    return user_config.get("paths") or {}


_user_paths = load_user_config()
if _user_paths.get("tools_dir"):
    TOOLS_DIR = Path(_user_paths["tools_dir"]).expanduser()
if _user_paths.get("working_dir"):
    DEFAULT_WORKING_DIR = Path(_user_paths["working_dir"]).expanduser()
if _user_paths.get("download_dir"):
    DEFAULT_DOWNLOAD_DIR = Path(_user_paths["download_dir"]).expanduser()


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

# Name of the plain-text file in the working directory that collects the
# end-of-run error report. Appended to, never truncated.
ERROR_LOG_FILE_NAME = "error.txt"


# --- External Tools ---
# Executable names. Resolved against TOOLS_DIR first, then the system PATH.

FFMPEG = "ffmpeg"
FFPROBE = "ffprobe"
MAGICK = "magick"
KID3_CLI = "kid3-cli"
YT_DLP = "yt-dlp"

# Tools the core pipeline cannot run without.
REQUIRED_TOOLS = (FFMPEG, FFPROBE, MAGICK, KID3_CLI)
