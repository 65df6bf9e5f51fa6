"""
Command-Line Interface (CLI) setup for the Opus Finalizer.

This module uses Python's `argparse` to define the command-line arguments and
turns them into the immutable `BatchConfig` the pipeline runs with.
"""
import argparse
from pathlib import Path
from typing import Callable, List, Optional

from .config.audio import DEFAULT_BITRATE
from .config.common import DEFAULT_DOWNLOAD_DIR, DEFAULT_WORKING_DIR
from .domain.models import BatchConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opus-finalizer",
        description=(
            "Download a YouTube / YouTube Music URL with yt-dlp, then transcode every "
            "track to low-bitrate Opus with a square cover. Passing no URL prompts for one."
        ),
    )
    parser.add_argument(
        "url", nargs="?", default=None, help="YouTube or YouTube Music URL (track or playlist)."
    )
    parser.add_argument(
        "-s", "--skip-download", action="store_true",
        help="Skip yt-dlp and only process existing files in the working directory "
             "(helpful for stuck files, or processing existing collections).",
    )
    parser.add_argument(
        "--skip-cover-art", action="store_true",
        help="Do not extract, crop or embed cover art.",
    )
    parser.add_argument(
        "-c", "--collection", action="store_true",
        help="Tracks come from different albums: never reuse one track's cover for another.",
    )
    parser.add_argument(
        "-b", "--bitrate", type=str, default=DEFAULT_BITRATE,
        help=f"Target Opus bitrate (default: {DEFAULT_BITRATE}).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level (ignored with --verbose).",
    )
    parser.add_argument(
        "--working-dir", type=Path, default=DEFAULT_WORKING_DIR,
        help=f"Scratch directory for downloads and in-progress files (default: {DEFAULT_WORKING_DIR}).",
    )
    parser.add_argument(
        "--download-dir", type=Path, default=DEFAULT_DOWNLOAD_DIR,
        help=f"Destination for finalized tracks (default: {DEFAULT_DOWNLOAD_DIR}).",
    )
    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments for the Opus Finalizer.

    Args:
        argv: Argument list to parse; defaults to `sys.argv[1:]`.

    Returns:
        argparse.Namespace: The parsed command-line arguments.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.bitrate.strip():
        parser.error("--bitrate must not be empty")
    return args


def build_config(
    args: argparse.Namespace, prompt: Callable[[str], str] = input
) -> BatchConfig:
    """
    Resolves the parsed arguments into a `BatchConfig`.

    When a download is requested without a URL, the user is asked for one
    interactively through `prompt`.
    """
    url = args.url
    if not args.skip_download and not url:
        url = prompt("Enter the YT/YT-Music URL: ").strip() or None

    return BatchConfig(
        bitrate=args.bitrate.strip(),
        skip_download=args.skip_download,
        skip_cover_art=args.skip_cover_art,
        collection_mode=args.collection,
        working_dir=args.working_dir.expanduser().resolve(),
        destination_dir=args.download_dir.expanduser().resolve(),
        verbose=args.verbose,
        url=url,
    )
