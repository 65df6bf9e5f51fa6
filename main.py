"""
Main entry point for the Opus Finalizer application.

This script parses the command-line arguments, checks that the external tools
are installed, downloads the requested URL with yt-dlp (unless skipped) and
then runs the finalization pipeline over the working directory.
"""

import sys
from typing import List, Optional

from loguru import logger

from opus_finalizer.cli import build_config, get_args
from opus_finalizer.config.common import LOGGER_FORMAT
from opus_finalizer.domain.exceptions import FatalException
from opus_finalizer.pipeline.batch_pipeline import BatchPipeline
from opus_finalizer.services.downloader import Downloader
from opus_finalizer.utils.module_updater import Modules


# Configure the logger for initial setup.
# The level is overridden once the command-line arguments are known.
logger.remove()
logger.add(sys.stderr, level="INFO", format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one batch and returns the process exit status.

    1. Parses command-line arguments and reconfigures the logger.
    2. Resolves the immutable batch configuration (prompting for a URL if needed).
    3. Verifies the external tools; a missing tool aborts the run.
    4. Downloads the URL; a failed download aborts the run.
    5. Finalizes every track in the working directory.

    Returns:
        0 when every track was finalized without errors, 1 otherwise.
    """
    args = get_args(argv)

    effective_log_level = "DEBUG" if args.verbose else args.log_level
    logger.remove()
    logger.add(sys.stderr, level=effective_log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    config = build_config(args)
    logger.debug(f"Batch config: {config}")

    try:
        Modules.verify_dependencies(need_downloader=not config.skip_download)
        if config.skip_download:
            logger.info(f"Skipping download; processing {config.working_dir}")
        else:
            Downloader(config).download()
    except FatalException as e:
        logger.critical(str(e))
        return 1

    pipeline = BatchPipeline(config)
    pipeline.run()
    if pipeline.exit_code == 0:
        logger.success("Opus Finalizer finished.")
    else:
        logger.error("Opus Finalizer finished with errors.")
    return pipeline.exit_code


if __name__ == "__main__":
    sys.exit(main())
