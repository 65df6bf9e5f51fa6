"""
This module collects and persists the failures of a batch run.

`ErrorTracker` is the in-memory, append-only record of every stage failure,
passed explicitly into each stage by the pipeline. `ErrorLog` appends the
rendered end-of-run report to a plain-text file in the working directory, so
the report outlives the console session.
"""

from pathlib import Path
from typing import Tuple

from loguru import logger

from ..config.common import ERROR_LOG_FILE_NAME
from ..domain.models import ErrorKind, ErrorRecord, Track


class ErrorTracker:
    """
    Append-only sequence of `ErrorRecord` for one batch.

    Records are never removed or deduplicated: two failures of the same stage
    on the same track produce two records.
    """

    def __init__(self):
        self._records: list[ErrorRecord] = []

    def record(self, track: Track, kind: ErrorKind, message: str) -> ErrorRecord:
        error_record = ErrorRecord(track=track, kind=kind, message=message)
        self._records.append(error_record)
        logger.error(error_record.render())
        return error_record

    @property
    def records(self) -> Tuple[ErrorRecord, ...]:
        return tuple(self._records)

    @property
    def count(self) -> int:
        return len(self._records)

    @property
    def has_errors(self) -> bool:
        return bool(self._records)

    def for_track(self, track: Track) -> Tuple[ErrorRecord, ...]:
        return tuple(r for r in self._records if r.track == track)

    def render(self) -> str:
        """
        Renders the multi-line end-of-run report.

        The first line carries the total count, followed by one line per error
        in the order they were recorded.
        """
        lines = [f"Errors: {self.count}"]
        lines.extend(f"  {i}. {r.render()}" for i, r in enumerate(self._records, start=1))
        return "\n".join(lines)


class ErrorLog:
    """
    Appends error reports to a plain text file.

    Each call to `write` appends the given lines followed by a separator, so the
    file is a chronological record across runs.
    """

    # A decorative separator line used between reports for readability.
    linesep_marker: str = "=" * 50

    def __init__(self, error_log_dir: Path, filename: str = ERROR_LOG_FILE_NAME):
        self.log_dir: Path = error_log_dir.resolve()
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file_path = self.log_dir / filename

    def write(self, *error_messages: str):
        if not error_messages:
            return

        content_to_write = "\n".join(error_messages) + "\n" + self.linesep_marker + "\n"
        try:
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            # Fall back to the console so the report is not lost.
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            for msg in error_messages:
                logger.error(f"  - {msg}")
