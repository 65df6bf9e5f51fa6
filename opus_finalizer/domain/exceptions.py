"""
Defines custom exception types for the Opus Finalizer application.

Stage exceptions describe a failure of one pipeline stage for one track. The
batch pipeline catches them at the stage boundary and turns each one into an
`ErrorRecord`, so a single broken track never aborts the batch.

Fatal exceptions are raised by the collaborators that run before the pipeline
(dependency check, download) and abort the whole run.

All custom exceptions inherit from the base `OpusFinalizerException`.
"""
from .models import ErrorKind


class OpusFinalizerException(Exception):
    """Base class for all custom exceptions in the Opus Finalizer application."""

    pass


# --- Per-track stage exceptions ---
class StageException(OpusFinalizerException):
    """
    Base class for recoverable failures of a single pipeline stage.

    Subclasses set `kind`, which the pipeline copies into the resulting
    `ErrorRecord` so the report names the stage that failed.
    """

    kind: ErrorKind


class ExtractionFailedException(StageException):
    """
    Raised when a track announces an embedded cover that ffmpeg cannot extract.

    Recoverable: the resolver falls back to the batch cover or gives up on art.
    """

    kind = ErrorKind.EXTRACTION_FAILED


class CropFailedException(StageException):
    """Raised when ImageMagick cannot measure or crop a cover image."""

    kind = ErrorKind.CROP_FAILED


class InjectionFailedException(StageException):
    """
    Raised when kid3-cli fails to embed the cover.

    The track is still finalized, just without embedded art.
    """

    kind = ErrorKind.INJECTION_FAILED


class TranscodeFailedException(StageException):
    """
    Raised when ffmpeg fails to produce the Opus temp file.

    The temp file is not trusted afterwards and the original is retained.
    """

    kind = ErrorKind.TRANSCODE_FAILED


class VerificationFailedException(StageException):
    """
    Raised when the transcoded temp file fails the integrity check.

    Finalization is blocked: the original stays in the working directory and
    the failed temp file is kept for diagnosis.
    """

    kind = ErrorKind.VERIFICATION_FAILED


class FinalizeFailedException(StageException):
    """Raised when the verified temp file cannot be moved into the destination directory."""

    kind = ErrorKind.FINALIZE_FAILED


# --- Fatal exceptions ---
class FatalException(OpusFinalizerException):
    """Base class for errors that abort the whole run before any track is processed."""

    pass


class DependencyMissingException(FatalException):
    """Raised when a required external executable cannot be found."""

    pass


class AcquisitionFailedException(FatalException):
    """Raised when yt-dlp fails to download the requested URL."""

    pass
