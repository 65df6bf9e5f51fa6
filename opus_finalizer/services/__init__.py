"""
Services Package for the Opus Finalizer.

This package contains the service layer: one class or function per pipeline
stage, each wrapping a single external tool or filesystem concern. The batch
pipeline coordinates them; the services themselves know nothing about batches.

- **Track Enumerator:** finds the tracks in the working directory.
- **CoverResolver:** extracts, falls back and crops cover art (ffmpeg, ImageMagick).
- **Transcoder:** re-encodes a track to fixed-bitrate Opus (ffmpeg).
- **CoverInjector:** embeds the cover into the transcoded file (kid3-cli).
- **Verifier:** integrity gate before the original may be replaced (ffmpeg).
- **Finalizer:** moves verified output into place and cleans up.
- **Logging Service:** `ErrorTracker` and the `ErrorLog` text file.
- **Downloader:** acquires the batch with yt-dlp before the pipeline runs.
"""
