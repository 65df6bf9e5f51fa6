"""
This package contains the batch pipeline of the Opus Finalizer.

The pipeline orchestrates one run: it discovers the tracks of the working
directory, drives each of them through the finalization stages in order, owns
the batch-wide fallback cover and produces the end-of-run error report.
"""
