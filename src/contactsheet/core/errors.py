"""Exception hierarchy for per-video pipeline failures.

All of these are local to one video: the dispatcher logs them and moves on.
"""

from __future__ import annotations


class ContactSheetError(Exception):
    """Base class for failures while building one contact sheet."""

    stage: str = "pipeline"

    def __init__(self, message: str, filename: str | None = None):
        super().__init__(message)
        self.filename = filename


class ProbeError(ContactSheetError):
    """ffprobe failed, returned unusable output, or found no video stream."""

    stage = "probe"


class SampleFailure(ContactSheetError):
    """A single frame could not be extracted."""

    stage = "sample"

    def __init__(self, message: str, filename: str | None = None, index: int = -1):
        super().__init__(message, filename)
        self.index = index


class ComposeError(ContactSheetError):
    """Missing frames, mismatched frame sizes, or a failed encode."""

    stage = "compose"
