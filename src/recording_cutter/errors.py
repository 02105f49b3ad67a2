# ABOUTME: Typed error taxonomy shared by the cutter, trimmer and reconstruction code.
# ABOUTME: Each error renders as one human-readable line naming the operation and timestamps.
"""Errors raised by recording_cutter operations."""

from __future__ import annotations

from typing import Any


class RecordingError(Exception):
    """Base error; carries the failing operation and the values involved."""

    def __init__(self, message: str, *, operation: str = "", **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details

    def __str__(self) -> str:
        prefix = f"{self.operation}: " if self.operation else ""
        if not self.details:
            return f"{prefix}{self.message}"
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{prefix}{self.message} ({context})"


class InvalidLog(RecordingError):
    pass


class EmptyLog(InvalidLog):
    pass


class InvalidRange(RecordingError):
    pass


class MissingKeyframe(RecordingError):
    pass


class ReconstructionError(RecordingError):
    """Raised by the synthetic keyframe builder; the trimmer recovers from these."""


class ReconstructionTimeout(ReconstructionError):
    pass


class CaptureUnavailable(ReconstructionError):
    pass


class InsufficientEvents(RecordingError):
    pass
