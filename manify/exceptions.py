"""Package-specific exception types."""

from __future__ import annotations

from pathlib import Path

SNIPPET_LENGTH = 40


class ManifyError(ValueError):
    """Base class for every fatal conversion error.

    Args:
        message: Human-readable description of the failure.
        line_number: One-based input line where scanning stopped, when known.
    """

    def __init__(self, message: str, line_number: int | None = None):
        self.message = message
        self.line_number = line_number
        super().__init__(message)

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class InputShapeError(ManifyError):
    """Raised when matched text does not have the shape its handler expects."""


class ContractError(ManifyError):
    """Raised when a recognizer and the routine it calls disagree."""


class CapacityError(ManifyError):
    """Raised when a buffer would grow past its configured capacity.

    Args:
        capacity: Maximum number of characters the buffer may hold.
        text: Text being buffered; only a short snippet is kept.
    """

    def __init__(self, capacity: int, text: str):
        self.capacity = capacity
        self.snippet = text[:SNIPPET_LENGTH]
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"buffer capacity of {self.capacity} characters exceeded on: {self.snippet!r}"


class ResourceError(ManifyError):
    """Raised when the manual directory or a page cannot be created or closed.

    Args:
        action: What was being attempted (e.g. ``"open manpage file"``).
        path: Filesystem path involved.
        error: Underlying operating system error.
    """

    def __init__(self, action: str, path: Path, error: OSError):
        self.action = action
        self.path = path
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"{action} {path}: {reason}")
