"""Accumulation buffer for constructs that span several matches."""

from __future__ import annotations

from .exceptions import CapacityError


class AccumulationBuffer:
    """Collect the lines of one list item, block quote, table or example.

    The buffer never holds more than `capacity` characters. An append that
    would overflow raises before anything is stored, so a construct that is
    too large is never emitted in part.

    Args:
        capacity: Maximum number of characters; None means unbounded.

    Examples:
        buffer = AccumulationBuffer(capacity=5000)
        buffer.start("1. First\\n")
        buffer.append("   more\\n")
        text = buffer.take()
    """

    def __init__(self, capacity: int | None = None):
        self.capacity = capacity
        self._parts: list[str] = []
        self._length = 0

    def __len__(self) -> int:
        return self._length

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def start(self, text: str) -> None:
        """Replace the content with `text`."""
        self.clear()
        self.append(text)

    def append(self, text: str) -> None:
        """Add `text` to the end of the content.

        Raises:
            CapacityError: If the content would exceed `capacity`.
        """
        if self.capacity is not None and self._length + len(text) > self.capacity:
            raise CapacityError(self.capacity, self.text + text)
        self._parts.append(text)
        self._length += len(text)

    def clear(self) -> None:
        self._parts = []
        self._length = 0

    def take(self) -> str:
        """Return the content and leave the buffer empty."""
        text = self.text
        self.clear()
        return text
