"""Text transforms applied to matched manual text before it becomes troff."""

from __future__ import annotations

import re

from .exceptions import CapacityError

LEADING_SPACES_PATTERN = re.compile(r"^ +", re.MULTILINE)
NON_EMPTY_LINE_START_PATTERN = re.compile(r"^(?=[^\n])", re.MULTILINE)


def _ensure_capacity(result: str, capacity: int | None, source: str) -> str:
    if capacity is not None and len(result) > capacity:
        raise CapacityError(capacity, source)
    return result


def escape(text: str, capacity: int | None = None) -> str:
    r"""Neutralize characters that troff would interpret as markup.

    Every backslash is doubled. An apostrophe or period that directly follows
    a newline would start a control line, so it gets a backslash in front.
    The very first character of `text` has no preceding newline and is left
    alone.

    Args:
        text: Raw text taken from the manual.
        capacity: Optional maximum length of the escaped result.

    Returns:
        str: Escaped text.

    Raises:
        CapacityError: If the escaped text is longer than `capacity`.

    Examples:
        escape("a\\b")  # "a\\\\b"
        escape("x\n.y")  # "x\n\\.y"
    """
    escaped = []
    previous = ""
    for character in text:
        if character == "\\":
            escaped.append("\\")
        elif character in "'." and previous == "\n":
            escaped.append("\\")
        escaped.append(character)
        previous = character

    return _ensure_capacity("".join(escaped), capacity, text)


def trim_leading_blanks(text: str, capacity: int | None = None) -> str:
    """Remove the run of leading spaces from every line.

    Tabs and all other characters are kept, and so is every newline.

    Args:
        text: Text whose lines should be flushed left.
        capacity: Optional maximum length of the result.

    Returns:
        str: Text without leading spaces on any line.

    Examples:
        trim_leading_blanks("  one\\n    two\\n")  # "one\\ntwo\\n"
    """
    return _ensure_capacity(LEADING_SPACES_PATTERN.sub("", text), capacity, text)


def leading_spaces(text: str) -> int:
    """Count the spaces at the start of `text`."""
    return len(text) - len(text.lstrip(" "))


def indent(text: str, delta: int, capacity: int | None = None) -> str:
    """Shift every line of `text` by `delta` columns.

    A positive delta prepends spaces to each non-empty line. A negative delta
    removes at most ``-delta`` leading spaces from each line; a line with
    fewer leading spaces loses only those it has, so content is never cut.

    Args:
        text: Block to re-indent.
        delta: Number of columns to add (positive) or remove (negative).
        capacity: Optional maximum length of the result.

    Returns:
        str: Re-indented text.

    Raises:
        CapacityError: If the result is longer than `capacity`.

    Examples:
        indent("      code\\n", -2)  # "    code\\n"
        indent("code\\n", 4)  # "    code\\n"
    """
    if delta > 0:
        result = NON_EMPTY_LINE_START_PATTERN.sub(" " * delta, text)
    elif delta < 0:
        result = re.sub(rf"^ {{1,{-delta}}}", "", text, flags=re.MULTILINE)
    else:
        result = text

    return _ensure_capacity(result, capacity, text)
