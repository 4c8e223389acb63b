"""Data models for manify."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .buffer import AccumulationBuffer


class ScanMode(Enum):
    """Structural modes of the scanner; exactly one is active at a time.

    Attributes:
        DEFAULT: Top-level prose, headings and block starts.
        ORDERED_LIST: Inside a numbered list item.
        UNORDERED_LIST: Inside a ``- `` list item.
        BLOCK_QUOTE: Inside a block indented by four or more spaces.
        FUNCTION_HEADING: Expecting the synopsis of the next function/macro.
        FUNCTION_BODY: Inside the description of a function/macro.
        FUNCTION_EXAMPLE: Expecting the example block after a colon paragraph.
        UNICODE_PARAGRAPHS: Inside the oddly indented Unicode section.
        MAKEFILE_EXAMPLE: Inside the build-file example.
        TABLE: Inside a dashed-rule table.
    """

    DEFAULT = "Default"
    ORDERED_LIST = "OrderedList"
    UNORDERED_LIST = "UnorderedList"
    BLOCK_QUOTE = "BlockQuote"
    FUNCTION_HEADING = "FunctionHeading"
    FUNCTION_BODY = "FunctionBody"
    FUNCTION_EXAMPLE = "FunctionExample"
    UNICODE_PARAGRAPHS = "UnicodeParagraphs"
    MAKEFILE_EXAMPLE = "MakefileExample"
    TABLE = "Table"


@dataclass(frozen=True)
class Rule:
    """A pattern recognizer bound to a scanner handler.

    Attributes:
        name: Short identifier used in diagnostics.
        pattern: Compiled pattern matched at the scan position.
        modes: Modes in which the rule is active.
        handler: Name of the `Scanner` method invoked on a match.
        at_line_start: Whether the rule only applies at the start of a line.
    """

    name: str
    pattern: re.Pattern[str]
    modes: frozenset[ScanMode]
    handler: str
    at_line_start: bool = False


@dataclass(frozen=True)
class RuleMatch:
    """The winning rule at a scan position and the text it matched."""

    rule: Rule
    text: str


@dataclass
class ScanContext:
    """Encapsulate scanner state while walking the manual.

    Attributes:
        mode: Current scan mode.
        position: Offset of the next unconsumed character.
        buffer: Lines gathered for the construct being accumulated.
    """

    mode: ScanMode = ScanMode.DEFAULT
    position: int = 0
    buffer: AccumulationBuffer = field(default_factory=AccumulationBuffer)


@dataclass(frozen=True)
class SymbolRecord:
    """A function or macro recognized from its synopsis.

    Attributes:
        name: Identifier, also used as the page file name.
        title: Upper-cased identifier for the `.TH` line.
        synopsis: Raw synopsis text as it appeared in the manual.
    """

    name: str
    title: str
    synopsis: str


@dataclass
class ScanResult:
    """Summary of a completed conversion.

    Attributes:
        symbols: Names of the functions/macros that received a page, in order.
        pages: Paths of the per-symbol pages written.
        echoed: Number of characters no rule recognized, copied verbatim to
            the overview page.
        final_mode: Mode active when the input ran out.
    """

    symbols: list[str]
    pages: list[Path]
    echoed: int
    final_mode: ScanMode
