"""Lexical scanner that turns the library manual into manual pages."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from loguru import logger

from . import constants as patterns
from .buffer import AccumulationBuffer
from .config import ConfigError, ManifyConfig, normalize_config, validate_config
from .exceptions import ContractError, ManifyError
from .filesystem import OutputRouter, safe_read
from .generator import (
    render_block_quote,
    render_heading,
    render_macro_description,
    render_no_fill,
    render_ordered_item,
    render_paragraph,
    render_symbol_example,
    render_symbol_head,
    render_symbol_paragraph,
    render_title,
    render_unordered_item,
)
from .models import Rule, RuleMatch, ScanContext, ScanMode, ScanResult
from .symbols import build_symbol_record, format_synopsis

DEFAULT = ScanMode.DEFAULT
ORDERED_LIST = ScanMode.ORDERED_LIST
UNORDERED_LIST = ScanMode.UNORDERED_LIST
BLOCK_QUOTE = ScanMode.BLOCK_QUOTE
FUNCTION_HEADING = ScanMode.FUNCTION_HEADING
FUNCTION_BODY = ScanMode.FUNCTION_BODY
FUNCTION_EXAMPLE = ScanMode.FUNCTION_EXAMPLE
UNICODE_PARAGRAPHS = ScanMode.UNICODE_PARAGRAPHS
MAKEFILE_EXAMPLE = ScanMode.MAKEFILE_EXAMPLE
TABLE = ScanMode.TABLE


def _rule(name, pattern, modes, handler, at_line_start=False) -> Rule:
    return Rule(name, pattern, frozenset(modes), handler, at_line_start)


# Order matters: among matches of equal length the earlier rule wins, which
# keeps the generic paragraph rule from shadowing the specific blocks.
RULES: tuple[Rule, ...] = (
    _rule("overview-title", patterns.OVERVIEW_TITLE_PATTERN, [DEFAULT], "_on_overview_title"),
    # Function/macro pages
    _rule(
        "reference-divider",
        patterns.REFERENCE_DIVIDER_PATTERN,
        [DEFAULT, FUNCTION_BODY],
        "_on_reference_start",
        at_line_start=True,
    ),
    _rule(
        "functions-heading",
        patterns.FUNCTIONS_HEADING_PATTERN,
        [DEFAULT, FUNCTION_BODY],
        "_on_reference_start",
    ),
    _rule(
        "macros-intro",
        patterns.MACROS_INTRO_PATTERN,
        [DEFAULT, FUNCTION_BODY],
        "_on_reference_start",
        at_line_start=True,
    ),
    _rule("reference-end", patterns.REFERENCE_END_PATTERN, [FUNCTION_BODY], "_on_reference_end"),
    _rule("synopsis", patterns.NONBLANK_BLOCK_PATTERN, [FUNCTION_HEADING], "_on_synopsis"),
    _rule(
        "description-lead",
        patterns.DESCRIPTION_LEAD_PATTERN,
        [FUNCTION_BODY],
        "_on_description_lead",
    ),
    _rule(
        "description-example",
        patterns.NONBLANK_BLOCK_PATTERN,
        [FUNCTION_EXAMPLE],
        "_on_description_example",
    ),
    _rule("description", patterns.NONBLANK_BLOCK_PATTERN, [FUNCTION_BODY], "_on_description"),
    _rule("description-blank", patterns.NEWLINE_PATTERN, [FUNCTION_BODY], "_on_discard"),
    # Unicode section
    _rule("unicode-heading", patterns.UNICODE_HEADING_PATTERN, [DEFAULT], "_on_unicode_heading"),
    _rule("unicode-end", patterns.UNICODE_END_PATTERN, [UNICODE_PARAGRAPHS], "_on_unicode_end"),
    _rule(
        "unicode-paragraph",
        patterns.NONBLANK_BLOCK_PATTERN,
        [UNICODE_PARAGRAPHS],
        "_on_paragraph",
    ),
    # Headings and separators
    _rule("heading", patterns.HEADING_PATTERN, [DEFAULT], "_on_heading", at_line_start=True),
    _rule(
        "subheading", patterns.SUBHEADING_PATTERN, [DEFAULT], "_on_subheading", at_line_start=True
    ),
    _rule(
        "section-divider",
        patterns.SECTION_DIVIDER_PATTERN,
        [DEFAULT],
        "_on_discard",
        at_line_start=True,
    ),
    _rule("blank-line", patterns.BLANK_LINE_PATTERN, [DEFAULT], "_on_discard"),
    # Ordered list
    _rule(
        "ordered-item",
        patterns.ORDERED_ITEM_PATTERN,
        [DEFAULT, ORDERED_LIST],
        "_on_ordered_item",
    ),
    _rule(
        "ordered-continuation",
        patterns.CONTINUATION_LINE_PATTERN,
        [ORDERED_LIST],
        "_on_append",
    ),
    _rule("ordered-end", patterns.NEWLINE_PATTERN, [ORDERED_LIST], "_on_ordered_end"),
    # Unordered list
    _rule(
        "unordered-item",
        patterns.UNORDERED_ITEM_PATTERN,
        [DEFAULT, UNORDERED_LIST],
        "_on_unordered_item",
    ),
    _rule(
        "unordered-continuation",
        patterns.CONTINUATION_LINE_PATTERN,
        [UNORDERED_LIST],
        "_on_append",
    ),
    _rule("unordered-end", patterns.NEWLINE_PATTERN, [UNORDERED_LIST], "_on_unordered_end"),
    # Block quote
    _rule("quote-start", patterns.INDENTED_LINE_PATTERN, [DEFAULT], "_on_quote_start"),
    _rule("quote-line", patterns.INDENTED_LINE_PATTERN, [BLOCK_QUOTE], "_on_append"),
    _rule("quote-blank", patterns.NEWLINE_PATTERN, [BLOCK_QUOTE], "_on_append"),
    _rule("quote-end", patterns.QUOTE_END_PATTERN, [BLOCK_QUOTE], "_on_quote_end"),
    # Build-file example
    _rule(
        "makefile-start",
        patterns.MAKEFILE_START_PATTERN,
        [DEFAULT],
        "_on_makefile_start",
    ),
    _rule("makefile-rule", patterns.MAKEFILE_RULE_PATTERN, [MAKEFILE_EXAMPLE], "_on_append"),
    _rule(
        "makefile-end",
        patterns.NONBLANK_BLOCK_PATTERN,
        [MAKEFILE_EXAMPLE],
        "_on_literal_end",
    ),
    # Table
    _rule("table-start", patterns.TABLE_START_PATTERN, [DEFAULT], "_on_table_start"),
    _rule("table-row", patterns.TABLE_ROW_PATTERN, [TABLE], "_on_append"),
    _rule("table-blank", patterns.NEWLINE_PATTERN, [TABLE], "_on_append"),
    _rule("table-end", patterns.NONBLANK_LINE_PATTERN, [TABLE], "_on_literal_end"),
    # Special-cased blocks
    _rule("acknowledgements", patterns.ACKNOWLEDGEMENTS_PATTERN, [DEFAULT], "_on_no_fill"),
    _rule(
        "macro-description",
        patterns.MACRO_DESCRIPTION_PATTERN,
        [DEFAULT],
        "_on_macro_description",
    ),
    _rule("files-list", patterns.FILES_LIST_PATTERN, [DEFAULT], "_on_no_fill"),
    # Catch-all
    _rule("paragraph", patterns.PARAGRAPH_PATTERN, [DEFAULT], "_on_paragraph"),
)

# Modes whose accumulated construct is flushed when the input ends.
FLUSH_AT_END = {
    ORDERED_LIST: "_flush_ordered",
    UNORDERED_LIST: "_flush_unordered",
    BLOCK_QUOTE: "_flush_quote",
}


def match_rule(
    document: str, position: int, mode: ScanMode, rules: tuple[Rule, ...] = RULES
) -> RuleMatch | None:
    """Pick the rule that claims the text at `position`.

    Only rules active in `mode` are tried, and line-anchored rules only at the
    start of a line. The longest match wins; ties go to the rule declared
    first.

    Args:
        document: Full manual text.
        position: Offset where matching starts.
        mode: Active scan mode.
        rules: Rule table, in priority order.

    Returns:
        RuleMatch | None: The winning rule and its text, or None when no
            rule matches.

    Examples:
        match_rule("Functions\\n---------\\n\\n", 0, ScanMode.DEFAULT).rule.name  # "heading"
    """
    at_line_start = position == 0 or document[position - 1] == "\n"
    best: RuleMatch | None = None

    for rule in rules:
        if mode not in rule.modes:
            continue
        if rule.at_line_start and not at_line_start:
            continue
        match = rule.pattern.match(document, position)
        if match is None:
            continue
        if best is None or len(match.group(0)) > len(best.text):
            best = RuleMatch(rule=rule, text=match.group(0))

    return best


class Scanner:
    """Single-pass state machine over the manual.

    Each step matches the remaining input against the rules of the current
    mode and runs the winning handler. A handler returns how many characters
    of its match it commits to; None commits the whole match and 0 hands the
    text back so the next mode can claim it.

    Args:
        document: Full manual text.
        router: Destination for the overview and symbol pages.
        config: Conversion settings; defaults to `ManifyConfig()`.

    Examples:
        router = OutputRouter(sys.stdout, Path("man3"))
        result = Scanner(Path("bstrlib.txt").read_text(), router).run()
    """

    def __init__(
        self, document: str, router: OutputRouter, config: ManifyConfig | None = None
    ):
        self.document = document
        self.router = router
        self.config = normalize_config(config or ManifyConfig())
        self.context = ScanContext(buffer=AccumulationBuffer(self.config.buffer_capacity))
        self.symbols: list[str] = []
        self.echoed = 0

    @property
    def line_number(self) -> int:
        return self.document.count("\n", 0, self.context.position) + 1

    def run(self) -> ScanResult:
        """Scan the whole document.

        Returns:
            ScanResult: Symbols documented, pages written and echo count.

        Raises:
            ManifyError: On the first fatal condition, annotated with the input
                line where it happened.
        """
        ctx = self.context
        try:
            while ctx.position < len(self.document):
                match = match_rule(self.document, ctx.position, ctx.mode)
                if match is None:
                    self._echo()
                    continue
                self._dispatch(match)
            self._finish()
        except ManifyError as error:
            if error.line_number is None:
                error.line_number = self.line_number
            raise

        logger.info(
            "Converted manual: {} symbol pages, {} unmatched characters",
            len(self.symbols),
            self.echoed,
        )
        return ScanResult(
            symbols=list(self.symbols),
            pages=list(self.router.pages),
            echoed=self.echoed,
            final_mode=ctx.mode,
        )

    def _dispatch(self, match: RuleMatch) -> None:
        ctx = self.context
        mode_before = ctx.mode
        consumed = getattr(self, match.rule.handler)(match.text)
        if consumed is None:
            consumed = len(match.text)

        if consumed == 0:
            if ctx.mode is mode_before:
                raise ContractError(
                    f"rule {match.rule.name!r} consumed nothing without leaving {ctx.mode.value}"
                )
            logger.debug("Rule {} handed its match back to {}", match.rule.name, ctx.mode.value)
        ctx.position += consumed

    def _enter(self, mode: ScanMode) -> None:
        if mode is not self.context.mode:
            logger.debug("Mode {} -> {}", self.context.mode.value, mode.value)
        self.context.mode = mode

    def _echo(self) -> None:
        character = self.document[self.context.position]
        log = logger.debug if character.isspace() else logger.warning
        log(
            "No rule matches {!r} in {} at line {}; copying it through",
            character,
            self.context.mode.value,
            self.line_number,
        )
        self.router.emit_main(character)
        self.echoed += 1
        self.context.position += 1

    def _finish(self) -> None:
        flush = FLUSH_AT_END.get(self.context.mode)
        if flush is not None:
            getattr(self, flush)()
            self._enter(DEFAULT)
        self.router.close()

    def _emit(self, markup: str) -> None:
        if markup:
            self.router.emit_main(markup)

    # Accumulated constructs

    def _flush_ordered(self) -> None:
        self._emit(render_ordered_item(self.context.buffer.take(), self.config))

    def _flush_unordered(self) -> None:
        self._emit(render_unordered_item(self.context.buffer.take(), self.config))

    def _flush_quote(self) -> None:
        self._emit(render_block_quote(self.context.buffer.take(), self.config))

    def _on_append(self, text: str) -> None:
        self.context.buffer.append(text)

    def _on_ordered_item(self, text: str) -> None:
        self._flush_ordered()
        self.context.buffer.start(text)
        self._enter(ORDERED_LIST)

    def _on_ordered_end(self, text: str) -> None:
        self._flush_ordered()
        self._enter(DEFAULT)

    def _on_unordered_item(self, text: str) -> None:
        self._flush_unordered()
        self.context.buffer.start(text)
        self._enter(UNORDERED_LIST)

    def _on_unordered_end(self, text: str) -> None:
        self._flush_unordered()
        self._enter(DEFAULT)

    def _on_quote_start(self, text: str) -> None:
        self.context.buffer.start(text)
        self._enter(BLOCK_QUOTE)

    def _on_quote_end(self, text: str) -> int:
        self._flush_quote()
        self._enter(DEFAULT)
        return 0

    def _on_makefile_start(self, text: str) -> None:
        self.context.buffer.start(text)
        self._enter(MAKEFILE_EXAMPLE)

    def _on_table_start(self, text: str) -> None:
        self.context.buffer.start(text)
        self._enter(TABLE)

    def _on_literal_end(self, text: str) -> int:
        self._emit(render_no_fill(self.context.buffer.take(), self.config))
        self._enter(DEFAULT)
        return 0

    # Overview page

    def _on_overview_title(self, text: str) -> None:
        self._emit(render_title(self.config))
        self._emit(render_heading(text, 1))

    def _on_heading(self, text: str) -> None:
        self._emit(render_heading(text, 1))

    def _on_subheading(self, text: str) -> None:
        self._emit(render_heading(text, 2))

    def _on_paragraph(self, text: str) -> None:
        self._emit(render_paragraph(text, self.config))

    def _on_no_fill(self, text: str) -> None:
        self._emit(render_no_fill(text, self.config))

    def _on_macro_description(self, text: str) -> None:
        self._emit(render_macro_description(text, self.config))

    def _on_discard(self, text: str) -> None:
        pass

    def _on_unicode_heading(self, text: str) -> None:
        self._emit(render_heading(text, 1))
        self._enter(UNICODE_PARAGRAPHS)

    def _on_unicode_end(self, text: str) -> int:
        self._enter(DEFAULT)
        return 0

    # Function/macro pages

    def _on_reference_start(self, text: str) -> None:
        if self.router.symbol_open:
            self.router.close_symbol()
        self._enter(FUNCTION_HEADING)

    def _on_synopsis(self, text: str) -> None:
        record = build_symbol_record(text)
        synopsis = format_synopsis(text, self.config)
        self.router.open_symbol(record.name)
        self.router.emit_symbol(render_symbol_head(record, synopsis, self.config))
        self.symbols.append(record.name)
        self._enter(FUNCTION_BODY)

    def _on_description_lead(self, text: str) -> None:
        self.router.emit_symbol(render_symbol_paragraph(text, self.config))
        self._enter(FUNCTION_EXAMPLE)

    def _on_description_example(self, text: str) -> None:
        self.router.emit_symbol(render_symbol_example(text, self.config))
        self._enter(FUNCTION_BODY)

    def _on_description(self, text: str) -> None:
        self.router.emit_symbol(render_symbol_paragraph(text, self.config))

    def _on_reference_end(self, text: str) -> None:
        self.router.close_symbol()
        self._enter(DEFAULT)


def convert_document(
    content: str,
    main: TextIO,
    config: ManifyConfig | None = None,
    man_dir: Path | None = None,
) -> ScanResult:
    """Convert manual text into an overview page and per-symbol pages.

    Args:
        content: Full manual text.
        main: Stream receiving the overview page.
        config: Conversion settings. Defaults to a new `ManifyConfig`.
        man_dir: Directory for symbol pages; defaults to ``config.man_dir``.

    Returns:
        ScanResult: Summary of the conversion.

    Raises:
        ConfigError: If the configuration fails validation.
        ManifyError: On any fatal conversion condition.

    Examples:
        convert_document(Path("bstrlib.txt").read_text(), sys.stdout)
    """
    config = normalize_config(config or ManifyConfig())
    validate_config(config)
    router = OutputRouter(main, Path(man_dir or config.man_dir), config.section)
    return Scanner(content, router, config).run()


class ConvertFileError(Exception):
    """Raised when converting a manual file fails."""


def convert_file(
    filepath: Path,
    main: TextIO,
    config: ManifyConfig | None = None,
    man_dir: Path | None = None,
) -> ScanResult:
    """Read a manual file and convert it.

    Args:
        filepath: Path to the plain-text manual.
        main: Stream receiving the overview page.
        config: Conversion settings. Defaults to a new `ManifyConfig`.
        man_dir: Directory for symbol pages; defaults to ``config.man_dir``.

    Returns:
        ScanResult: Summary of the conversion.

    Raises:
        ConvertFileError: If the configuration is invalid, the file cannot be
            read or decoded, or conversion fails.

    Examples:
        convert_file(Path("bstrlib.txt"), sys.stdout, man_dir=Path("man3"))
    """
    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        raise ConvertFileError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except IOError as error:
        raise ConvertFileError(str(error)) from error

    try:
        return convert_document(content, main, config, man_dir)
    except (ConfigError, ManifyError) as error:
        raise ConvertFileError(f"{filepath}: {error}") from error
