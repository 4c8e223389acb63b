"""Manual-page markup generation for recognized manual constructs."""

from __future__ import annotations

from .config import ManifyConfig
from .constants import ORDERED_MARKER_CHARACTERS
from .exceptions import InputShapeError
from .models import SymbolRecord
from .transform import escape, indent, leading_spaces, trim_leading_blanks


def _capacity(config: ManifyConfig | None) -> int:
    return (config or ManifyConfig()).buffer_capacity


def _span(text: str, characters: str, start: int = 0) -> int:
    """Length of the run of `characters` at `start` (like C's strspn)."""
    end = start
    while end < len(text) and text[end] in characters:
        end += 1
    return end - start


def render_title(config: ManifyConfig | None = None) -> str:
    """Render the title block of the overview page.

    Examples:
        render_title()  # ".TH BSTRLIB 3\\n.SH NAME\\nbstrlib \\\\- the better string library\\n"
    """
    config = config or ManifyConfig()
    return (
        f".TH {config.title.upper()} {config.section}\n"
        f".SH NAME\n{config.title} \\- {config.description}\n"
    )


def render_heading(text: str, level: int) -> str:
    """Render the first line of a two-line heading.

    Level 1 becomes an upper-cased `.SH`; deeper levels become `.SS` in their
    original case.

    Args:
        text: Heading text followed by its underline.
        level: Heading depth, starting at 1.

    Returns:
        str: One troff heading line.

    Raises:
        InputShapeError: If `level` is below 1 or the text has no newline.

    Examples:
        render_heading("Functions\\n---------\\n", 1)  # ".SH FUNCTIONS\\n"
    """
    if level == 1:
        macro = ".SH"
        text = text.upper()
    elif level > 1:
        macro = ".SS"
    else:
        raise InputShapeError(f"bad heading level: {level}")

    first_line, newline, _ = text.partition("\n")
    if not newline:
        raise InputShapeError(f"no newline in heading: {text!r}")
    return f"{macro} {first_line}\n"


def render_paragraph(text: str, config: ManifyConfig | None = None) -> str:
    capacity = _capacity(config)
    return ".P\n" + escape(trim_leading_blanks(text, capacity), capacity)


def render_ordered_item(text: str, config: ManifyConfig | None = None) -> str:
    """Render one accumulated ordered-list item.

    An item whose continuation starts with a space (or that has no
    continuation) is rendered as a tagged paragraph with the marker as the
    tag. Otherwise the item is ordinary prose that happens to start with a
    number, and it becomes a plain paragraph.

    Args:
        text: Accumulated item lines, starting with the marker line.
        config: Configuration providing the buffer capacity.

    Returns:
        str: Troff markup, or an empty string for an empty item.

    Raises:
        InputShapeError: If the item does not start with a list marker.

    Examples:
        render_ordered_item("1. Step\\n   more\\n")  # ".TP\\n1.\\nStep\\nmore\\n"
    """
    if not text:
        return ""

    _, newline, rest = text.partition("\n")
    hanging = not (newline and rest and not rest.startswith(" "))

    capacity = _capacity(config)
    body = escape(trim_leading_blanks(text, capacity), capacity)
    label_length = _span(body, ORDERED_MARKER_CHARACTERS)
    if not label_length:
        raise InputShapeError(f"can't find ordered list marker: {body[:20]!r}")

    if not hanging:
        return render_paragraph(text, config)

    space_length = _span(body, " ", label_length)
    return f".TP\n{body[:label_length]}\n{body[label_length + space_length:]}"


def render_unordered_item(text: str, config: ManifyConfig | None = None) -> str:
    if not text:
        return ""
    capacity = _capacity(config)
    body = escape(trim_leading_blanks(text, capacity), capacity)
    return f".TP\n-\n{body[_span(body, '- '):]}"


def _example(text: str, config: ManifyConfig | None) -> str:
    config = config or ManifyConfig()
    escaped = escape(text, config.buffer_capacity)
    delta = config.example_indent - leading_spaces(escaped)
    return indent(escaped, delta, config.buffer_capacity)


def render_block_quote(text: str, config: ManifyConfig | None = None) -> str:
    """Render an indented block as an example, re-indented to a fixed column."""
    if not text:
        return ""
    return f"\n.EX\n{_example(text, config)}.EE\n"


def render_no_fill(text: str, config: ManifyConfig | None = None) -> str:
    return f"\n.nf\n{escape(text, _capacity(config))}.fi\n"


def render_macro_description(text: str, config: ManifyConfig | None = None) -> str:
    """Render a compilation macro and its description as a tagged paragraph.

    Raises:
        InputShapeError: If the text has no line break after the macro name.
    """
    capacity = _capacity(config)
    body = escape(trim_leading_blanks(text, capacity), capacity)
    tag, newline, _ = body.partition("\n")
    if not newline:
        raise InputShapeError(f"probably not a compilation macro description: {text!r}")
    offset = len(tag) + _span(body, " -\n", len(tag))
    return f".TP\n{tag}\n{body[offset:]}"


def render_symbol_head(
    record: SymbolRecord, synopsis: str, config: ManifyConfig | None = None
) -> str:
    """Render the sections that open every function/macro page.

    Args:
        record: Symbol the page documents.
        synopsis: Synopsis already prepared by `format_synopsis`.
        config: Configuration providing section and summary text.

    Returns:
        str: `.TH`, NAME, SYNOPSIS and the DESCRIPTION heading.

    Examples:
        render_symbol_head(record, "int bdestroy (bstring b);\\n")
    """
    config = config or ManifyConfig()
    return (
        f".TH {record.title} {config.section}\n"
        f".SH NAME\n{record.name} \\- {config.symbol_description}\n"
        f".SH SYNOPSIS\n.EX\n{synopsis}\n.EE\n"
        ".SH DESCRIPTION\n"
    )


def render_symbol_paragraph(text: str, config: ManifyConfig | None = None) -> str:
    capacity = _capacity(config)
    return ".P\n" + escape(trim_leading_blanks(text, capacity), capacity)


def render_symbol_example(text: str, config: ManifyConfig | None = None) -> str:
    return f".br\n.EX\n{_example(text, config)}.EE\n"
