"""Function and macro name extraction from synopsis text."""

from __future__ import annotations

from .config import ManifyConfig
from .constants import EXTERN_QUALIFIER, SYMBOL_NAME_PATTERN
from .exceptions import ContractError
from .models import SymbolRecord
from .transform import escape, indent, leading_spaces


def extract_symbol_name(synopsis: str) -> str:
    """Find the identifier declared by a synopsis.

    The identifier starts with ``b`` or ``u``, continues with letters, digits
    or hyphens, and is followed by an optional space and an opening
    parenthesis. The leftmost such identifier wins.

    Args:
        synopsis: Declaration text of a function or macro.

    Returns:
        str: The bare identifier, without the trailing space or parenthesis.

    Raises:
        ContractError: If the synopsis contains no identifier of that shape.

    Examples:
        extract_symbol_name("extern bstring bfromcstr (const char * str);")  # "bfromcstr"
        extract_symbol_name("#define blength(b)")  # "blength"
    """
    match = SYMBOL_NAME_PATTERN.search(synopsis)
    if match is None:
        raise ContractError(f"no symbol name matching {SYMBOL_NAME_PATTERN.pattern!r} in {synopsis!r}")
    return match.group(0).rstrip("( ")


def build_symbol_record(synopsis: str) -> SymbolRecord:
    """Create the record that seeds a new per-symbol page."""
    name = extract_symbol_name(synopsis)
    return SymbolRecord(name=name, title=name.upper(), synopsis=synopsis)


def format_synopsis(synopsis: str, config: ManifyConfig | None = None) -> str:
    """Prepare a synopsis for the SYNOPSIS section of a symbol page.

    The block is dedented by the indentation of its first line and escaped.
    The obvious ``extern`` qualifier is dropped together with anything before
    it, and the following line is pulled left by the same width so that a
    wrapped declaration stays aligned.

    Args:
        synopsis: Raw synopsis block, ending with a newline.
        config: Configuration providing the buffer capacity.

    Returns:
        str: Synopsis text ready to be placed between `.EX` and `.EE`.

    Examples:
        format_synopsis("extern int bdestroy (bstring b);\\n")  # "int bdestroy (bstring b);\\n"
    """
    config = config or ManifyConfig()
    capacity = config.buffer_capacity

    text = indent(synopsis, -leading_spaces(synopsis), capacity)
    text = escape(text, capacity)

    location = text.find(EXTERN_QUALIFIER)
    if location == -1:
        return text

    text = text[location + len(EXTERN_QUALIFIER) :]
    first_line, newline, rest = text.partition("\n")
    if len(rest) > len(EXTERN_QUALIFIER):
        rest = rest[len(EXTERN_QUALIFIER) :]
    return first_line + newline + rest
