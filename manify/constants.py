"""Constants used across the manify package."""

from __future__ import annotations

import re

from .config import ManifyConfig

DEFAULT_CONFIG = ManifyConfig()
DEFAULT_BUFFER_CAPACITY = DEFAULT_CONFIG.buffer_capacity

# Building blocks shared by the manual patterns
HORIZONTAL_SPACE = r"[ \t]"
NONBLANK = rf"(?:{HORIZONTAL_SPACE}*[^ \t\n].*\n)"

# Reference section
OVERVIEW_TITLE_PATTERN = re.compile(r"Better String library\n-{21}\n")
REFERENCE_DIVIDER_PATTERN = re.compile(r" {4}\.{5,}\n\n")
FUNCTIONS_HEADING_PATTERN = re.compile(r"The functions\n-{5,}\n\n")
MACROS_INTRO_PATTERN = re.compile(rf"The macros\n\n{NONBLANK}+\n\n")
REFERENCE_END_PATTERN = re.compile(r"={5,}\n")
DESCRIPTION_LEAD_PATTERN = re.compile(rf"{NONBLANK}*{HORIZONTAL_SPACE}*[^ \t\n].*:\n\n")

# Unicode section
UNICODE_HEADING_PATTERN = re.compile(r"Unicode functions\n-{3,}\n\n")
UNICODE_END_PATTERN = re.compile(r" +\.{3,}\n\n")

# Headings and separators
HEADING_PATTERN = re.compile(r".{3,}\n-{3,}\n")
SUBHEADING_PATTERN = re.compile(r".{3,}\n\.{3,}\n")
SECTION_DIVIDER_PATTERN = re.compile(r"={3,}\n")
BLANK_LINE_PATTERN = re.compile(rf"{HORIZONTAL_SPACE}*\n")

# Lists and block quotes
ORDERED_ITEM_PATTERN = re.compile(r" *[0-9]+[).] .*\n")
UNORDERED_ITEM_PATTERN = re.compile(r" *- .*\n")
CONTINUATION_LINE_PATTERN = re.compile(r".+\n")
INDENTED_LINE_PATTERN = re.compile(r" {4,}.*\n")
QUOTE_END_PATTERN = re.compile(r"\n {0,3}[^ ]")

# Build-file example and tables
MAKEFILE_START_PATTERN = re.compile(rf"BSTRDIR = .+\n{NONBLANK}+\n")
MAKEFILE_RULE_PATTERN = re.compile(rf"{NONBLANK}\t.+\n{NONBLANK}+\n")
TABLE_START_PATTERN = re.compile(rf"{NONBLANK}(?: *-{{3,}}){{2,}} *\n{NONBLANK}*")
TABLE_ROW_PATTERN = re.compile(r".* {3,}.*\n")

# Special-cased blocks
ACKNOWLEDGEMENTS_PATTERN = re.compile(rf"{NONBLANK}*Bjorn Augestad\n{NONBLANK}*")
MACRO_DESCRIPTION_PATTERN = re.compile(rf"BSTRLIB_[A-Z0-9_]+\n\n{NONBLANK}+\n")
FILES_LIST_PATTERN = re.compile(rf"{NONBLANK}?(?:[a-zA-Z0-9_]+\.[a-z]+ {{2,}}- .+\n)+")

# Generic blocks
NEWLINE_PATTERN = re.compile(r"\n")
NONBLANK_LINE_PATTERN = re.compile(NONBLANK)
NONBLANK_BLOCK_PATTERN = re.compile(rf"{NONBLANK}+")
PARAGRAPH_PATTERN = re.compile(r"[^\s0-9-].*\n(?:.+\n)*", re.ASCII)

# Symbol names inside a synopsis
SYMBOL_NAME_PATTERN = re.compile(r"[bu][a-zA-Z0-9-]+ ?\(")
ORDERED_MARKER_CHARACTERS = "0123456789.)"
EXTERN_QUALIFIER = "extern "
