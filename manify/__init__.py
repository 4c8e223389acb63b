"""
manify: manual pages from the bstrlib plain-text manual.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    manify bstrlib.txt > man3/bstrlib.3

Library Usage:
    import sys
    from pathlib import Path
    from manify import convert_document

    content = Path("bstrlib.txt").read_text()
    result = convert_document(content, sys.stdout, man_dir=Path("man3"))
    print(result.symbols)
"""

from .buffer import AccumulationBuffer
from .config import ConfigError, ManifyConfig
from .exceptions import (
    CapacityError,
    ContractError,
    InputShapeError,
    ManifyError,
    ResourceError,
)
from .filesystem import OutputRouter
from .log import configure_logging
from .models import ScanMode, ScanResult, SymbolRecord
from .scanner import ConvertFileError, Scanner, convert_document, convert_file, match_rule
from .symbols import extract_symbol_name
from .transform import escape, indent, trim_leading_blanks

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "convert_document",
    "convert_file",
    "Scanner",
    "match_rule",
    "OutputRouter",
    "AccumulationBuffer",
    # Text transforms
    "escape",
    "indent",
    "trim_leading_blanks",
    "extract_symbol_name",
    # Logging
    "configure_logging",
    # Data models
    "ManifyConfig",
    "ScanMode",
    "ScanResult",
    "SymbolRecord",
    # Exceptions
    "CapacityError",
    "ConfigError",
    "ContractError",
    "ConvertFileError",
    "InputShapeError",
    "ManifyError",
    "ResourceError",
    # Version
    "__version__",
]
