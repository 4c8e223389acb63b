"""
Logging for manify built on Loguru.

The ``manify`` namespace is disabled on import so that using the package as a
library stays quiet. The command line calls `configure_logging` to route
messages to stderr at a level chosen by the ``-v`` count:

    0 = warnings only (default)
    1 = progress (-v): pages opened and closed, run summary
    2 = trace (-vv): every mode transition and rewind

Usage:
    from manify.log import configure_logging

    configure_logging(verbosity=2)
"""

from __future__ import annotations

import sys
from typing import Any

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

VERBOSITY_LEVELS = ("WARNING", "INFO", "DEBUG")

logger.disable("manify")


def level_for(verbosity: int) -> str:
    """Map a ``-v`` count to a Loguru level name."""
    index = min(max(verbosity, 0), len(VERBOSITY_LEVELS) - 1)
    return VERBOSITY_LEVELS[index]


def configure_logging(verbosity: int = 0, sink: Any = None) -> None:
    """Send manify log messages to `sink` (stderr by default).

    Args:
        verbosity: Number of ``-v`` flags given on the command line.
        sink: Any Loguru sink; defaults to ``sys.stderr``.
    """
    logger.remove()
    logger.add(sys.stderr if sink is None else sink, format=LOG_FORMAT, level=level_for(verbosity))
    logger.enable("manify")
