"""Filesystem helpers and output routing for manify."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TextIO

from loguru import logger

from .constants import DEFAULT_BUFFER_CAPACITY
from .exceptions import ContractError, ResourceError

BUFFER_CAPACITY_ENV_VAR = "MANIFY_BUFFER_CAPACITY"


def get_buffer_capacity(default: int = DEFAULT_BUFFER_CAPACITY) -> int:
    """Resolve the buffer capacity, honouring the environment override.

    Args:
        default: Fallback value in characters when the environment variable is
            unset.

    Returns:
        int: Maximum number of characters a buffered construct may hold.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["MANIFY_BUFFER_CAPACITY"] = "20000"
        capacity = get_buffer_capacity(default=5000)
    """
    env_value = os.environ.get(BUFFER_CAPACITY_ENV_VAR)
    if env_value is None:
        return default

    try:
        capacity = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {BUFFER_CAPACITY_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if capacity <= 0:
        error_message = f"{BUFFER_CAPACITY_ENV_VAR} must be a positive integer, got {capacity}."
        raise ValueError(error_message)

    return capacity


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("bstrlib.txt")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


class OutputRouter:
    """Route markup to the overview page or to the current symbol page.

    The overview stream stays open for the whole run and is owned by the
    caller. Symbol pages are files named ``<name>.<section>`` inside
    `man_dir`, created when first needed; at most one is open at a time.

    Args:
        main: Stream receiving the overview page.
        man_dir: Directory for per-symbol pages.
        section: Manual section used as the page file extension.

    Examples:
        router = OutputRouter(sys.stdout, Path("man3"))
        router.open_symbol("bfromcstr")
        router.emit_symbol(".TH BFROMCSTR 3\\n")
        router.close_symbol()
    """

    def __init__(self, main: TextIO, man_dir: Path, section: int = 3):
        self.main = main
        self.man_dir = Path(man_dir)
        self.section = section
        self.pages: list[Path] = []
        self._symbol: TextIO | None = None
        self._symbol_path: Path | None = None

    @property
    def symbol_open(self) -> bool:
        return self._symbol is not None

    def emit_main(self, markup: str) -> None:
        self.main.write(markup)

    def _ensure_man_dir(self) -> None:
        if self.man_dir.is_dir():
            return
        try:
            self.man_dir.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise ResourceError("create manpage dir", self.man_dir, error) from error

    def open_symbol(self, name: str) -> TextIO:
        """Create the page for `name` and make it the current symbol page.

        Raises:
            ContractError: If another symbol page is still open.
            ResourceError: If the directory or the file cannot be created.
        """
        if self._symbol is not None:
            raise ContractError(
                f"cannot open page for {name!r} while {self._symbol_path} is still open"
            )

        self._ensure_man_dir()
        path = self.man_dir / f"{name}.{self.section}"
        try:
            self._symbol = open(path, "w", encoding="UTF-8")
        except OSError as error:
            raise ResourceError("open manpage file", path, error) from error

        self._symbol_path = path
        self.pages.append(path)
        logger.info("Opened symbol page {}", path)
        return self._symbol

    def emit_symbol(self, markup: str) -> None:
        if self._symbol is None:
            raise ContractError("no symbol page is open")
        self._symbol.write(markup)

    def close_symbol(self) -> None:
        """Close the current symbol page.

        Raises:
            ContractError: If no symbol page is open.
            ResourceError: If closing fails, which means writes were lost.
        """
        if self._symbol is None:
            raise ContractError("no symbol page is open")

        symbol, path = self._symbol, self._symbol_path
        self._symbol = None
        self._symbol_path = None
        try:
            symbol.close()
        except OSError as error:
            raise ResourceError("close manpage file", path, error) from error
        logger.info("Closed symbol page {}", path)

    def close(self) -> None:
        """Close a symbol page left open when the input ends."""
        if self._symbol is not None:
            logger.warning("Symbol page {} was still open at end of input", self._symbol_path)
            self.close_symbol()
