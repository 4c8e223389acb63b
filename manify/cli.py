"""
Converts the bstrlib plain-text manual into manual pages.
The overview page goes to stdout (or --output); one page per function/macro
is written to the manual directory.
"""

from __future__ import annotations

from pathlib import Path

import click
from .config import ConfigError, apply_overrides, build_config
from .exceptions import ManifyError
from .filesystem import get_buffer_capacity
from .log import configure_logging
from .scanner import ConvertFileError, convert_document, convert_file

__all__ = ["cli"]


@click.command()
@click.version_option()
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, allow_dash=True),
    default="-",
    help="Destination of the overview page (default: stdout)",
)
@click.option("--man-dir", type=click.Path(file_okay=False), help="Directory for symbol pages")
@click.option("--title", help="Library name used for the overview page")
@click.option("--description", help="One-line library summary")
@click.option("--section", type=int, help="Manual section number")
@click.option("--buffer-capacity", type=int, help="Maximum characters in one buffered construct")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv)")
@click.argument(
    "filepath", type=click.Path(exists=True, dir_okay=False, allow_dash=True), default="-"
)
def cli(
    filepath: str,
    output: str = "-",
    man_dir: str | None = None,
    title: str | None = None,
    description: str | None = None,
    section: int | None = None,
    buffer_capacity: int | None = None,
    verbose: int = 0,
):
    """
    Entry point for converting the library manual into manual pages.

    Args:
        filepath: Path to the plain-text manual, or ``-`` for stdin.
        output: Destination of the overview page, or ``-`` for stdout.
        man_dir: Override for the directory receiving symbol pages.
        title: Override for the library name.
        description: Override for the library summary.
        section: Override for the manual section.
        buffer_capacity: Override for the buffered construct limit.
        verbose: Log verbosity (number of ``-v`` flags).

    Returns:
        None.

    Raises:
        click.BadParameter: If configuration values are invalid.
        click.ClickException: If the manual cannot be read, the overview
            cannot be written, or conversion stops on a fatal condition.

    Examples:
        manify bstrlib.txt -o man3/bstrlib.3
        awk -f aux_defs.awk bstraux.h | manify --title bstraux
    """
    configure_logging(verbose)
    from_stdin = filepath == "-"
    search_path = Path.cwd() if from_stdin else Path(filepath).resolve().parent

    try:
        config = build_config(
            search_path,
            man_dir=man_dir,
            title=title,
            description=description,
            section=section,
            buffer_capacity=buffer_capacity,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    if buffer_capacity is None:
        try:
            config = apply_overrides(
                config, buffer_capacity=get_buffer_capacity(default=config.buffer_capacity)
            )
        except ValueError as error:
            raise click.ClickException(str(error)) from error

    try:
        with click.open_file(output, "w", encoding="UTF-8") as main:
            if from_stdin:
                with click.open_file(filepath, encoding="UTF-8") as source:
                    content = source.read()
                convert_document(content, main, config)
            else:
                convert_file(Path(filepath), main, config)
    except (ConvertFileError, ManifyError, IOError, UnicodeDecodeError) as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
