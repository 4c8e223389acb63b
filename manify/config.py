"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib


@dataclass
class ManifyConfig:
    """Configuration for converting the library manual into manual pages.

    Attributes:
        title: Library name used for the overview page (upper-cased in `.TH`).
        description: One-line summary following the title in `.SH NAME`.
        symbol_description: Summary used in the `.SH NAME` line of each
            function/macro page.
        section: Manual section number of every generated page.
        man_dir: Directory receiving per-symbol pages; defaults to
            ``man<section>`` when left unset.
        example_indent: Column at which example blocks are re-indented.
        buffer_capacity: Maximum number of characters a single construct
            (list item, quote, table, example) may occupy.

    Examples:
        ManifyConfig(title="bstrlib", section=3, buffer_capacity=10_000)
    """

    # Page naming
    title: str = "bstrlib"
    description: str = "the better string library"
    symbol_description: str = "bstrlib function"
    section: int = 3

    # Output layout
    man_dir: str | None = None
    example_indent: int = 4

    # Limits
    buffer_capacity: int = 5000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`section` must be between 1 and 9")
    """


# Files consulted in each directory, in priority order, with the tables that
# may hold manify settings.
CONFIG_FILES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "manify"),)),
    (".manify.toml", (("manify",), ("tool", "manify"))),
)


def load_config(search_path: Path) -> ManifyConfig:
    """Load configuration from the nearest config file.

    Looks in `search_path` and then each parent directory for the files listed
    in `CONFIG_FILES`; the first one holding a manify table wins, even an
    empty one. TOML files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory where the lookup starts.

    Returns:
        ManifyConfig: Settings from the file found, or the defaults.

    Raises:
        ConfigError: If a manify table is present but is not a mapping or
            contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_FILES:
            config = _load_from_file(directory / filename, table_paths)
            if config is not None:
                return config

    return ManifyConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> ManifyConfig | None:
    if not config_file.is_file():
        return None

    try:
        data = tomllib.loads(config_file.read_text(encoding="UTF-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ManifyConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        return ManifyConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: ManifyConfig) -> ManifyConfig:
    """Fill in values derived from other settings (the manual directory)."""
    if config.man_dir is not None:
        return config
    return replace(config, man_dir=f"man{config.section}")


def validate_config(config: ManifyConfig) -> None:
    """Validate a `ManifyConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If a text field is empty, a numeric field is not an
            integer, the section is outside 1-9, the example indent is
            negative or the buffer capacity is not positive.

    Examples:
        validate_config(ManifyConfig(section=7))
    """
    config = normalize_config(config)

    _ensure_integers(
        {
            "section": config.section,
            "example_indent": config.example_indent,
            "buffer_capacity": config.buffer_capacity,
        }
    )
    _ensure_non_empty(
        {
            "title": config.title,
            "description": config.description,
            "symbol_description": config.symbol_description,
            "man_dir": config.man_dir,
        }
    )

    if not 1 <= config.section <= 9:
        raise ConfigError("`section` must be between 1 and 9")
    if config.example_indent < 0:
        raise ConfigError("`example_indent` must not be negative")
    if config.buffer_capacity <= 0:
        raise ConfigError("`buffer_capacity` must be a positive integer")


def apply_overrides(config: ManifyConfig, **overrides: object) -> ManifyConfig:
    """Apply override values to a `ManifyConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        ManifyConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `ManifyConfig`.

    Examples:
        updated = apply_overrides(config, title="bstraux", section=3)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ManifyConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        ManifyConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), man_dir="out/man3")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_non_empty(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, str) or not value:
            raise ConfigError(f"`{key}` must be a non-empty string")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
