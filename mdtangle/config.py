"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

@dataclass
class TangleConfig:
    """Configuration for tangling literate Markdown documents.

    Attributes:
        execute: Run ``> Run`` blocks and write files; when False, only preview.
        scissor_dashes: Number of dashes on each side of a scissor marker.
        strict_quotes: Reject quoted lines outside any file or run context.
        shell: Shell executable for run blocks; None uses the platform default.
        preview_indent: Prefix for each command line rendered in preview mode.
        max_file_size: Maximum document size in bytes that will be processed.

    Examples:
        TangleConfig(execute=False, scissor_dashes=8)
    """

    # Modes
    execute: bool = True
    strict_quotes: bool = True

    # Grammar
    scissor_dashes: int = 10

    # Run blocks
    shell: str | None = None
    preview_indent: str = "    "

    # Limits
    max_file_size: int = 10 * 1024 * 1024


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`scissor_dashes` must be a positive integer")
    """


def load_config(search_path: Path) -> TangleConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.mdtangle]`` table from `pyproject.toml` and the ``[mdtangle]``
    or ``[tool.mdtangle]`` table from `.mdtangle.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        TangleConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "mdtangle")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".mdtangle.toml",
            table_paths=[("mdtangle",), ("tool", "mdtangle")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return TangleConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> TangleConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
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
) -> TangleConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        return TangleConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: TangleConfig) -> None:
    """Validate a `TangleConfig` instance.

    Raises:
        ConfigError: If flags are not booleans, numeric limits are not positive
            integers, or string settings have the wrong type.

    Examples:
        validate_config(TangleConfig(scissor_dashes=4))
    """
    for key in ("execute", "strict_quotes"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    _ensure_integers(
        {
            "scissor_dashes": config.scissor_dashes,
            "max_file_size": config.max_file_size,
        }
    )
    _ensure_positive(
        {
            "scissor_dashes": config.scissor_dashes,
            "max_file_size": config.max_file_size,
        }
    )

    if not isinstance(config.preview_indent, str):
        raise ConfigError("`preview_indent` must be a string")
    if config.shell is not None and (not isinstance(config.shell, str) or not config.shell):
        raise ConfigError("`shell` must be a non-empty string")


def apply_overrides(config: TangleConfig, **overrides: object) -> TangleConfig:
    """Apply override values to a `TangleConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TangleConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TangleConfig`.

    Examples:
        updated = apply_overrides(config, execute=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TangleConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), execute=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
