"""Configuration management for blockcopy."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_DIR = Path("~/.config/blockcopy").expanduser()
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

DEFAULT_FORMAT = "markdown"
DEFAULT_MAX_DEPTH = 10
UNBOUNDED_DEPTH = "unbounded"
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_KNOWN_KEYS = frozenset(
    {"format", "include_children", "include_properties", "max_depth", "log_level"}
)

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Base error for configuration related issues."""


class MissingConfigError(ConfigError):
    """Raised when the configuration file cannot be found."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Configuration file not found at {path}")
        self.path = path


class InvalidConfigError(ConfigError):
    """Raised when the configuration file holds malformed values."""


@dataclass(slots=True)
class BlockcopyConfig:
    """In-memory representation of the blockcopy configuration file."""

    format: str = DEFAULT_FORMAT
    include_children: bool = True
    include_properties: bool = False
    max_depth: int | None = DEFAULT_MAX_DEPTH
    log_level: str = DEFAULT_LOG_LEVEL
    plugins: dict[str, dict[str, Any]] = field(default_factory=dict)
    source_path: Path | None = None


def load_config(path: Path | None = None) -> BlockcopyConfig:
    """Load configuration from ``path`` or the default location.

    Parameters
    ----------
    path:
        Optional location of the configuration file. When ``None`` the default
        path (``~/.config/blockcopy/config.toml``) is used, and a missing file
        yields the built-in defaults.

    Raises
    ------
    MissingConfigError
        If an explicitly requested file cannot be found.
    InvalidConfigError
        If settings are malformed.
    """

    if path is None:
        config_path = DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return BlockcopyConfig()
    else:
        config_path = path.expanduser()
        if not config_path.exists():
            raise MissingConfigError(config_path)

    try:
        with config_path.open("rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidConfigError(f"Invalid TOML in {config_path}: {exc}") from exc

    section = raw.get("blockcopy", {})
    if not isinstance(section, dict):
        raise InvalidConfigError("'blockcopy' section must be a table")

    for key in section:
        if key not in _KNOWN_KEYS:
            logger.warning("Ignoring unknown configuration key '%s'", key)

    export_format = section.get("format", DEFAULT_FORMAT)
    if not isinstance(export_format, str) or not export_format.strip():
        raise InvalidConfigError("'format' must be a non-empty string")

    include_children = _read_bool(section, "include_children", True)
    include_properties = _read_bool(section, "include_properties", False)

    max_depth: int | None = DEFAULT_MAX_DEPTH
    if "max_depth" in section:
        max_depth_raw = section["max_depth"]
        if max_depth_raw == UNBOUNDED_DEPTH:
            max_depth = None
        # booleans are ints in Python, reject them explicitly
        elif isinstance(max_depth_raw, bool) or not isinstance(max_depth_raw, int):
            raise InvalidConfigError(
                f"'max_depth' must be an integer or \"{UNBOUNDED_DEPTH}\""
            )
        else:
            max_depth = max_depth_raw

    log_level_raw = section.get("log_level", DEFAULT_LOG_LEVEL)
    if not isinstance(log_level_raw, str) or log_level_raw.upper() not in _LOG_LEVELS:
        raise InvalidConfigError(
            f"'log_level' must be one of: {', '.join(_LOG_LEVELS)}"
        )

    plugins_section = raw.get("plugins")
    plugins: dict[str, dict[str, Any]] = {}
    if isinstance(plugins_section, dict):
        for key, value in plugins_section.items():
            if isinstance(value, dict):
                plugins[key] = dict(value)
            else:
                plugins[key] = {}

    return BlockcopyConfig(
        format=export_format.strip().lower(),
        include_children=include_children,
        include_properties=include_properties,
        max_depth=max_depth,
        log_level=log_level_raw.upper(),
        plugins=plugins,
        source_path=config_path,
    )


def _read_bool(section: dict[str, Any], key: str, default: bool) -> bool:
    value = section.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfigError(f"'{key}' must be a boolean")
    return value


def bootstrap_config_file(path: Path) -> bool:
    """Create a default config file if missing.

    Returns True when the file was created, False if it already existed.
    """

    if path.exists():
        return False

    config_dir = path.parent
    config_dir.mkdir(parents=True, exist_ok=True)
    default_content = (
        "[blockcopy]\n"
        f'format = "{DEFAULT_FORMAT}"\n'
        "include_children = true\n"
        "include_properties = false\n"
        f"max_depth = {DEFAULT_MAX_DEPTH}\n"
        f'log_level = "{DEFAULT_LOG_LEVEL}"\n'
    )
    path.write_text(default_content, encoding="utf-8")
    return True
