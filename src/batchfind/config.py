"""
TOML-based config file loading for batchfind.

Searches for `.batchfind.toml`, `batchfind.toml`, or `pyproject.toml [tool.batchfind]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

logger = logging.getLogger(__name__)


@dataclass
class BatchfindConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    allowing the merge logic to distinguish "not configured" from "explicitly set
    to default value".
    """

    # Patterns
    include: str | None = None
    exclude: str | None = None
    sort_names: bool | None = None
    # Directory resolver
    suffixes: list[str] | None = None
    respect_gitignore: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".batchfind.toml", "batchfind.toml", "pyproject.toml"]

# Mapping from TOML kebab-case keys to Python snake_case field names
_KEBAB_TO_SNAKE: dict[str, str] = {
    "sort-names": "sort_names",
    "respect-gitignore": "respect_gitignore",
}

_VALID_FIELDS = {f.name for f in fields(BatchfindConfig)}


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in cast(list[Any], value))


# Expected value shape per field; values of any other shape are skipped with a warning.
_FIELD_CHECKS: dict[str, tuple[str, Callable[[Any], bool]]] = {
    "include": ("a string", lambda v: isinstance(v, str)),
    "exclude": ("a string", lambda v: isinstance(v, str)),
    "sort_names": ("a boolean", lambda v: isinstance(v, bool)),
    "suffixes": ("a list of strings", _is_str_list),
    "respect_gitignore": ("a boolean", lambda v: isinstance(v, bool)),
}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.batchfind.toml` >
    `batchfind.toml` > `pyproject.toml` (only if it has `[tool.batchfind]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_batchfind_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_batchfind_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "batchfind" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> BatchfindConfig:
    """
    Load a `BatchfindConfig` from a TOML file, either a standalone
    `batchfind.toml` / `.batchfind.toml` or the `[tool.batchfind]` table of a
    `pyproject.toml`.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        logger.warning("Ignoring malformed config file %s: %s", config_path, e)
        return BatchfindConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("batchfind", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> BatchfindConfig:
    """Parse a flat or sectioned TOML dict into BatchfindConfig."""
    # Flatten sections: [patterns] and [directories] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = _KEBAB_TO_SNAKE.get(key, key.replace("-", "_"))
        if snake_key not in _VALID_FIELDS:
            logger.warning("Ignoring unrecognized config key: %s", key)
            continue
        expected, check = _FIELD_CHECKS[snake_key]
        if not check(value):
            logger.warning("Ignoring config key %s: expected %s, got %r", key, expected, value)
            continue
        mapped[snake_key] = value

    return BatchfindConfig(**mapped)


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: BatchfindConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(BatchfindConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None:
            continue  # Not set in config

        if cfg_field.name in explicit_flags:
            continue

        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
