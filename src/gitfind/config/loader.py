#
# config/loader.py
#
"""
Loads the optional TOML config file into GitFindConfig.

Each table maps onto one attrs field of GitFindConfig, named by the
field's `toml_name` metadata (or the field name), and the keys allowed in
a table are the fields of that model.
"""

import tomllib
from pathlib import Path
from typing import Any

import structlog
from attrs import Attribute, fields, fields_dict

from gitfind.config.models import GitFindConfig
from gitfind.exceptions import ConfigurationError

log = structlog.get_logger("config.loader")

DEFAULT_CONFIG_PATH = Path("~/.config/git-find/config.toml")

# Fields of GitFindConfig that are not read from a table.
_NON_TABLE_FIELDS = frozenset({"source"})
_STRING_LIST_KEYS = ("include", "exclude")


def _table_fields() -> dict[str, Attribute]:
    """Maps each TOML table name to the GitFindConfig field it fills."""
    return {
        f.metadata.get("toml_name", f.name): f
        for f in fields(GitFindConfig)
        if f.name not in _NON_TABLE_FIELDS
    }


def _check_keys(table: dict[str, Any], allowed: set[str], section: str, path: Path) -> None:
    unknown = sorted(set(table) - allowed)
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in [{section}]: {', '.join(unknown)}", path=str(path)
        )


def _as_table(value: Any, section: str, path: Path) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigurationError(f"[{section}] must be a table", path=str(path))
    return value


def default_config_path() -> Path | None:
    """Returns the per-user config file if it exists."""
    candidate = DEFAULT_CONFIG_PATH.expanduser()
    return candidate if candidate.is_file() else None


def load_config(path: Path) -> GitFindConfig:
    """
    Reads and validates a git-find config file.

    Raises:
        ConfigurationError: the file is unreadable, is not valid TOML, or
            holds unknown keys or bad values.
    """
    cfg_log = log.bind(path=str(path))
    cfg_log.debug("Loading config file")
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file: {e}", path=str(path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML: {e}", path=str(path)) from e

    tables = _table_fields()
    _check_keys(data, set(tables), "top level", path)

    kwargs: dict[str, Any] = {}
    try:
        for section, attribute in tables.items():
            table = _as_table(data.get(section, {}), section, path)
            _check_keys(table, set(fields_dict(attribute.type)), section, path)
            for key in _STRING_LIST_KEYS:
                value = table.get(key, [])
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigurationError(
                        f"[{section}] {key} must be a list of strings", path=str(path)
                    )
            kwargs[attribute.name] = attribute.type(**table)
        config = GitFindConfig(**kwargs, source=path)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value: {e}", path=str(path)) from e

    cfg_log.debug("Config file loaded", tables=sorted(data))
    return config


# 🔼⚙️
