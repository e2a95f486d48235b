"""Project config (.prealloc/config.json): analysis switches and exclusions."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from prealloc.errors import ConfigError
from prealloc.file_discovery import get_project_root

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


CONFIG_SCHEMA: dict[str, ConfigKey] = {
    "simple": ConfigKey(
        bool,
        True,
        "Report only on functions whose loops have no return/break/continue/goto",
    ),
    "rangeloops": ConfigKey(bool, True, "Report preallocation suggestions on range loops"),
    "forloops": ConfigKey(bool, False, "Report preallocation suggestions on for loops"),
    "set_exit_status": ConfigKey(
        bool, False, "Exit with status 1 if any suggestions are found"
    ),
    "exclude": ConfigKey(list, [], "Path patterns to exclude from scanning"),
    "format": ConfigKey(str, "text", "Output format (text or json)"),
}


def config_path() -> Path:
    return get_project_root() / ".prealloc" / "config.json"


def default_config() -> dict[str, Any]:
    """Return a config dict with all keys set to their defaults."""
    return {k: copy.deepcopy(v.default) for k, v in CONFIG_SCHEMA.items()}


def _coerce_value(key: str, value: object, schema: ConfigKey, source: Path) -> object:
    if schema.type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
    elif schema.type is list:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
    elif schema.type is str and isinstance(value, str):
        if key == "format" and value not in OUTPUT_FORMATS:
            raise ConfigError(
                f"{source}: format must be one of {', '.join(OUTPUT_FORMATS)}, got {value!r}"
            )
        return value
    raise ConfigError(
        f"{source}: {key} expects {schema.type.__name__}, got {type(value).__name__}"
    )


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from disk, filling missing keys with defaults.

    A missing file yields the defaults; anything present must be valid.
    """
    p = path or config_path()
    if not p.exists():
        logger.debug("no config at %s, using defaults", p)
        return default_config()
    try:
        raw = json.loads(p.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        raise ConfigError(f"{p}: could not read config ({exc})") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{p}: config must be a JSON object")

    config = default_config()
    for key, value in raw.items():
        schema = CONFIG_SCHEMA.get(key)
        if schema is None:
            raise ConfigError(f"{p}: unknown config key {key!r}")
        config[key] = _coerce_value(key, value, schema, p)
    return config


__all__ = [
    "CONFIG_SCHEMA",
    "OUTPUT_FORMATS",
    "ConfigKey",
    "config_path",
    "default_config",
    "load_config",
]
