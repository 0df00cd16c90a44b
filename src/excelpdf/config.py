from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from .model import ConvertOptions

CONFIG_FILE = Path("excelpdf.yml")

LOGGING_DEFAULTS: dict[str, Any] = {
    "level": "INFO",
    "console": True,
    "file": {
        "enabled": False,
        "path": "logs/excelpdf_{time:YYYYMMDDHHmmss}.log",
        "rotation": "10 MB",
        "retention": "10 days",
    },
}


def load_config(path: str | Path = CONFIG_FILE) -> dict[str, Any]:
    """Read a YAML configuration file; a missing or unreadable file yields an empty mapping."""
    path = Path(path)
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to load configuration from {}: {}", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring configuration in {}: top level is not a mapping", path)
        return {}
    return data


def load_options(path: str | Path = CONFIG_FILE) -> ConvertOptions:
    section = load_config(path).get("conversion") or {}
    return ConvertOptions.from_dict(section)


def get_logging_config(path: str | Path = CONFIG_FILE) -> dict[str, Any]:
    section = load_config(path).get("logging") or {}
    return _merge_dict(LOGGING_DEFAULTS, section)


def _merge_dict(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    merged = base.copy()
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dict(merged[key], value)
        else:
            merged[key] = value
    return merged
