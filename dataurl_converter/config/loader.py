"""Configuration loader.

Loads configuration from a JSON5 file and environment variables:
- JSON5 parsing (comments, trailing commas, unquoted keys)
- ${ENV_VAR} substitution inside string values
- DATAURL_CONVERTER_* environment overrides
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import json5

from .config import ConverterConfig

logger = logging.getLogger(__name__)

_cached_config: Optional[ConverterConfig] = None

ENV_PREFIX = "DATAURL_CONVERTER_"

# Environment variable -> config field
ENV_OVERRIDES = {
    f"{ENV_PREFIX}FFMPEG": "ffmpeg_binary",
    f"{ENV_PREFIX}AUDIO_QUALITY": "audio_quality",
    f"{ENV_PREFIX}JPEG_QUALITY": "jpeg_quality",
    f"{ENV_PREFIX}LOG_LEVEL": "log_level",
}

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively replace ${VAR} with os.environ values (unresolved tokens stay as-is)."""
    if isinstance(obj, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), obj)
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(v) for v in obj]
    return obj


def _env_overrides() -> dict[str, Any]:
    overrides = {}
    for var, key in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            overrides[key] = value
    return overrides


def _resolve_config_path(config_path: Optional[str | Path]) -> Optional[Path]:
    if config_path:
        return Path(config_path)

    for candidate in get_config_candidates():
        if candidate.exists():
            return candidate
    return None


def get_config_candidates() -> list[Path]:
    return [
        Path.cwd() / "dataurl-converter.json",
        Path.cwd() / "dataurl-converter.json5",
        Path.home() / ".dataurl-converter" / "config.json",
        Path.home() / ".dataurl-converter" / "config.json5",
    ]


def load_config_raw(path: Path) -> dict[str, Any]:
    """Load a config file with JSON5 parsing and env-var substitution."""
    obj = json5.loads(path.read_text(encoding="utf-8"))
    obj = _substitute_env_vars(obj)
    return obj if isinstance(obj, dict) else {}


def load_config(config_path: Optional[str | Path] = None) -> ConverterConfig:
    """Load converter configuration.

    File values override defaults; DATAURL_CONVERTER_* variables override
    file values. A broken file is logged and skipped.

    Args:
        config_path: Optional path to config file.  Supports JSON5.

    Returns:
        ConverterConfig
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    config_dict: dict[str, Any] = {}
    path = _resolve_config_path(config_path)

    if path and path.exists():
        try:
            config_dict = load_config_raw(path)
            logger.debug(f"Loaded config from {path}")
        except (OSError, ValueError) as exc:
            logger.warning(f"Failed to load config from {path}: {exc}")
    elif config_path:
        logger.warning(f"Config file not found: {path}, using defaults")

    config_dict.update(_env_overrides())

    try:
        config_obj = ConverterConfig.from_dict(config_dict)
    except (TypeError, ValueError) as exc:
        logger.warning(f"Failed to parse config: {exc}")
        config_obj = ConverterConfig()

    _cached_config = config_obj
    return config_obj


def invalidate_config_cache() -> None:
    """Invalidate the in-process config cache so the next load_config() re-reads disk."""
    global _cached_config
    _cached_config = None
