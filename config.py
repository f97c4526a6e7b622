"""
Central configuration for the Mesos metrics collector.
Supports defaults, optional config file (YAML), and environment overrides.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from utils import env_float, env_int, env_list, env_str, get_logger

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULTS: dict[str, Any] = {
    "mesos": {
        "urls": ["http://localhost:5050", "http://localhost:5051"],
        "timeout_sec": 3.0,
        "metrics_path": "/metrics/snapshot",
    },
    "api": {
        "host": "0.0.0.0",
        "port": 8765,
        "cache_ttl_sec": 2.0,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}

# -----------------------------------------------------------------------------
# Config file loading (optional YAML)
# -----------------------------------------------------------------------------

_config_overrides: dict[str, Any] = {}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config_file(path: str | Path | None = None) -> bool:
    """Load optional YAML config. Returns True if loaded."""
    if path is None:
        for p in (
            Path(os.getcwd()) / "config.yaml",
            Path(os.getcwd()) / "config.yml",
            Path(__file__).parent / "config.yaml",
            Path.home() / ".mesos_metrics" / "config.yaml",
        ):
            if p.exists():
                path = p
                break
    if path is None:
        return False
    path = Path(path)
    if not path.exists():
        return False
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
        return False
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return False
    global _config_overrides
    _config_overrides = _deep_merge(_config_overrides, data)
    _apply_env()
    return True


def reset() -> None:
    """Drop file overrides, keeping only defaults and environment."""
    global _config_overrides
    _config_overrides = {}
    _apply_env()


def get(key_path: str, default: Any = None) -> Any:
    """Get config value by dot path, e.g. 'mesos.timeout_sec'."""
    merged: Any = _deep_merge(DEFAULTS, _config_overrides)
    for k in key_path.split("."):
        if isinstance(merged, dict) and k in merged:
            merged = merged[k]
        else:
            return default
    return merged


# -----------------------------------------------------------------------------
# Environment overrides (take precedence over file)
# -----------------------------------------------------------------------------

def _env_overrides() -> dict[str, Any]:
    return {
        "mesos.urls": env_list("MMC_URLS"),
        "mesos.timeout_sec": env_float("MMC_TIMEOUT_SEC", 0),
        "api.port": env_int("MMC_API_PORT", 0),
        "logging.level": env_str("MMC_LOG_LEVEL"),
    }


def _apply_env() -> None:
    for path, value in _env_overrides().items():
        if not value:
            continue
        keys = path.split(".")
        d = _config_overrides
        for k in keys[:-1]:
            if not isinstance(d.get(k), dict):
                d[k] = {}
            d = d[k]
        d[keys[-1]] = value


# Apply env on import
_apply_env()

# -----------------------------------------------------------------------------
# Convenience constants for running api.py directly (values at import time)
# -----------------------------------------------------------------------------

API_HOST = str(get("api.host", "0.0.0.0"))
API_PORT = int(get("api.port", 8765))
