"""
Shared utilities: logging, hostname lookup, metric name normalization, env helpers.
"""
from __future__ import annotations

import logging
import os
import platform
from pathlib import Path

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str | int = "INFO",
    log_file: str | Path | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = LOG_DATE_FORMAT,
) -> None:
    """Configure root logger and optional file handler."""
    log_level = getattr(logging, level.upper(), logging.INFO) if isinstance(level, str) else level
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    logging.basicConfig(
        level=log_level,
        format=format_string,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# -----------------------------------------------------------------------------
# Host identity and metric names
# -----------------------------------------------------------------------------

UNKNOWN_HOST = "unknown"


def local_hostname() -> str:
    """Name of the reporting host ("" when the platform cannot tell)."""
    return platform.node()


def normalize_metric_name(name: str) -> str:
    """Mesos keys look like "master/cpus_used"; flatten path separators."""
    return name.replace("/", "_")


# -----------------------------------------------------------------------------
# Config / env helpers
# -----------------------------------------------------------------------------

def env_int(key: str, default: int = 0) -> int:
    try:
        return int(os.environ.get(key, default))
    except ValueError:
        return default


def env_float(key: str, default: float = 0.0) -> float:
    try:
        return float(os.environ.get(key, default))
    except ValueError:
        return default


def env_str(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def env_list(key: str, default: list[str] | None = None) -> list[str]:
    """Comma-separated env value as a list; empty items dropped."""
    raw = os.environ.get(key, "")
    items = [part.strip() for part in raw.split(",") if part.strip()]
    return items or list(default or [])
