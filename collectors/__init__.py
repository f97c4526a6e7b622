"""
Collectors package: pluggable metric sources.
"""
from __future__ import annotations

from typing import Any, Callable

from collectors.base import BaseCollector, CollectorResult
from collectors.endpoint import build_tags, resolve
from collectors.mesos_collector import MesosCollector, collect_batch
from collectors.snapshot import FetcherConfig, SnapshotFetcher, decode_snapshot

REGISTRY: dict[str, Callable[..., BaseCollector]] = {
    MesosCollector.name: MesosCollector,
}


def get_collector(name: str, **kwargs: Any) -> BaseCollector:
    """Instantiate a registered collector by name."""
    try:
        factory = REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown collector {name!r}; available: {', '.join(sorted(REGISTRY))}") from None
    return factory(**kwargs)


__all__ = [
    "BaseCollector",
    "CollectorResult",
    "FetcherConfig",
    "MesosCollector",
    "REGISTRY",
    "SnapshotFetcher",
    "build_tags",
    "collect_batch",
    "decode_snapshot",
    "get_collector",
    "resolve",
]
