"""
Metric sink: thread-safe accumulator that collection workers append to.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Protocol

from models import MetricSample, TagSet
from utils import get_logger

logger = get_logger(__name__)


class MetricsSink(Protocol):
    """Anything collection workers can report samples to. Must be thread-safe."""

    def append(self, name: str, value: float, tags: TagSet) -> None:
        ...


class MetricsAccumulator:
    """Bounded, lock-protected buffer of metric samples."""

    def __init__(self, max_points: int = 100000) -> None:
        self.max_points = max_points
        self._buffer: list[MetricSample] = []
        self._lock = threading.Lock()
        self._dropped = 0

    def append(self, name: str, value: float, tags: TagSet) -> None:
        sample = MetricSample(name=name, value=float(value), tags=dict(tags), timestamp=time.time())
        with self._lock:
            self._buffer.append(sample)
            overflow = len(self._buffer) - self.max_points
            if overflow > 0:
                del self._buffer[:overflow]
                self._dropped += overflow
                logger.debug("Accumulator full, dropped %d oldest samples", overflow)

    def samples(self) -> list[MetricSample]:
        with self._lock:
            return list(self._buffer)

    def drain(self) -> list[MetricSample]:
        """Return all samples and empty the buffer."""
        with self._lock:
            out = self._buffer
            self._buffer = []
            return out

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    @property
    def dropped(self) -> int:
        return self._dropped

    def to_dicts(self) -> list[dict[str, Any]]:
        return [s.to_dict() for s in self.samples()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
