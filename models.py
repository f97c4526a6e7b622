"""
Data models for the Mesos metrics collector: endpoint descriptors, metric
samples and batch outcomes.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

TagSet = dict[str, str]
MetricSnapshot = dict[str, float]

DEFAULT_PORTS = {"http": "80", "https": "443"}


def default_port(scheme: str) -> str:
    """Port implied by scheme, or "" for schemes without a well-known port."""
    return DEFAULT_PORTS.get(scheme.lower(), "")


@dataclass(frozen=True)
class EndpointDescriptor:
    """One resolved service address."""
    scheme: str
    host: str
    port: str
    address: str = ""

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port:
            return f"{self.scheme}://{host}:{self.port}"
        return f"{self.scheme}://{host}"

    def __str__(self) -> str:
        return self.address or self.base_url

    def to_dict(self) -> dict[str, Any]:
        return {
            "scheme": self.scheme,
            "host": self.host,
            "port": self.port,
            "address": self.address,
        }


@dataclass
class MetricSample:
    """Single metric value reported to the accumulator."""
    name: str
    value: float
    tags: TagSet = field(default_factory=dict)
    timestamp: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "tags": dict(self.tags),
            "timestamp": self.timestamp,
        }


@dataclass
class BatchResult:
    """Outcome of one successful collection cycle."""
    endpoints: int = 0
    succeeded: int = 0
    duration_sec: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "endpoints": self.endpoints,
            "succeeded": self.succeeded,
            "duration_sec": self.duration_sec,
        }
