"""
Base collector interface: all metric collectors implement this.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CollectorResult:
    """Result from a single collector: success flag, optional error, and data dict."""
    success: bool = True
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "error": self.error, "data": dict(self.data)}


class BaseCollector(ABC):
    """Abstract base for all metric collectors."""

    name: str = "base"
    description: str = ""
    sample_config: str = ""

    @abstractmethod
    def collect(self) -> CollectorResult:
        """Run collection and return result. May raise; use collect_safe() for a non-raising call."""
        ...

    def collect_safe(self) -> CollectorResult:
        """Wrapper that catches exceptions and returns failed result."""
        try:
            return self.collect()
        except Exception as e:
            return CollectorResult(success=False, error=str(e), data={})
