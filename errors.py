"""
Error taxonomy for metric collection.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class FetchErrorKind(str, Enum):
    TRANSPORT = "transport"
    STATUS = "status"
    DECODE = "decode"
    TYPE_MISMATCH = "type-mismatch"


class CollectorError(Exception):
    """Base class for every error raised while collecting a batch."""


class ResolutionError(CollectorError):
    """Address string could not be parsed into an endpoint."""

    def __init__(self, address: str, reason: Any) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Unable to parse address '{address}': {reason}")


class FetchError(CollectorError):
    """A single endpoint failed to produce a valid snapshot."""

    def __init__(self, endpoint: Any, kind: FetchErrorKind, cause: Any) -> None:
        self.endpoint = endpoint
        self.kind = kind
        self.cause = cause
        super().__init__(f"{kind.value} error from {endpoint}: {cause}")
