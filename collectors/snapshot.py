"""
Snapshot fetcher: one-shot HTTP GET of an endpoint's JSON metrics snapshot.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from errors import FetchError, FetchErrorKind
from models import EndpointDescriptor, MetricSnapshot
from utils import get_logger

logger = get_logger(__name__)

DEFAULT_METRICS_PATH = "/metrics/snapshot"
DEFAULT_TIMEOUT_SEC = 3.0


@dataclass(frozen=True)
class FetcherConfig:
    """HTTP settings shared by every fetch; timeout applies per request."""
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    metrics_path: str = DEFAULT_METRICS_PATH

    def build_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout_sec))


def _reject_constant(token: str) -> float:
    raise ValueError(f"non-standard JSON constant {token}")


def decode_snapshot(body: bytes, endpoint: Any = "") -> MetricSnapshot:
    """Decode a JSON object of name -> number. Raises FetchError (decode / type-mismatch)."""
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise FetchError(endpoint, FetchErrorKind.DECODE, e) from e
    if not isinstance(data, dict):
        raise FetchError(endpoint, FetchErrorKind.DECODE, f"expected JSON object, got {type(data).__name__}")

    snapshot: MetricSnapshot = {}
    for name, value in data.items():
        # bool is an int subclass but JSON true/false is not a metric value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise FetchError(
                endpoint,
                FetchErrorKind.TYPE_MISMATCH,
                f"metric {name!r} has non-numeric value {value!r}",
            )
        try:
            snapshot[name] = float(value)
        except OverflowError as e:
            raise FetchError(endpoint, FetchErrorKind.TYPE_MISMATCH, f"metric {name!r}: {e}") from e
    return snapshot


class SnapshotFetcher:
    """Fetches metric snapshots over a single shared httpx client (thread-safe)."""

    def __init__(self, config: FetcherConfig | None = None, client: httpx.Client | None = None) -> None:
        self.config = config or FetcherConfig()
        self._owns_client = client is None
        self.client = client if client is not None else self.config.build_client()

    def url_for(self, endpoint: EndpointDescriptor) -> str:
        path = self.config.metrics_path
        if not path.startswith("/"):
            path = "/" + path
        return endpoint.base_url + path

    def fetch(self, endpoint: EndpointDescriptor) -> MetricSnapshot:
        url = self.url_for(endpoint)
        logger.debug("GET %s", url)
        try:
            with self.client.stream("GET", url, timeout=self.config.timeout_sec) as response:
                if not response.is_success:
                    raise FetchError(
                        endpoint,
                        FetchErrorKind.STATUS,
                        f"unexpected HTTP status {response.status_code} {response.reason_phrase}",
                    )
                body = response.read()
        except httpx.HTTPError as e:
            raise FetchError(endpoint, FetchErrorKind.TRANSPORT, f"unable to make HTTP request {url}: {e!r}") from e
        except httpx.InvalidURL as e:
            raise FetchError(endpoint, FetchErrorKind.TRANSPORT, f"invalid request URL {url}: {e}") from e
        return decode_snapshot(body, endpoint)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "SnapshotFetcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
