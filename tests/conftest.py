from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import config
from collectors.snapshot import FetcherConfig, SnapshotFetcher

Handler = Callable[[httpx.Request], httpx.Response]


def _json_response(payload: object, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


@pytest.fixture()
def json_response():
    """Factory for JSON responses served from MockTransport handlers."""
    return _json_response


@pytest.fixture()
def make_fetcher():
    """Build fetchers backed by httpx.MockTransport; clients closed at teardown."""
    clients: list[httpx.Client] = []

    def factory(handler: Handler, timeout_sec: float = 3.0) -> SnapshotFetcher:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return SnapshotFetcher(FetcherConfig(timeout_sec=timeout_sec), client=client)

    yield factory
    for client in clients:
        client.close()


@pytest.fixture()
def clean_config(monkeypatch: pytest.MonkeyPatch):
    for key in ("MMC_URLS", "MMC_TIMEOUT_SEC", "MMC_API_PORT", "MMC_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    config.reset()
    yield config
    monkeypatch.undo()
    config.reset()
