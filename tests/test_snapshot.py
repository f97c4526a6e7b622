"""Tests for the snapshot fetcher."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from collectors.endpoint import resolve
from collectors.snapshot import FetcherConfig, SnapshotFetcher, decode_snapshot
from errors import FetchError, FetchErrorKind


class TrackingStream(httpx.SyncByteStream):
    def __init__(self, body: bytes) -> None:
        self.body = body
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield self.body

    def close(self) -> None:
        self.closed = True


def test_decode_snapshot_lossless() -> None:
    payload = {"master/cpus_used": 1, "master/mem_percent": 0.25, "uptime": 12345.5, "neg": -3, "zero": 0}
    snapshot = decode_snapshot(httpx.Response(200, json=payload).content)
    assert snapshot == {k: float(v) for k, v in payload.items()}
    assert all(isinstance(v, float) for v in snapshot.values())


def test_decode_snapshot_empty_object() -> None:
    assert decode_snapshot(b"{}") == {}


@pytest.mark.parametrize("value", ["12", True, None, {"a": 1}, [1, 2]])
def test_decode_snapshot_type_mismatch(value: object) -> None:
    body = httpx.Response(200, json={"ok": 1, "bad": value}).content
    with pytest.raises(FetchError) as info:
        decode_snapshot(body, "http://h:1")
    assert info.value.kind is FetchErrorKind.TYPE_MISMATCH
    assert "bad" in str(info.value)


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"[1, 2, 3]",
        b"42",
        b"",
        b'{"x": NaN}',
        b'{"x": Infinity}',
        b'{"x": -Infinity}',
    ],
)
def test_decode_snapshot_decode_error(body: bytes) -> None:
    with pytest.raises(FetchError) as info:
        decode_snapshot(body, "http://h:1")
    assert info.value.kind is FetchErrorKind.DECODE


def test_decode_snapshot_deeply_nested_body() -> None:
    body = b"[" * 200000 + b"]" * 200000
    with pytest.raises(FetchError) as info:
        decode_snapshot(body, "http://h:1")
    assert info.value.kind is FetchErrorKind.DECODE
    assert isinstance(info.value.__cause__, RecursionError)


def test_fetch_requests_snapshot_path(make_fetcher, json_response) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return json_response({"master/uptime_secs": 10})

    fetcher = make_fetcher(handler)
    assert fetcher.fetch(resolve("http://localhost:5050")) == {"master/uptime_secs": 10.0}
    assert seen == ["http://localhost:5050/metrics/snapshot"]


def test_fetch_custom_path(json_response) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return json_response({})

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with SnapshotFetcher(FetcherConfig(metrics_path="stats.json"), client=client) as fetcher:
        fetcher.fetch(resolve("https://example.com"))
    assert seen == ["/stats.json"]
    # injected client belongs to the caller
    assert not client.is_closed
    client.close()


def test_owned_client_closed() -> None:
    fetcher = SnapshotFetcher(FetcherConfig(timeout_sec=1.5))
    assert fetcher.client.timeout.read == 1.5
    fetcher.close()
    assert fetcher.client.is_closed


@pytest.mark.parametrize("status", [404, 500, 503])
def test_fetch_non_2xx_is_status_error(make_fetcher, status: int) -> None:
    stream = TrackingStream(b'{"a": 1}')
    fetcher = make_fetcher(lambda request: httpx.Response(status, stream=stream))
    with pytest.raises(FetchError) as info:
        fetcher.fetch(resolve("http://localhost:5050"))
    assert info.value.kind is FetchErrorKind.STATUS
    assert str(status) in str(info.value)
    assert stream.closed


def test_fetch_decode_failure_releases_response(make_fetcher) -> None:
    stream = TrackingStream(b"<html>oops</html>")
    fetcher = make_fetcher(lambda request: httpx.Response(200, stream=stream))
    with pytest.raises(FetchError) as info:
        fetcher.fetch(resolve("http://localhost:5050"))
    assert info.value.kind is FetchErrorKind.DECODE
    assert stream.closed


def test_fetch_success_releases_response(make_fetcher) -> None:
    stream = TrackingStream(b'{"a": 1}')
    fetcher = make_fetcher(lambda request: httpx.Response(200, stream=stream))
    assert fetcher.fetch(resolve("http://localhost:5050")) == {"a": 1.0}
    assert stream.closed


@pytest.mark.parametrize(
    "exc_type",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.ConnectTimeout],
)
def test_fetch_transport_error(make_fetcher, exc_type: type[httpx.TransportError]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    endpoint = resolve("http://localhost:5050")
    fetcher = make_fetcher(handler)
    with pytest.raises(FetchError) as info:
        fetcher.fetch(endpoint)
    assert info.value.kind is FetchErrorKind.TRANSPORT
    assert info.value.endpoint == endpoint
    assert isinstance(info.value.__cause__, exc_type)


def test_fetch_is_one_shot(make_fetcher) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(500)

    fetcher = make_fetcher(handler)
    with pytest.raises(FetchError):
        fetcher.fetch(resolve("http://localhost:5050"))
    assert len(calls) == 1
