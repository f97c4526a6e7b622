"""
Mesos collector: concurrent fan-out over every configured master/agent.

collect_batch() resolves all addresses up front, starts one worker thread per
endpoint and returns as soon as every worker has finished or the first one has
failed. Workers still running after a failure are not cancelled: they finish in
the background, may still append to the sink, and their outcome is discarded.
"""
from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from typing import Iterable

from accumulator import MetricsAccumulator, MetricsSink
from collectors.base import BaseCollector, CollectorResult
from collectors.endpoint import HostnameProvider, build_tags, resolve
from collectors.snapshot import DEFAULT_METRICS_PATH, DEFAULT_TIMEOUT_SEC, FetcherConfig, SnapshotFetcher
from models import BatchResult, EndpointDescriptor
from utils import get_logger, local_hostname, normalize_metric_name

logger = get_logger(__name__)

SAMPLE_CONFIG = """\
mesos:
  # An array of addresses to gather stats about. That is, Mesos masters
  # or/and agents URIs.
  urls: ["http://localhost:5050", "http://localhost:5051"]
  # Per-request timeout in seconds.
  timeout_sec: 3
"""


def _collect_endpoint(
    endpoint: EndpointDescriptor,
    sink: MetricsSink,
    fetcher: SnapshotFetcher,
    hostname_provider: HostnameProvider,
) -> int:
    tags = build_tags(endpoint, hostname_provider)
    snapshot = fetcher.fetch(endpoint)
    for name, value in snapshot.items():
        sink.append(normalize_metric_name(name), value, tags)
    logger.debug("Collected %d metrics from %s", len(snapshot), endpoint)
    return len(snapshot)


def _log_late_outcome(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.debug("Discarding error from endpoint finishing after batch failure: %s", exc)


def _close_when_done(futures: list[Future], fetcher: SnapshotFetcher) -> None:
    def closer() -> None:
        wait(futures)
        fetcher.close()

    threading.Thread(target=closer, name="mesos-fetch-closer", daemon=True).start()


def collect_batch(
    addresses: Iterable[str],
    sink: MetricsSink,
    hostname_provider: HostnameProvider = local_hostname,
    fetcher: SnapshotFetcher | None = None,
    fetcher_config: FetcherConfig | None = None,
) -> BatchResult:
    """Collect one snapshot per address into sink.

    Without an explicit fetcher, one is built from fetcher_config for this
    batch and closed once its last worker finishes.

    Raises ResolutionError before any network activity if an address is
    malformed, or the first FetchError reported by any endpoint.
    """
    started = time.monotonic()
    endpoints = [resolve(addr) for addr in addresses]
    if not endpoints:
        return BatchResult()

    owns_fetcher = fetcher is None
    if fetcher is None:
        fetcher = SnapshotFetcher(fetcher_config or FetcherConfig())

    executor = ThreadPoolExecutor(max_workers=len(endpoints), thread_name_prefix="mesos-fetch")
    futures = [
        executor.submit(_collect_endpoint, ep, sink, fetcher, hostname_provider)
        for ep in endpoints
    ]
    executor.shutdown(wait=False)

    succeeded = 0
    try:
        for future in as_completed(futures):
            exc = future.exception()
            if exc is not None:
                logger.warning("Batch failed: %s", exc)
                for pending in futures:
                    if not pending.done():
                        pending.add_done_callback(_log_late_outcome)
                raise exc
            succeeded += 1
    finally:
        if owns_fetcher:
            if all(f.done() for f in futures):
                fetcher.close()
            else:
                _close_when_done(futures, fetcher)

    return BatchResult(
        endpoints=len(endpoints),
        succeeded=succeeded,
        duration_sec=time.monotonic() - started,
    )


class MesosCollector(BaseCollector):
    name = "mesos"
    description = "Read Mesos agents state information"
    sample_config = SAMPLE_CONFIG

    def __init__(
        self,
        urls: list[str] | None = None,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        metrics_path: str = DEFAULT_METRICS_PATH,
        hostname_provider: HostnameProvider = local_hostname,
        fetcher: SnapshotFetcher | None = None,
    ) -> None:
        self.urls = list(urls or [])
        self.hostname_provider = hostname_provider
        self.fetcher = fetcher or SnapshotFetcher(FetcherConfig(timeout_sec=timeout_sec, metrics_path=metrics_path))

    def gather(self, sink: MetricsSink) -> BatchResult:
        return collect_batch(self.urls, sink, self.hostname_provider, self.fetcher)

    def collect(self) -> CollectorResult:
        acc = MetricsAccumulator()
        result = self.gather(acc)
        return CollectorResult(success=True, data={
            "samples": acc.to_dicts(),
            "batch": result.to_dict(),
        })

    def close(self) -> None:
        self.fetcher.close()
