"""
Gather Mesos metrics: one batch across every configured master/agent.
Uses config for defaults; prints a rich table when run directly.
"""
from __future__ import annotations

import sys

from rich.console import Console
from rich.table import Table

import config
from accumulator import MetricsAccumulator
from collectors.mesos_collector import collect_batch
from collectors.snapshot import FetcherConfig
from errors import CollectorError
from models import BatchResult
from utils import get_logger

logger = get_logger(__name__)


def fetcher_config(timeout_sec: float | None = None, metrics_path: str | None = None) -> FetcherConfig:
    """FetcherConfig from explicit values, falling back to config."""
    if timeout_sec is None:
        timeout_sec = float(config.get("mesos.timeout_sec", 3.0))
    return FetcherConfig(
        timeout_sec=float(timeout_sec),
        metrics_path=str(metrics_path or config.get("mesos.metrics_path", "/metrics/snapshot")),
    )


def gather(
    urls: list[str] | None = None,
    timeout_sec: float | None = None,
    metrics_path: str | None = None,
    sink: MetricsAccumulator | None = None,
) -> tuple[MetricsAccumulator, BatchResult]:
    """Run one batch. Raises CollectorError on the first failing endpoint."""
    acc = sink if sink is not None else MetricsAccumulator()
    addresses = list(urls) if urls else list(config.get("mesos.urls", []))
    logger.info("Collecting from %d endpoint(s)", len(addresses))
    result = collect_batch(addresses, acc, fetcher_config=fetcher_config(timeout_sec, metrics_path))
    return acc, result


def render_table(acc: MetricsAccumulator, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Mesos Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Port", style="magenta")
    table.add_column("Value", style="green", justify="right")
    for s in sorted(acc.samples(), key=lambda s: (s.tags.get("port", ""), s.name)):
        table.add_row(s.name, s.tags.get("port", ""), f"{s.value:g}")
    console.print(table)


def main() -> None:
    """Print one batch of metrics using rich."""
    try:
        acc, result = gather()
    except CollectorError as e:
        print(e, file=sys.stderr)
        sys.exit(1)
    render_table(acc)
    logger.info("Collected %d samples from %d endpoint(s) in %.2fs", len(acc), result.endpoints, result.duration_sec)


if __name__ == "__main__":
    main()
