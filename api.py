"""
REST API for the Mesos metrics collector: metrics and health endpoints.
"""
from __future__ import annotations

import re
import threading
import time
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

import config
from accumulator import MetricsAccumulator
from errors import CollectorError
from models import BatchResult
from utils import get_logger

logger = get_logger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")

GatherFn = Callable[[], tuple[MetricsAccumulator, BatchResult]]


def _default_gather() -> tuple[MetricsAccumulator, BatchResult]:
    from metrics import gather
    return gather()


class MetricsCache:
    """Last batch, reused for ttl_sec so scrapes don't hammer the endpoints."""

    def __init__(self, gather_fn: GatherFn, ttl_sec: float) -> None:
        self.gather_fn = gather_fn
        self.ttl_sec = ttl_sec
        self._entry: tuple[float, dict[str, Any]] | None = None
        self._lock = threading.Lock()

    def get(self) -> dict[str, Any]:
        with self._lock:
            now = time.time()
            if self._entry is not None and (now - self._entry[0]) < self.ttl_sec:
                return self._entry[1]
            acc, result = self.gather_fn()
            data = {"batch": result.to_dict(), "samples": acc.to_dicts(), "timestamp": now}
            self._entry = (now, data)
            return data


def _label_value(v: str) -> str:
    return v.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def prometheus_text(samples: list[dict[str, Any]], prefix: str = "mesos") -> str:
    """Text exposition of samples; tags become labels."""
    lines: list[str] = []
    seen: set[str] = set()
    for s in sorted(samples, key=lambda s: s["name"]):
        name = _INVALID_NAME_CHARS.sub("_", f"{prefix}_{s['name']}")
        if name not in seen:
            lines.append(f"# TYPE {name} gauge")
            seen.add(name)
        labels = ",".join(f'{k}="{_label_value(v)}"' for k, v in sorted(s["tags"].items()))
        lines.append(f"{name}{{{labels}}} {s['value']}")
    return "\n".join(lines) + "\n"


def create_app(gather_fn: GatherFn | None = None, cache_ttl_sec: float | None = None) -> FastAPI:
    app = FastAPI(
        title="Mesos Metrics API",
        description="Metrics and health endpoints",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    ttl = float(cache_ttl_sec if cache_ttl_sec is not None else config.get("api.cache_ttl_sec", 2.0))
    cache = MetricsCache(gather_fn or _default_gather, ttl)

    def _metrics() -> dict[str, Any]:
        try:
            return cache.get()
        except CollectorError as e:
            logger.warning("Metrics request failed: %s", e)
            raise HTTPException(status_code=502, detail=str(e)) from e

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "timestamp": time.time()}

    @app.get("/metrics")
    def metrics() -> dict:
        return _metrics()

    @app.get("/metrics/prometheus", response_class=PlainTextResponse)
    def prometheus() -> str:
        return prometheus_text(_metrics()["samples"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api:app", host=config.API_HOST, port=config.API_PORT, reload=False)
