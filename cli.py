"""
Command-line interface for the Mesos metrics collector: collect (table/JSON/watch), API, config.
"""
from __future__ import annotations

import argparse
import json
import sys
import time

import config
from errors import CollectorError
from utils import setup_logging


def cmd_collect(args: argparse.Namespace) -> int:
    from metrics import gather, render_table

    def once() -> int:
        try:
            acc, result = gather(urls=args.url, timeout_sec=args.timeout)
        except CollectorError as e:
            print(e, file=sys.stderr)
            return 1
        if args.json:
            out = {"batch": result.to_dict(), "samples": acc.to_dicts()}
            print(json.dumps(out, indent=2 if args.pretty else None))
        else:
            render_table(acc)
        return 0

    if not args.watch:
        return once()
    rc = 0
    try:
        while True:
            rc = once()
            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    return rc


def cmd_api(args: argparse.Namespace) -> int:
    import uvicorn

    port = args.port or int(config.get("api.port", 8765))
    host = str(config.get("api.host", "0.0.0.0"))
    uvicorn.run("api:app", host=host, port=port, reload=bool(args.reload))
    return 0


def cmd_validate_config(args: argparse.Namespace) -> int:
    print("Config file loaded:", args.config_loaded)
    for key in ["mesos.urls", "mesos.timeout_sec", "mesos.metrics_path", "api.port", "logging.level"]:
        print(f"  {key}: {config.get(key)}")
    from collectors.endpoint import resolve

    rc = 0
    for url in config.get("mesos.urls", []):
        try:
            ep = resolve(url)
        except CollectorError as e:
            print(f"  invalid: {e}")
            rc = 1
            continue
        print(f"  ok: {url} -> {ep.base_url}")
    return rc


def cmd_sample_config(args: argparse.Namespace) -> int:
    from collectors.mesos_collector import MesosCollector

    print(f"# {MesosCollector.description}")
    print(MesosCollector.sample_config, end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mesos_metrics", description="Mesos metrics collector CLI")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_collect = sub.add_parser("collect", help="Collect metrics once (table) or --json")
    p_collect.add_argument("--url", action="append", default=None, help="Endpoint address (repeatable)")
    p_collect.add_argument("--timeout", type=float, default=None, help="Per-request timeout seconds")
    p_collect.add_argument("--json", action="store_true", help="Output JSON")
    p_collect.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    p_collect.add_argument("--watch", action="store_true", help="Watch mode (collect every N sec)")
    p_collect.add_argument("--interval", type=float, default=10.0, help="Watch interval seconds")
    p_collect.set_defaults(run=cmd_collect)

    p_api = sub.add_parser("api", help="Run REST API server")
    p_api.add_argument("--port", type=int, default=None, help="Port")
    p_api.add_argument("--reload", action="store_true", help="Reload on change")
    p_api.set_defaults(run=cmd_api)

    p_validate = sub.add_parser("validate-config", help="Validate and show config")
    p_validate.set_defaults(run=cmd_validate_config)

    p_sample = sub.add_parser("sample-config", help="Print an example config file")
    p_sample.set_defaults(run=cmd_sample_config)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    args.config_loaded = config.load_config_file(args.config)
    setup_logging(args.log_level or str(config.get("logging.level", "INFO")), config.get("logging.file"))
    return args.run(args)


if __name__ == "__main__":
    sys.exit(main())
