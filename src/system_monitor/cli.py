"""CLI interface for system_monitor."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import time

from . import __version__
from .config import StorageConfig, load_config
from .errors import CalculatorFailure, StorageConnectionError
from .sink.base import BaseSink

logger = logging.getLogger(__name__)


def _build_sink(storage: StorageConfig) -> BaseSink:
    """Create the sink for the configured backend, connecting where needed."""
    if storage.backend == "mongo":
        from .sink.mongo import MongoSink

        sink = MongoSink()
        sink.connect(storage.mongo_url, timeout_ms=storage.server_selection_timeout_ms)
        return sink
    if storage.backend == "local":
        from .sink.local import LocalSink

        return LocalSink(storage.local_output_dir)
    if storage.backend == "otel":
        from .sink.otel import OtelSink

        return OtelSink(storage)
    raise ValueError(f"Unknown storage backend: {storage.backend!r}")


def _cmd_run(args: argparse.Namespace) -> None:
    """Sample all monitors until interrupted."""
    cfg = load_config(args.config)

    from .registry import build_registry

    try:
        sink = _build_sink(cfg.storage)
    except StorageConnectionError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    registry = build_registry(sink, cfg)

    stop = False

    def _handle_signal(_sig: int, _frame: object) -> None:
        nonlocal stop
        stop = True

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    registry.start_all()
    print(f"system-monitor running (backend={cfg.storage.backend}, monitors={', '.join(registry.keys())})")
    print("Press Ctrl+C to stop.\n")
    try:
        while not stop:
            time.sleep(0.5)
    finally:
        registry.stop_all()
        sink.shutdown()
    print("\nMonitoring stopped.")


def _cmd_sample(args: argparse.Namespace) -> None:
    """Compute every enabled monitor once and print the values."""
    cfg = load_config(args.config)

    from .registry import build_registry

    # no sink: sample() never stores
    registry = build_registry(None, cfg)
    results = {}
    for monitor in registry:
        try:
            results[monitor.key] = monitor.sample()
        except CalculatorFailure as exc:
            logger.error("Monitor %s failed: %s", monitor.key, exc)
            results[monitor.key] = None
    print(json.dumps(results, indent=2))


def _cmd_version(_args: argparse.Namespace) -> None:
    print(f"system-monitor {__version__}")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the system-monitor CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        prog="system-monitor",
        description="Sample host CPU, memory and disk usage into a document store",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to system_monitor.yaml")
    sub = parser.add_subparsers(dest="command")

    # run
    run_p = sub.add_parser("run", help="Start all monitors and persist their samples")
    run_p.set_defaults(func=_cmd_run)

    # sample
    sample_p = sub.add_parser("sample", help="Print one sample from every monitor")
    sample_p.set_defaults(func=_cmd_sample)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
