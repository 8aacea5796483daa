import argparse
import asyncio
import sys

from hn_sync.config import MODES, SyncConfig, check_supported
from hn_sync.engine import SyncEngine, SyncReport
from hn_sync.errors import ConfigError, SyncError
from hn_sync.ingest.hub import NewsHub
from hn_sync.monitoring.logging_utils import configure_logging
from hn_sync.monitoring.metrics_server import run_metrics_server
from hn_sync.storage import open_store


def _add_store_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--backend", help="Store backend: file, sqlite or postgres")
    parser.add_argument("--uri", help="Store path or connection string")
    parser.add_argument(
        "--start-id",
        type=int,
        help="Cursor to assume when the store is empty",
    )


async def _sync(config: SyncConfig, mode: str) -> SyncReport:
    store = open_store(config.backend, config.store_uri)
    try:
        async with NewsHub(config) as hub:
            engine = SyncEngine(hub, store, config)
            return await engine.run(mode)
    finally:
        store.close()


async def _lag(config: SyncConfig) -> None:
    store = open_store(config.backend, config.store_uri)
    try:
        async with NewsHub(config) as hub:
            lag = await SyncEngine(hub, store, config).check_lag()
    finally:
        store.close()
    print(f"feed max: {lag.max_id}")
    print(f"cursor:   {lag.cursor}")
    print(f"backlog:  {lag.backlog}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="HN Sync CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Mirror new feed items into the store")
    _add_store_args(sync)
    sync.add_argument(
        "--mode",
        default="sync_data",
        help=f"Run mode: {', '.join(MODES)}",
    )
    sync.add_argument("--batch-size", type=int, help="Max items per batch")

    lag = sub.add_parser("lag", help="Show how far the store is behind the feed")
    _add_store_args(lag)

    sub.add_parser("metrics", help="Run Prometheus metrics server")

    args = parser.parse_args(argv)

    try:
        config = SyncConfig.from_env()
        configure_logging(config.sync_log)
        if args.command == "metrics":
            run_metrics_server(config.metrics_port)
            return 0
        config = config.with_overrides(
            backend=args.backend,
            store_uri=args.uri,
            start_id=args.start_id,
            batch_size=getattr(args, "batch_size", None),
        )
        if args.command == "sync":
            check_supported(config.backend, args.mode)
            report = asyncio.run(_sync(config, args.mode))
            print(
                f"{report.mode}: stored {report.stored}, dropped {report.dropped}, "
                f"cursor {report.start_cursor} -> {report.cursor} (feed max {report.max_id})"
            )
            return 0
        if args.command == "lag":
            check_supported(config.backend, "sync_data")
            asyncio.run(_lag(config))
            return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except SyncError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
