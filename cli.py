#!/usr/bin/env python3
"""Evaluation Sync CLI."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Optional, Sequence

from evaluation_sync.config import ConfigError, Settings, load_settings
from evaluation_sync.sync import SyncResult, SyncService


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evaluation-sync",
        description="Sync the local evaluation data set with its remote copy.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show the connection status indicators.")
    subparsers.add_parser("sync", help="Run a sync now.")

    configure_parser = subparsers.add_parser(
        "configure",
        help="Configure the company ID and run the initial sync.",
    )
    configure_parser.add_argument("company_id", help="Company identifier.")
    configure_parser.add_argument(
        "--no-sync",
        action="store_true",
        help="Only store the company ID; do not sync.",
    )

    reset_parser = subparsers.add_parser(
        "reset",
        help="Reset the online configuration (local data is kept).",
    )
    reset_parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm the reset.",
    )

    subparsers.add_parser("test-connection", help="Check the connection to the server.")

    watch_parser = subparsers.add_parser(
        "watch",
        help="Initialize and keep running automatic syncs.",
    )
    watch_parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Stop after this many timer ticks (default: run forever).",
    )
    watch_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Override the sync interval in minutes.",
    )

    return parser


def _print_alert(message: str, level: str) -> None:
    stream = sys.stderr if level == "danger" else sys.stdout
    print(f"[{level.upper()}] {message}", file=stream)


def _print_result(result: SyncResult) -> int:
    if result.skipped:
        print(f"Sync skipped: {result.reason}")
        return 1
    if not result.success:
        for error in result.errors:
            print(f" - {error}", file=sys.stderr)
        return 1
    print(
        "Sync finished:",
        result.direction.value if result.direction else "unknown",
        "| conflict:",
        "yes" if result.has_conflict else "no",
        "| at:",
        result.synced_at.isoformat() if result.synced_at else "-",
    )
    return 0


def _cmd_status(service: SyncService) -> int:
    indicator = service.connection_status()
    print(f"Status: {indicator.label}")
    labels = {
        "connection": "Connection",
        "company": "Company",
        "last_sync": "Last sync",
        "mode": "Mode",
    }
    for name, detail in service.detailed_status().items():
        print(f"  {labels.get(name, name)}: {detail.label}")
    snapshot = service.snapshot
    print(
        f"  Local data: {len(snapshot.evaluations)} evaluations, "
        f"{len(snapshot.collaborators)} collaborators, "
        f"{len(snapshot.managers)} managers"
    )
    return 0


def _cmd_configure(service: SyncService, company_id: str, sync: bool) -> int:
    if not service.configure_company(company_id, sync=sync):
        return 1
    return 0


def _cmd_reset(service: SyncService, confirmed: bool) -> int:
    if not confirmed:
        print(
            "This resets the online configuration. Local data is kept, "
            "but syncing is disabled. Re-run with --yes to confirm.",
            file=sys.stderr,
        )
        return 1
    service.reset_online_config()
    return 0


def _cmd_watch(
    service: SyncService,
    settings: Settings,
    iterations: Optional[int],
    interval: Optional[float],
    sleep=time.sleep,
) -> int:
    minutes = interval if interval is not None else settings.sync_interval_minutes
    service.initialize()
    print(f"Automatic sync every {minutes:g} minutes")

    ticks = 0
    try:
        while iterations is None or ticks < iterations:
            sleep(minutes * 60)
            service.run_scheduled_sync()
            ticks += 1
    except KeyboardInterrupt:
        print("Stopped.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    service = SyncService(settings, notifier=_print_alert)

    if args.command == "status":
        return _cmd_status(service)
    if args.command == "sync":
        result = service.sync_manual()
        for entry in service.log.entries():
            print(entry.format())
        return _print_result(result)
    if args.command == "configure":
        return _cmd_configure(service, args.company_id, not args.no_sync)
    if args.command == "reset":
        return _cmd_reset(service, args.yes)
    if args.command == "test-connection":
        return 0 if service.test_connection() else 1
    if args.command == "watch":
        return _cmd_watch(service, settings, args.iterations, args.interval)

    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
