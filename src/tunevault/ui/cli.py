from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tunevault.app import build_engine, run_full_sync, run_incremental_sync, watch
from tunevault.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise Spotify library notes")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "full",
        help="Freshen existing notes, ingest the whole library and update library status",
    )

    incremental = subparsers.add_parser(
        "incremental",
        help="Ingest the most recently saved items only",
    )
    incremental.add_argument(
        "--silent",
        action="store_true",
        help="Do not print a notice when the pass succeeds",
    )

    watcher = subparsers.add_parser("watch", help="Run incremental passes on an interval")
    watcher.add_argument(
        "--interval-minutes",
        type=float,
        default=30.0,
        help="Minutes between automatic incremental passes (default: %(default)s)",
    )
    watcher.add_argument(
        "--sync-on-start",
        action="store_true",
        help="Trigger a pass right away instead of waiting for the first interval",
    )

    return parser.parse_args(list(argv))


def _print_notice(message: str) -> None:
    print(message)  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "watch" and parsed_args.interval_minutes <= 0:
            raise ValueError("--interval-minutes must be positive")  # noqa: TRY301
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        engine = build_engine(notify=_print_notice)
        if parsed_args.command == "full":
            report = run_full_sync(engine=engine)
        elif parsed_args.command == "incremental":
            report = run_incremental_sync(engine=engine, silent=parsed_args.silent)
        elif parsed_args.command == "watch":
            watch(
                engine=engine,
                interval_minutes=parsed_args.interval_minutes,
                sync_on_start=parsed_args.sync_on_start,
            )
            return
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    if report.failed:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
