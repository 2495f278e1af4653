# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from taxosync.adapters.vvf import DIRECTORS, LOCATIONS
from taxosync.app import export_records, sync_records
from taxosync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

ALL_KINDS = "all"
KIND_CHOICES = (LOCATIONS, DIRECTORS)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise upstream records into the store")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging verbosity (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Reconcile stored records with the upstream API")
    sync.add_argument(
        "kind",
        nargs="?",
        choices=(*KIND_CHOICES, ALL_KINDS),
        default=ALL_KINDS,
        help="Kind to synchronise (default: %(default)s)",
    )
    sync.add_argument(
        "--skip-details",
        action="store_true",
        help="Do not run the per-record detail lookups after reconciling",
    )

    export = subparsers.add_parser("export", help="Print stored records of a kind as JSON")
    export.add_argument("kind", choices=KIND_CHOICES, help="Kind to export")

    return parser.parse_args(list(argv))


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=parsed_args.log_level)

    try:
        if parsed_args.command == "sync":
            kinds = None if parsed_args.kind == ALL_KINDS else [parsed_args.kind]
            run = sync_records(kinds, enrich=not parsed_args.skip_details)
            _print_json(run.as_payload())
            if not run.ok:
                sys.exit(1)
        elif parsed_args.command == "export":
            _print_json(export_records(parsed_args.kind))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
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
