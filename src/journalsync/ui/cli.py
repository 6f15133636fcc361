from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from journalsync.app import discover_account_collections, registered_collections, sync_account
from journalsync.config import configure_logging
from journalsync.domain.model import ServiceType, SyncTrigger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_SERVICES: dict[str, ServiceType] = {
    "address-book": ServiceType.ADDRESS_BOOK,
    "calendar": ServiceType.CALENDAR,
    "tasks": ServiceType.TASKS,
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise journal collections")
    parser.add_argument(
        "--service",
        choices=sorted(_SERVICES),
        default="address-book",
        help="Collection type to work on (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("discover", help="Refresh the collection list from the server")

    sync = subparsers.add_parser("sync", help="Sync every collection of the account")
    mode = sync.add_mutually_exclusive_group()
    mode.add_argument(
        "--upload-only",
        action="store_true",
        help="Only push local changes; does nothing when no record changed",
    )
    mode.add_argument(
        "--manual",
        action="store_true",
        help="Mark the run as user-requested",
    )

    subparsers.add_parser("collections", help="List the locally registered collections")

    return parser.parse_args(list(argv))


def _trigger(args: argparse.Namespace) -> SyncTrigger:
    if args.upload_only:
        return SyncTrigger.UPLOAD
    if args.manual:
        return SyncTrigger.MANUAL
    return SyncTrigger.PERIODIC


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    service_type = _SERVICES[parsed_args.service]
    try:
        if parsed_args.command == "discover":
            collections = discover_account_collections(service_type)
            log.info("Discovered %s %s collections", len(collections), service_type)
        elif parsed_args.command == "sync":
            report = sync_account(service_type, trigger=_trigger(parsed_args))
            if report.failed:
                failed = ", ".join(str(outcome.collection.url) for outcome in report.failed)
                raise RuntimeError(f"Sync failed for collections: {failed}")  # noqa: TRY301
        elif parsed_args.command == "collections":
            for info in registered_collections(service_type):
                log.info(
                    "%s %r%s",
                    info.url,
                    info.display_name,
                    " (read-only)" if info.read_only else "",
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
