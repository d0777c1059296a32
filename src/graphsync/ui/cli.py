from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from graphsync import __version__
from graphsync.app import sync_graph
from graphsync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from graphsync.domain.data_integration import SyncResult

log = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--integrations",
        type=Path,
        required=True,
        help="TOML file describing integrations and their operations",
    )
    parser.add_argument(
        "--templates",
        type=Path,
        default=None,
        help="Directory holding transform templates (defaults to the integrations file's)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )


def _add_state_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--durable-state",
        action="store_true",
        help="Use committed state from the default state database",
    )
    parser.add_argument(
        "--state-db",
        type=str,
        default=None,
        help="Database URI for durable committed state (implies --durable-state)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise external records into a graph")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Reconcile and write every integration")
    _add_common_arguments(sync)
    sync.add_argument(
        "--verify",
        action="store_true",
        help="Re-reconcile after each commit and fail if entities did not converge",
    )
    _add_state_arguments(sync)

    plan = subparsers.add_parser("plan", help="Show the deltas a sync would write")
    _add_common_arguments(plan)
    _add_state_arguments(plan)

    return parser.parse_args(list(argv))


def _log_results(results: list[SyncResult]) -> None:
    for result in results:
        for operation in result.operations:
            log.info(
                "%s / %s: create=%d, delete=%d%s",
                result.integration,
                operation.operation,
                operation.created,
                operation.deleted,
                "" if operation.written else " (not written)",
            )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    if not parsed_args.integrations.is_file():
        log.error("Integrations file not found: %s", parsed_args.integrations)
        sys.exit(2)

    try:
        if parsed_args.command == "sync":
            results = sync_graph(
                parsed_args.integrations,
                template_dir=parsed_args.templates,
                verify_convergence=parsed_args.verify,
                durable_state=parsed_args.durable_state,
                state_database_uri=parsed_args.state_db,
            )
        elif parsed_args.command == "plan":
            results = sync_graph(
                parsed_args.integrations,
                template_dir=parsed_args.templates,
                dry_run=True,
                durable_state=parsed_args.durable_state,
                state_database_uri=parsed_args.state_db,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
        _log_results(results)

    except Exception:
        log.exception("Fatal error during sync")
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
