"""Composition root for Suitemarks.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Argument parsing
- Configuration loading via config module
- Adapter instantiation
- Command dispatch
"""

import argparse
import json
import logging
import sys
from typing import Any

from suitemarks.adapters.cli.commands import CLICommandHandler, run_command
from suitemarks.adapters.reporting.stdout import StdoutDiagnosticsReporter
from suitemarks.adapters.results.jest_json import JestReportSource
from suitemarks.adapters.store.json_file import JsonFileDiagnosticsStore
from suitemarks.adapters.store.memory import InMemoryDiagnosticsStore
from suitemarks.config import Settings, load_settings
from suitemarks.core.ports import DiagnosticsStorePort


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Logs go to stderr; stdout carries command output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="suitemarks",
        description="Reconcile test-run results into a diagnostics store.",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file with settings (default: ./.env)",
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Diagnostics store file (overrides STORE_PATH)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    reconcile = subparsers.add_parser(
        "reconcile", help="Apply a Jest JSON report to the store"
    )
    reconcile.add_argument(
        "report",
        nargs="?",
        default=None,
        help="Jest --json report (default: REPORT_PATH setting)",
    )

    subparsers.add_parser("count", help="Print the number of failing test files")
    subparsers.add_parser("reset", help="Remove all diagnostics")

    show = subparsers.add_parser("show", help="Print the stored diagnostics")
    show.add_argument(
        "--format",
        dest="output_format",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )

    return parser


def build_store(settings: Settings, store_path: str | None = None) -> DiagnosticsStorePort:
    """Instantiate the configured diagnostics store.

    Raises:
        ValueError: If the store backend is unknown or the store file is
            corrupt.
    """
    if settings.store_backend == "json":
        return JsonFileDiagnosticsStore(store_path or settings.store_path)
    elif settings.store_backend == "memory":
        return InMemoryDiagnosticsStore()
    raise ValueError(f"Unknown store backend: {settings.store_backend}")


def _execute(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    """Wire adapters for one invocation and run the requested command."""
    logger = logging.getLogger(__name__)
    verbose = args.verbose or settings.debug

    if settings.store_backend == "memory":
        # Each invocation is a fresh process; nothing would survive it.
        raise ValueError(
            "The memory store backend keeps no state between invocations; "
            "use STORE_BACKEND=json on the command line"
        )

    store = build_store(settings, args.store)
    logger.debug(f"Diagnostics store backend: {settings.store_backend}")

    handler = CLICommandHandler(store, StdoutDiagnosticsReporter(verbose=verbose))

    command_args: dict[str, Any] = {"verbose": verbose}
    if args.command == "reconcile":
        command_args["source"] = JestReportSource(args.report or settings.report_path)
    elif args.command == "show":
        command_args["format"] = args.output_format

    return run_command(handler, args.command, command_args)


def main(argv: list[str] | None = None) -> None:
    """Application entry point.

    Parses arguments, loads configuration, wires adapters and runs one
    command, printing its result.

    Exit codes:
        0: Command succeeded
        1: Command reported an error, or a fatal error occurred
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(args.env_file)
        configure_logging(settings.log_level, settings.log_format)
        result = _execute(args, settings)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    if args.command == "show" and result.get("status") == "success" and isinstance(result.get("data"), str):
        print(result["data"])
    else:
        print(json.dumps(result, indent=2, default=str))

    if result.get("status") != "success":
        sys.exit(1)


if __name__ == "__main__":
    main()
