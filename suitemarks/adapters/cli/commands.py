"""CLI command implementations for Suitemarks.

Provides the command-line operations over a diagnostics store.

This adapter maps CLI commands (reconcile, reset, count, show) to the core
diagnostics operations. It handles CLI-specific formatting and error
reporting; results are returned as JSON-ready dictionaries.
"""

import logging
from typing import Any

from suitemarks.adapters.reporting.stdout import StdoutDiagnosticsReporter
from suitemarks.core.diagnostics import (
    failed_suite_count,
    reset_diagnostics,
    update_diagnostics,
)
from suitemarks.core.models import AssertionState, DiagnosticRecord
from suitemarks.core.ports import DiagnosticsStorePort, TestResultSourcePort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands against a single diagnostics store."""

    def __init__(
        self,
        store: DiagnosticsStorePort,
        reporter: StdoutDiagnosticsReporter | None = None,
    ):
        """Initialize the CLI command handler.

        Args:
            store: Diagnostics store the commands operate on.
            reporter: Renders text output for ``show``. Defaults to a
                non-verbose StdoutDiagnosticsReporter.
        """
        self.store = store
        self.reporter = reporter or StdoutDiagnosticsReporter()

    def reconcile(
        self, source: TestResultSourcePort, verbose: bool = False
    ) -> dict[str, Any]:
        """Load a run's results and reconcile them into the store.

        Args:
            source: Where the run's results come from.
            verbose: If True, log per-command details.

        Returns:
            Dictionary with status and reconciliation counts.
        """
        try:
            results = source.load_results()
        except ValueError as e:
            logger.error(f"Failed to load test results: {e}")
            return {
                "status": "error",
                "operation": "reconcile",
                "message": str(e),
            }

        update_diagnostics(results, self.store)

        failed = sum(1 for r in results if r.status == AssertionState.KNOWN_FAIL)
        result = {
            "status": "success",
            "operation": "reconcile",
            "files": len(results),
            "failed": failed,
            "cleared": len(results) - failed,
            "failed_suites": failed_suite_count(self.store),
        }

        if verbose:
            logger.info(
                f"Reconciled {len(results)} test files",
                extra={"failed": failed, "verbose": True},
            )

        return result

    def reset(self) -> dict[str, Any]:
        """Discard all diagnostics in the store."""
        reset_diagnostics(self.store)
        return {
            "status": "success",
            "operation": "reset",
            "message": "All diagnostics cleared",
        }

    def count(self) -> dict[str, Any]:
        """Report how many files currently carry diagnostics."""
        return {
            "status": "success",
            "operation": "count",
            "failed_suites": failed_suite_count(self.store),
        }

    def show(self, output_format: str = "json") -> dict[str, Any]:
        """Return the store contents.

        Args:
            output_format: Output format ('json', 'text'). Default 'json'.

        Returns:
            Dictionary with the diagnostics under "data", or status/message
            on error.
        """
        if output_format == "json":
            data: dict[str, list[dict[str, Any]]] = {}

            def _collect(file: str, records: tuple[DiagnosticRecord, ...]) -> None:
                data[file] = [_record_to_dict(r) for r in records]

            self.store.for_each(_collect)
            return {
                "status": "success",
                "operation": "show",
                "data": data,
            }

        elif output_format == "text":
            return {
                "status": "success",
                "operation": "show",
                "data": self.reporter.render(self.store),
            }

        else:
            return {
                "status": "error",
                "operation": "show",
                "message": f"Unsupported format: {output_format}",
            }


def _record_to_dict(record: DiagnosticRecord) -> dict[str, Any]:
    r = record.range
    return {
        "range": [r.start_line, r.start_character, r.end_line, r.end_character],
        "message": record.message,
        "severity": record.severity.value,
    }


def run_command(
    handler: CLICommandHandler,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        handler: CLICommandHandler bound to the target store.
        command: Command name ('reconcile', 'reset', 'count', 'show').
        args: Dictionary of command arguments. ``reconcile`` requires
            ``source``.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument
            is missing.
    """
    if command == "reconcile":
        if "source" not in args:
            raise ValueError("Missing required parameter: source")
        return handler.reconcile(args["source"], args.get("verbose", False))

    elif command == "reset":
        return handler.reset()

    elif command == "count":
        return handler.count()

    elif command == "show":
        return handler.show(args.get("format", "json"))

    else:
        raise ValueError(f"Unknown command: {command}")
