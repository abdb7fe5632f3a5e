"""Reconciliation of test results into a diagnostics store.

This module translates runner semantics (file verdicts, assertions,
1-based source lines) into zero-based, zero-width error markers and
updates the store file by file. Files missing from a batch are left
alone, so a partial run never erases markers it knows nothing about.
"""

import logging
from collections.abc import Sequence

from .models import (
    AssertionState,
    DiagnosticRange,
    DiagnosticRecord,
    DiagnosticSeverity,
    FileResult,
)
from .ports import DiagnosticsStorePort

logger = logging.getLogger(__name__)


def create_diagnostic(message: str, line: int | None = None) -> DiagnosticRecord:
    """Build an error diagnostic anchored at column 0 of a source line.

    Args:
        message: Text shown for the marker.
        line: 1-based source line. None anchors the marker at the top of
            the file.

    Returns:
        A zero-width DiagnosticRecord with ERROR severity.
    """
    zero_based = 0 if line is None else line - 1
    return DiagnosticRecord(
        range=DiagnosticRange(zero_based, 0, zero_based, 0),
        message=message,
        severity=DiagnosticSeverity.ERROR,
    )


def _diagnostics_for(result: FileResult) -> list[DiagnosticRecord]:
    # File failed to run at all (syntax error, crash in setup, ...).
    if not result.assertions:
        return [create_diagnostic(result.message)]

    # A failed file surfaces every assertion, whatever its own status.
    return [
        create_diagnostic(assertion.message, assertion.line)
        for assertion in result.assertions
    ]


def update_diagnostics(
    results: Sequence[FileResult], store: DiagnosticsStorePort
) -> None:
    """Bring the store in line with a batch of test results.

    Failed files get their diagnostics replaced; every other file
    reported in the batch has its entry removed. Store calls are made
    in input order. An empty batch does not touch the store.

    Args:
        results: Per-file results of one run. Not modified.
        store: Diagnostics store to update in place.
    """
    set_count = 0
    delete_count = 0

    for result in results:
        if result.status != AssertionState.KNOWN_FAIL:
            store.delete(result.file)
            delete_count += 1
            continue

        store.set(result.file, _diagnostics_for(result))
        set_count += 1

    logger.debug(
        f"Reconciled {set_count + delete_count} files: "
        f"{set_count} failing, {delete_count} cleared"
    )


def reset_diagnostics(store: DiagnosticsStorePort) -> None:
    """Discard every tracked diagnostic."""
    store.clear()


def failed_suite_count(store: DiagnosticsStorePort) -> int:
    """Count the files that currently carry diagnostics.

    The figure is derived by enumerating the store each time; one file
    with many failing assertions counts once.
    """
    count = 0

    def _visit(*_entry: object) -> None:
        nonlocal count
        count += 1

    store.for_each(_visit)
    return count
