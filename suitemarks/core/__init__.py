"""Core domain logic for the Suitemarks diagnostic engine.

This package contains zero external dependencies and represents
the pure reconciliation logic. Stores, report readers and the
command line live in the adapters package.
"""

from .diagnostics import (
    create_diagnostic,
    failed_suite_count,
    reset_diagnostics,
    update_diagnostics,
)
from .models import (
    AssertionResult,
    AssertionState,
    DiagnosticRange,
    DiagnosticRecord,
    DiagnosticSeverity,
    FileResult,
)

__all__ = [
    "AssertionResult",
    "AssertionState",
    "DiagnosticRange",
    "DiagnosticRecord",
    "DiagnosticSeverity",
    "FileResult",
    "create_diagnostic",
    "failed_suite_count",
    "reset_diagnostics",
    "update_diagnostics",
]
