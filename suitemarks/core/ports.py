"""Port interfaces for the Suitemarks diagnostic engine.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - DiagnosticsStorePort: Host-owned mapping of file to diagnostics
   - TestResultSourcePort: Produces per-file test results
   - DiagnosticsReportPort: Renders store contents for a human
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from .models import DiagnosticRecord, FileResult

DiagnosticsVisitor: TypeAlias = Callable[[str, tuple[DiagnosticRecord, ...]], Any]


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class DiagnosticsStorePort(ABC):
    """Port for the mutable, host-owned diagnostics collection.

    The store is keyed by file path. A file present in the store always
    carries at least one diagnostic; an absent file is considered passing,
    unknown or untracked.

    The core depends only on these four operations, so any host container
    that can provide them satisfies the contract.
    """

    @abstractmethod
    def set(self, file: str, records: Sequence[DiagnosticRecord]) -> None:
        """Replace all diagnostics for a file.

        Args:
            file: Path of the file the diagnostics belong to.
            records: Diagnostics in display order. Prior records for the
                file are discarded, never merged.
        """

    @abstractmethod
    def delete(self, file: str) -> None:
        """Remove the entry for a file.

        Deleting a file that has no entry is a no-op.
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry from the store."""

    @abstractmethod
    def for_each(self, visitor: DiagnosticsVisitor) -> None:
        """Enumerate current entries.

        Args:
            visitor: Called once per file entry as ``visitor(file, records)``.
        """


class TestResultSourcePort(ABC):
    """Port for obtaining the results of a test run.

    Adapters read runner output (e.g. a Jest JSON report) and normalize
    it into the core's FileResult model.
    """

    __test__ = False  # not a pytest test class

    @abstractmethod
    def load_results(self) -> list[FileResult]:
        """Load per-file results for one run.

        Returns:
            FileResults in the order the runner reported them. An empty
            list when the run reported no files.

        Raises:
            ValueError: If the underlying report is unreadable or malformed.
        """


class DiagnosticsReportPort(ABC):
    """Port for presenting diagnostics to a developer."""

    @abstractmethod
    def report(self, store: DiagnosticsStorePort) -> None:
        """Render everything currently held in the store."""
