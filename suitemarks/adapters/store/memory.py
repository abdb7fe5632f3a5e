"""In-memory diagnostics store adapter.

Implements DiagnosticsStorePort with a plain dict. Suitable for hosts that
embed the engine in a long-running process and render the store directly.
"""

import logging
from collections.abc import Iterator, Sequence

from suitemarks.core.models import DiagnosticRecord
from suitemarks.core.ports import DiagnosticsStorePort, DiagnosticsVisitor

logger = logging.getLogger(__name__)


class InMemoryDiagnosticsStore(DiagnosticsStorePort):
    """Dict-backed diagnostics store, enumerated in insertion order."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[DiagnosticRecord, ...]] = {}

    def set(self, file: str, records: Sequence[DiagnosticRecord]) -> None:
        """Replace the diagnostics for a file.

        An empty sequence removes the entry, so every file present in
        the store keeps at least one diagnostic.
        """
        if not records:
            self.delete(file)
            return
        self._entries[file] = tuple(records)
        logger.debug(f"Stored {len(records)} diagnostics for {file}")

    def delete(self, file: str) -> None:
        """Remove the entry for a file, if any."""
        if self._entries.pop(file, None) is not None:
            logger.debug(f"Removed diagnostics for {file}")

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()

    def for_each(self, visitor: DiagnosticsVisitor) -> None:
        """Call visitor(file, records) for every entry."""
        # Iterate a snapshot; visitors may mutate the store.
        for file, records in list(self._entries.items()):
            visitor(file, records)

    def get(self, file: str) -> tuple[DiagnosticRecord, ...]:
        """Return the diagnostics for a file, or an empty tuple."""
        return self._entries.get(file, ())

    def __contains__(self, file: object) -> bool:
        return file in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
