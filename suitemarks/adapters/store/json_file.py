"""JSON file diagnostics store adapter.

Implements DiagnosticsStorePort on top of a single JSON document so that
diagnostics survive between command-line invocations. The document is
validated with pydantic on load and rewritten atomically after every
mutation.

Document layout::

    {
      "version": 1,
      "files": {
        "/abs/path/to/file.test.js": [
          {"range": {"start_line": 17, "start_character": 0,
                     "end_line": 17, "end_character": 0},
           "message": "expected 1 to be 2",
           "severity": "error"}
        ]
      }
    }
"""

import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from suitemarks.core.models import DiagnosticRange, DiagnosticRecord, DiagnosticSeverity

from .memory import InMemoryDiagnosticsStore

logger = logging.getLogger(__name__)


class StoredRange(BaseModel):
    """On-disk form of DiagnosticRange."""

    start_line: int
    start_character: int
    end_line: int
    end_character: int


class StoredDiagnostic(BaseModel):
    """On-disk form of DiagnosticRecord."""

    range: StoredRange
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR


class StoreDocument(BaseModel):
    """Top-level JSON document."""

    version: Literal[1] = 1
    files: dict[str, list[StoredDiagnostic]] = Field(default_factory=dict)


def _to_stored(record: DiagnosticRecord) -> StoredDiagnostic:
    r = record.range
    return StoredDiagnostic(
        range=StoredRange(
            start_line=r.start_line,
            start_character=r.start_character,
            end_line=r.end_line,
            end_character=r.end_character,
        ),
        message=record.message,
        severity=record.severity,
    )


def _from_stored(stored: StoredDiagnostic) -> DiagnosticRecord:
    r = stored.range
    return DiagnosticRecord(
        range=DiagnosticRange(
            r.start_line, r.start_character, r.end_line, r.end_character
        ),
        message=stored.message,
        severity=stored.severity,
    )


class JsonFileDiagnosticsStore(InMemoryDiagnosticsStore):
    """Diagnostics store persisted to a JSON file."""

    def __init__(self, path: str | Path):
        """Open the store, loading any existing document.

        Args:
            path: Location of the JSON document. Parent directories are
                created on first write. A missing file means an empty store.

        Raises:
            ValueError: If the file exists but cannot be read or parsed.
        """
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.debug(f"No diagnostics store at {self.path}, starting empty")
            return

        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Cannot read diagnostics store {self.path}: {e}") from e

        try:
            document = StoreDocument.model_validate_json(raw)
        except ValidationError as e:
            raise ValueError(f"Corrupt diagnostics store {self.path}: {e}") from e

        for file, stored in document.files.items():
            # Bypass _save while loading.
            super().set(file, [_from_stored(s) for s in stored])

        logger.debug(f"Loaded diagnostics for {len(self)} files from {self.path}")

    def _save(self) -> None:
        document = StoreDocument()

        def _collect(file: str, records: tuple[DiagnosticRecord, ...]) -> None:
            document.files[file] = [_to_stored(r) for r in records]

        super().for_each(_collect)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def set(self, file: str, records: Sequence[DiagnosticRecord]) -> None:
        """Replace the diagnostics for a file and persist."""
        super().set(file, records)
        self._save()

    def delete(self, file: str) -> None:
        """Remove the entry for a file and persist if it existed."""
        if file not in self:
            return
        super().delete(file)
        self._save()

    def clear(self) -> None:
        """Remove every entry and persist."""
        super().clear()
        self._save()
