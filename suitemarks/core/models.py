"""Domain models for the Suitemarks diagnostic engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.

Values are carried as given: nothing here validates line numbers or
messages, so upstream inconsistencies show up in the rendered diagnostics.
"""

from dataclasses import dataclass, field
from enum import Enum


class AssertionState(Enum):
    """Outcome of a test file or of one assertion inside it.

    Spellings match the reconciliation states reported by Jest tooling.
    """

    KNOWN_FAIL = "KnownFail"
    KNOWN_SUCCESS = "KnownSuccess"
    KNOWN_SKIP = "KnownSkip"
    KNOWN_TODO = "KnownTodo"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class AssertionResult:
    """One expectation within a test file."""

    title: str
    status: AssertionState
    message: str
    line: int | None = None  # 1-based source line


@dataclass(frozen=True)
class FileResult:
    """Aggregate outcome for one test file.

    ``status`` is the runner's verdict for the whole file and is never
    derived from the individual assertions.
    """

    file: str
    message: str
    status: AssertionState
    assertions: tuple[AssertionResult, ...] = field(default_factory=tuple)


class DiagnosticSeverity(Enum):
    """Severity levels understood by editor problem panels."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


@dataclass(frozen=True)
class DiagnosticRange:
    """Zero-based position span inside a file."""

    start_line: int
    start_character: int
    end_line: int
    end_character: int


@dataclass(frozen=True)
class DiagnosticRecord:
    """A single problem marker attached to a file."""

    range: DiagnosticRange
    message: str
    severity: DiagnosticSeverity
