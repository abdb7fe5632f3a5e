"""Jest JSON report adapter.

Implements TestResultSourcePort over the report written by
``jest --json --testLocationInResults --outputFile=<path>``.

Normalization rules:
- File verdicts: "failed" -> KNOWN_FAIL, "passed" -> KNOWN_SUCCESS,
  anything else -> UNKNOWN.
- Assertion verdicts additionally map pending/skipped/disabled to
  KNOWN_SKIP and todo to KNOWN_TODO.
- Failed assertions take their line from the first stack frame in the
  failure text that points into the test file, falling back to
  ``location.line``. Other assertions use ``location.line``.
"""

import logging
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from suitemarks.core.models import AssertionResult, AssertionState, FileResult
from suitemarks.core.ports import TestResultSourcePort

logger = logging.getLogger(__name__)

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

_FILE_STATES: dict[str, AssertionState] = {
    "failed": AssertionState.KNOWN_FAIL,
    "passed": AssertionState.KNOWN_SUCCESS,
}

_ASSERTION_STATES: dict[str, AssertionState] = {
    "failed": AssertionState.KNOWN_FAIL,
    "passed": AssertionState.KNOWN_SUCCESS,
    "pending": AssertionState.KNOWN_SKIP,
    "skipped": AssertionState.KNOWN_SKIP,
    "disabled": AssertionState.KNOWN_SKIP,
    "todo": AssertionState.KNOWN_TODO,
}


# ============================================================================
# Report schema (only the fields we read; unknown keys are ignored)
# ============================================================================


class JestLocation(BaseModel):
    """Source position Jest records with --testLocationInResults."""

    line: int
    column: int | None = None


class JestAssertionResult(BaseModel):
    """One entry of ``testResults[].assertionResults``."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = ""
    status: str = ""
    failure_messages: list[str] = Field(default_factory=list, alias="failureMessages")
    location: JestLocation | None = None


class JestTestFileResult(BaseModel):
    """One entry of ``testResults``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    status: str = ""
    message: str = ""
    assertion_results: list[JestAssertionResult] = Field(
        default_factory=list, alias="assertionResults"
    )


class JestReport(BaseModel):
    """Top-level ``--json`` report."""

    model_config = ConfigDict(populate_by_name=True)

    test_results: list[JestTestFileResult] = Field(
        default_factory=list, alias="testResults"
    )


# ============================================================================
# Normalization
# ============================================================================


def strip_ansi(text: str) -> str:
    """Remove terminal color codes Jest embeds in failure output."""
    return _ANSI_ESCAPE.sub("", text)


def line_from_failure(message: str, file: str) -> int | None:
    """Find the 1-based line of the first stack frame inside ``file``.

    Args:
        message: Failure text, usually including a stack trace.
        file: Path of the test file the assertion belongs to.

    Returns:
        The line number, or None if no frame points into the file.
    """
    frame = re.compile(r"(?:^|[\s(])" + re.escape(file) + r":(?P<line>\d+):\d+")
    match = frame.search(message)
    return int(match.group("line")) if match else None


def _to_assertion(raw: JestAssertionResult, file: str) -> AssertionResult:
    status = _ASSERTION_STATES.get(raw.status, AssertionState.UNKNOWN)
    message = strip_ansi("\n".join(raw.failure_messages))

    location_line = raw.location.line if raw.location is not None else None
    if status == AssertionState.KNOWN_FAIL:
        # The failing expect, not the test declaration.
        line = line_from_failure(message, file)
        if line is None:
            line = location_line
    else:
        line = location_line

    return AssertionResult(
        title=raw.title,
        status=status,
        message=message,
        line=line,
    )


def _to_file_result(raw: JestTestFileResult) -> FileResult:
    return FileResult(
        file=raw.name,
        message=strip_ansi(raw.message),
        status=_FILE_STATES.get(raw.status, AssertionState.UNKNOWN),
        assertions=tuple(_to_assertion(a, raw.name) for a in raw.assertion_results),
    )


def parse_jest_report(raw: str) -> list[FileResult]:
    """Parse the text of a Jest JSON report into FileResults.

    Args:
        raw: Report contents.

    Returns:
        One FileResult per test file, in report order.

    Raises:
        ValueError: If the text is not valid JSON or not a Jest report.
    """
    try:
        report = JestReport.model_validate_json(raw)
    except ValidationError as e:
        raise ValueError(f"Invalid Jest report: {e}") from e

    return [_to_file_result(r) for r in report.test_results]


class JestReportSource(TestResultSourcePort):
    """Reads FileResults from a Jest JSON report on disk."""

    def __init__(self, report_path: str | Path):
        """Initialize the source.

        Args:
            report_path: Path of the ``--json`` output file.
        """
        self.report_path = Path(report_path)

    def load_results(self) -> list[FileResult]:
        """Read and normalize the report.

        Raises:
            ValueError: If the report is missing, unreadable or malformed.
        """
        try:
            raw = self.report_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValueError(f"Cannot read Jest report {self.report_path}: {e}") from e

        results = parse_jest_report(raw)
        logger.info(f"Loaded {len(results)} test files from {self.report_path}")
        return results
