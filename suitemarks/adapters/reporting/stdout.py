"""Stdout reporting adapter.

Implements DiagnosticsReportPort by printing compiler-style problem
lines (``path:line:col: severity: message``) that terminals and editor
problem matchers can pick up.
"""

from suitemarks.core.diagnostics import failed_suite_count
from suitemarks.core.models import DiagnosticRecord
from suitemarks.core.ports import DiagnosticsReportPort, DiagnosticsStorePort


class StdoutDiagnosticsReporter(DiagnosticsReportPort):
    """Prints store contents to stdout in human-readable form."""

    def __init__(self, verbose: bool = False):
        """Initialize stdout reporter.

        Args:
            verbose: If True, print full multi-line messages instead of
                their first line.
        """
        self.verbose = verbose

    def report(self, store: DiagnosticsStorePort) -> None:
        """Print every diagnostic followed by a summary line."""
        print(self.render(store))

    def render(self, store: DiagnosticsStorePort) -> str:
        """Return the text that report() prints."""
        lines: list[str] = []

        def _visit(file: str, records: tuple[DiagnosticRecord, ...]) -> None:
            for record in records:
                lines.append(self._format_record(file, record))

        store.for_each(_visit)
        lines.append(self._format_summary(failed_suite_count(store)))
        return "\n".join(lines)

    def _format_record(self, file: str, record: DiagnosticRecord) -> str:
        """Format one diagnostic with 1-based line and column."""
        start = record.range
        message = record.message if self.verbose else _first_line(record.message)
        return (
            f"{file}:{start.start_line + 1}:{start.start_character + 1}: "
            f"{record.severity.value}: {message}"
        )

    @staticmethod
    def _format_summary(failed_suites: int) -> str:
        if failed_suites == 0:
            return "No failing test suites"
        noun = "suite" if failed_suites == 1 else "suites"
        return f"{failed_suites} failing test {noun}"


def _first_line(message: str) -> str:
    for line in message.splitlines():
        if line.strip():
            return line.strip()
    return ""
