"""Unit tests for the diagnostics reconciliation engine.

Tests verify that update_diagnostics, reset_diagnostics and
failed_suite_count translate test results into store operations
correctly.
"""

from itertools import count
from unittest.mock import MagicMock

import pytest

from suitemarks.core.diagnostics import (
    create_diagnostic,
    failed_suite_count,
    reset_diagnostics,
    update_diagnostics,
)
from suitemarks.core.models import (
    AssertionResult,
    AssertionState,
    DiagnosticRange,
    DiagnosticRecord,
    DiagnosticSeverity,
    FileResult,
)
from suitemarks.core.ports import DiagnosticsStorePort
from suitemarks.tests.fakes import FakeDiagnosticsStorePort

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def store() -> FakeDiagnosticsStorePort:
    """Create an empty fake store."""
    return FakeDiagnosticsStorePort()


@pytest.fixture
def line_numbers():
    """Hand out consecutive 1-based line numbers starting at 18."""
    return count(18)


@pytest.fixture
def make_assertion(line_numbers):
    """Factory for assertions on consecutive lines."""

    def _make(title: str, status: AssertionState) -> AssertionResult:
        return AssertionResult(
            title=title,
            status=status,
            message=f"{title} {status.value}",
            line=next(line_numbers),
        )

    return _make


def make_file_result(
    file: str,
    assertions: list[AssertionResult],
    status: AssertionState = AssertionState.KNOWN_FAIL,
) -> FileResult:
    """Create a FileResult whose message encodes file and status."""
    return FileResult(
        file=file,
        message=f"{file}:{status.value}",
        status=status,
        assertions=tuple(assertions),
    )


def error_at(line: int, message: str) -> DiagnosticRecord:
    """Expected zero-width error record at a zero-based line."""
    return DiagnosticRecord(
        range=DiagnosticRange(line, 0, line, 0),
        message=message,
        severity=DiagnosticSeverity.ERROR,
    )


# ============================================================================
# create_diagnostic
# ============================================================================


class TestCreateDiagnostic:
    """Tests for the shared record builder."""

    def test_converts_one_based_line_to_zero_based_range(self) -> None:
        """Line 18 becomes a zero-width range on line 17, column 0."""
        record = create_diagnostic("boom", 18)

        assert record == error_at(17, "boom")

    def test_missing_line_anchors_at_top_of_file(self) -> None:
        """No line means (0,0)-(0,0)."""
        assert create_diagnostic("boom").range == DiagnosticRange(0, 0, 0, 0)
        assert create_diagnostic("boom", None).range == DiagnosticRange(0, 0, 0, 0)

    def test_malformed_line_passes_through(self) -> None:
        """Negative lines are not rejected."""
        record = create_diagnostic("boom", -3)

        assert record.range == DiagnosticRange(-4, 0, -4, 0)

    def test_severity_is_always_error(self) -> None:
        """Records are errors."""
        assert create_diagnostic("x", 1).severity is DiagnosticSeverity.ERROR


# ============================================================================
# reset_diagnostics
# ============================================================================


class TestResetDiagnostics:
    """Tests for reset_diagnostics."""

    def test_clears_store_exactly_once(self, store: FakeDiagnosticsStorePort) -> None:
        """Reset calls clear() once and nothing else."""
        store.set("f1", [error_at(0, "old")])
        store.calls.clear()

        reset_diagnostics(store)

        assert store.calls == [("clear",)]
        assert store.entries == {}

    def test_clears_given_store_mock(self) -> None:
        """Reset works against any object offering the store operations."""
        mock_store = MagicMock(spec=DiagnosticsStorePort)

        reset_diagnostics(mock_store)

        mock_store.clear.assert_called_once_with()
        mock_store.set.assert_not_called()
        mock_store.delete.assert_not_called()
        mock_store.for_each.assert_not_called()


# ============================================================================
# update_diagnostics
# ============================================================================


class TestUpdateDiagnostics:
    """Tests for update_diagnostics."""

    def test_empty_batch_does_not_touch_store(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """A run reporting no files leaves earlier diagnostics alone."""
        store.set("previous", [error_at(3, "still failing")])
        store.calls.clear()

        update_diagnostics([], store)

        assert store.calls == []
        assert store.entries == {"previous": (error_at(3, "still failing"),)}

    def test_empty_batch_against_mock(self) -> None:
        """No set, delete or clear on an empty batch."""
        mock_store = MagicMock(spec=DiagnosticsStorePort)

        update_diagnostics([], mock_store)

        mock_store.set.assert_not_called()
        mock_store.delete.assert_not_called()
        mock_store.clear.assert_not_called()

    def test_failed_file_without_assertions(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """A file that failed to run gets one marker at the top."""
        result = make_file_result("f3", [])

        update_diagnostics([result], store)

        assert store.set_calls == [("f3", (error_at(0, "f3:KnownFail"),))]

    def test_failed_file_expands_every_assertion_in_order(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """Each assertion of a failed file yields one record, regardless of status."""
        assertions = [
            make_assertion("a1", AssertionState.KNOWN_FAIL),
            make_assertion("a2", AssertionState.KNOWN_SUCCESS),
            make_assertion("a3", AssertionState.KNOWN_FAIL),
        ]

        update_diagnostics([make_file_result("f1", assertions)], store)

        assert store.set_calls == [
            (
                "f1",
                (
                    error_at(17, "a1 KnownFail"),
                    error_at(18, "a2 KnownSuccess"),
                    error_at(19, "a3 KnownFail"),
                ),
            )
        ]

    def test_assertion_without_line_anchors_at_top(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """Assertions lacking a line fall back to (0,0)."""
        assertion = AssertionResult(
            title="a1",
            status=AssertionState.KNOWN_FAIL,
            message="no location",
            line=None,
        )

        update_diagnostics([make_file_result("f1", [assertion])], store)

        assert store.entries["f1"] == (error_at(0, "no location"),)

    @pytest.mark.parametrize(
        "status",
        [
            AssertionState.KNOWN_SUCCESS,
            AssertionState.UNKNOWN,
            AssertionState.KNOWN_SKIP,
            AssertionState.KNOWN_TODO,
        ],
    )
    def test_non_failing_file_is_deleted(
        self, store: FakeDiagnosticsStorePort, make_assertion, status: AssertionState
    ) -> None:
        """Anything but KnownFail removes the file's entry."""
        store.set("f1", [error_at(1, "stale")])
        store.calls.clear()

        result = make_file_result(
            "f1", [make_assertion("a1", AssertionState.KNOWN_FAIL)], status
        )
        update_diagnostics([result], store)

        assert store.calls == [("delete", "f1")]
        assert "f1" not in store.entries

    def test_set_replaces_previous_diagnostics(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """A re-run replaces a file's records instead of merging them."""
        first = make_file_result(
            "f1",
            [
                make_assertion("a1", AssertionState.KNOWN_FAIL),
                make_assertion("a2", AssertionState.KNOWN_FAIL),
            ],
        )
        second = make_file_result("f1", [])

        update_diagnostics([first], store)
        update_diagnostics([second], store)

        assert store.entries["f1"] == (error_at(0, "f1:KnownFail"),)

    def test_files_absent_from_batch_are_untouched(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """Partial runs leave unreported files alone."""
        store.set("other", [error_at(4, "other failure")])

        update_diagnostics(
            [make_file_result("f1", [], AssertionState.KNOWN_SUCCESS)], store
        )

        assert store.entries == {"other": (error_at(4, "other failure"),)}

    def test_store_calls_follow_input_order(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """set and delete calls are issued in the order results arrive."""
        batch = [
            make_file_result("b", [], AssertionState.KNOWN_SUCCESS),
            make_file_result("a", []),
            make_file_result("c", [], AssertionState.UNKNOWN),
            make_file_result("d", []),
        ]

        update_diagnostics(batch, store)

        assert store.mutation_calls() == [
            ("delete", "b"),
            ("set", "a"),
            ("delete", "c"),
            ("set", "d"),
        ]

    def test_does_not_mutate_input(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """The batch is left exactly as given."""
        batch = [
            make_file_result("f1", [make_assertion("a1", AssertionState.KNOWN_FAIL)]),
            make_file_result("f2", [], AssertionState.KNOWN_SUCCESS),
        ]
        snapshot = list(batch)

        update_diagnostics(batch, store)

        assert batch == snapshot

    def test_rerun_with_same_results_is_identical(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """Reconciling the same batch twice yields identical records."""
        batch = [
            make_file_result(
                "f1",
                [
                    make_assertion("a1", AssertionState.KNOWN_FAIL),
                    make_assertion("a2", AssertionState.KNOWN_SUCCESS),
                ],
            )
        ]

        update_diagnostics(batch, store)
        first = store.entries["f1"]
        update_diagnostics(batch, store)

        assert store.entries["f1"] == first
        assert store.set_calls[0] == store.set_calls[1]

    def test_mixed_results(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """Mixed batch: one set per failing file, one delete per other file."""
        all_tests = [
            make_file_result(
                "f1",
                [
                    make_assertion("a1", AssertionState.KNOWN_FAIL),
                    make_assertion("a2", AssertionState.KNOWN_FAIL),
                ],
            ),
            make_file_result(
                "f2",
                [
                    make_assertion("a3", AssertionState.KNOWN_FAIL),
                    make_assertion("a4", AssertionState.KNOWN_SUCCESS),
                    make_assertion("a5", AssertionState.KNOWN_FAIL),
                ],
            ),
            make_file_result("f3", []),
            make_file_result(
                "s4",
                [make_assertion("a6", AssertionState.KNOWN_SUCCESS)],
                AssertionState.KNOWN_SUCCESS,
            ),
            make_file_result("s5", [], AssertionState.UNKNOWN),
        ]
        failed = [t for t in all_tests if t.status == AssertionState.KNOWN_FAIL]
        not_failed = [t for t in all_tests if t.status != AssertionState.KNOWN_FAIL]

        update_diagnostics(all_tests, store)

        assert len(store.set_calls) == len(failed)
        assert len(store.delete_calls) == len(not_failed)
        assert store.clear_call_count == 0
        assert store.delete_calls == ["s4", "s5"]

        for (file, records), result in zip(store.set_calls, failed):
            assert file == result.file
            if not result.assertions:
                assert records == (error_at(0, result.message),)
            else:
                assert records == tuple(
                    error_at(a.line - 1, a.message) for a in result.assertions
                )

        total_records = sum(len(records) for _, records in store.set_calls)
        assert total_records == 2 + 3 + 1


# ============================================================================
# failed_suite_count
# ============================================================================


class TestFailedSuiteCount:
    """Tests for failed_suite_count."""

    def test_counts_visitor_invocations(self) -> None:
        """The count equals the number of enumeration callbacks."""
        mock_store = MagicMock(spec=DiagnosticsStorePort)
        invoke_count = 7

        def _enumerate(visitor):
            for i in range(invoke_count):
                visitor(f"file-{i}", ())

        mock_store.for_each.side_effect = _enumerate

        assert failed_suite_count(mock_store) == invoke_count

    def test_empty_store_counts_zero(self, store: FakeDiagnosticsStorePort) -> None:
        """No entries, no failing suites."""
        assert failed_suite_count(store) == 0

    def test_counts_files_not_assertions(
        self, store: FakeDiagnosticsStorePort, make_assertion
    ) -> None:
        """A file with many failing assertions counts once."""
        assertions = [
            make_assertion(f"a{i}", AssertionState.KNOWN_FAIL) for i in range(10)
        ]

        update_diagnostics([make_file_result("f1", assertions)], store)

        assert failed_suite_count(store) == 1

    def test_tracks_store_after_successive_runs(
        self, store: FakeDiagnosticsStorePort
    ) -> None:
        """The count re-derives from the store after each reconciliation."""
        update_diagnostics(
            [make_file_result("f1", []), make_file_result("f2", [])], store
        )
        assert failed_suite_count(store) == 2

        update_diagnostics(
            [make_file_result("f1", [], AssertionState.KNOWN_SUCCESS)], store
        )
        assert failed_suite_count(store) == 1

        reset_diagnostics(store)
        assert failed_suite_count(store) == 0

    def test_only_enumerates(self, store: FakeDiagnosticsStorePort) -> None:
        """Counting never mutates the store."""
        store.set("f1", [error_at(0, "x")])
        store.calls.clear()

        failed_suite_count(store)

        assert store.calls == [("for_each",)]


# ============================================================================
# End-to-end
# ============================================================================


def test_end_to_end_reconciliation(
    store: FakeDiagnosticsStorePort, make_assertion
) -> None:
    """Two failing files set, two other files deleted, count is two."""
    batch = [
        make_file_result(
            "F1",
            [
                make_assertion("a1", AssertionState.KNOWN_FAIL),
                make_assertion("a2", AssertionState.KNOWN_FAIL),
            ],
        ),
        make_file_result("F2", []),
        make_file_result("F3", [], AssertionState.KNOWN_SUCCESS),
        make_file_result("F4", [], AssertionState.UNKNOWN),
    ]

    update_diagnostics(batch, store)

    assert [file for file, _ in store.set_calls] == ["F1", "F2"]
    assert len(store.set_calls[0][1]) == 2
    assert store.set_calls[1][1] == (error_at(0, "F2:KnownFail"),)
    assert store.delete_calls == ["F3", "F4"]
    assert store.clear_call_count == 0
    assert failed_suite_count(store) == 2
