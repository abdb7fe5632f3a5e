"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeDiagnosticsStorePort: In-memory store recording every call
- FakeTestResultSource: Canned test results
"""

from .results import FakeTestResultSource
from .store import FakeDiagnosticsStorePort

__all__ = [
    "FakeDiagnosticsStorePort",
    "FakeTestResultSource",
]
