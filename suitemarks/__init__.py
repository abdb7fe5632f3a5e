"""Suitemarks: reconcile test-run results into editor diagnostics."""

__version__ = "0.1.0"
