"""Command-line interface adapters.

Maps reconcile, reset, count and show commands onto the core
diagnostics operations.
"""
