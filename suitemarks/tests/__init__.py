"""Test suite for Suitemarks.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - File-backed adapters run against pytest's tmp_path
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory implementations of DiagnosticsStorePort, TestResultSourcePort
   - Used by core unit tests
"""
