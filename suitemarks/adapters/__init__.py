"""External adapters for the Suitemarks diagnostic engine.

This package contains all external dependencies (pydantic, the file
system, the terminal) and provides implementations of the core port
interfaces.

Adapter Organization:

- store/: Diagnostics stores (in-memory, JSON file)
- results/: Readers turning runner output into FileResults (Jest JSON)
- reporting/: Human-readable rendering of store contents (stdout)
- cli/: Command handlers used by the command-line entry point
"""
