"""Diagnostics store adapters.

Implementations support multiple backends:
- In-memory (single process, host-embedded)
- JSON file (persists between command-line runs)
"""
