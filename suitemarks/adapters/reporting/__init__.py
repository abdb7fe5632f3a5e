"""Reporting adapters for presenting diagnostics to developers.

Implementations support multiple output channels:
- Stdout (compiler-style problem lines)
"""
