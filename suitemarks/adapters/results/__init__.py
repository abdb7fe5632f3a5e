"""Test result source adapters.

Implementations read runner output and normalize it:
- Jest JSON report (``jest --json --testLocationInResults``)
"""
