"""Integration tests.

Integration tests exercise the full stack: snapshot files, template
export, the operation map, planning, confirmation and application.
They are kept in a separate directory so they can be excluded from
the fast unit-test run with ``pytest tests/unit/``.
"""
from __future__ import annotations
