"""Patch script parser module.

Exports the ``ScriptParser`` class, the ``parse`` convenience function
and the diagnostic types it produces.
"""
from __future__ import annotations

from patchlang.core.diagnostics import Diagnostic, DiagnosticSeverity
from patchlang.parser.parser import DEFAULT_MAX_ACTIONS, ScriptParser, parse

__all__ = [
    "ScriptParser",
    "parse",
    "DEFAULT_MAX_ACTIONS",
    "Diagnostic",
    "DiagnosticSeverity",
]
