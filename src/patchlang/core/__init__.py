"""Core value types: ``Action``, ``ParseResult``, ``ActionResult``, ``Diagnostic``.

Submodules in core/ should not import from parser/, workflow/ or cli/.
"""
from __future__ import annotations

from patchlang.core.diagnostics import Diagnostic, DiagnosticSeverity
from patchlang.core.models import Action, ActionResult, ParseResult

__all__ = ["Action", "ActionResult", "ParseResult", "Diagnostic", "DiagnosticSeverity"]
