"""Diagnostic types produced by the patch script parser.

A ``Diagnostic`` is a message attached to one script line.  The parser
never raises on bad input; it records diagnostics and keeps going so a
single pass reports every problem.

Codes
-----
    PL001  ERROR    Invalid line format (verb and resource type required)
    PL002  ERROR    Unknown operation
    PL003  ERROR    Too many actions
    PL004  ERROR    Unterminated quoted value
    PL101  WARNING  Argument value will be rejected by its parameter kind
    PL102  WARNING  Unused arguments
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single parser finding.

    Parameters
    ----------
    severity:
        ERROR blocks planning; WARNING is informational.
    code:
        Short machine-readable identifier, e.g. ``"PL002"``.
    message:
        Human-readable description of the problem.
    line:
        1-based script line number.
    suggestion:
        Optional human-readable fix suggestion.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    line: int
    suggestion: str | None = field(default=None)

    def __str__(self) -> str:
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"line {self.line}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic blocks planning."""
        return self.severity == DiagnosticSeverity.ERROR


def error(code: str, message: str, line: int, suggestion: str | None = None) -> Diagnostic:
    return Diagnostic(DiagnosticSeverity.ERROR, code, message, line, suggestion)


def warning(code: str, message: str, line: int, suggestion: str | None = None) -> Diagnostic:
    return Diagnostic(DiagnosticSeverity.WARNING, code, message, line, suggestion)
