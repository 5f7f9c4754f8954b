"""Core value types that flow from the parser through to the executor.

All of them are frozen: an ``Action`` is created once by the parser and
only ever read afterwards; an ``ActionResult`` is created once by the
executor.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from patchlang.core.diagnostics import Diagnostic
from patchlang.schema.params import ParamSpec


@dataclass(frozen=True)
class Action:
    """One resolved, bound script line.

    Parameters
    ----------
    verb, resource_type:
        As written in the script (``resource_type`` is the concrete type,
        even when the operation matched through a wildcard).
    handler_id:
        Handler that will execute this action.
    arguments:
        Bound string value of every schema parameter, in schema order.
    line:
        1-based script line number.
    raw:
        The script line exactly as written.
    params:
        Parameter schema the arguments were bound against.
    destructive:
        Whether the resolved operation is irreversible.
    """

    verb: str
    resource_type: str
    handler_id: str
    arguments: Mapping[str, str]
    line: int
    raw: str
    params: tuple[ParamSpec, ...] = ()
    destructive: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))


@dataclass
class ParseResult:
    """Outcome of parsing one script.

    A non-empty ``errors`` list means the result must not be planned.
    """

    actions: list[Action] = field(default_factory=list)
    errors: list[Diagnostic] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Errors and warnings together, ordered by line."""
        return sorted([*self.errors, *self.warnings], key=lambda d: d.line)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of executing one action."""

    success: bool
    line: int
    handler_id: str
    error: str | None = None
    affected_id: str | None = None
    changed: bool = False

    def __str__(self) -> str:
        if self.success:
            target = f" -> {self.affected_id}" if self.affected_id else ""
            return f"L{self.line} {self.handler_id}: ok{target}"
        return f"L{self.line} {self.handler_id}: {self.error}"
