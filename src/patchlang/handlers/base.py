"""Handler contract: the runtime implementation behind a handler id.

A handler receives the target graph, the action's arguments already
converted through its parameter schema, and a ``HandlerContext``.  It
must check that the entities it references exist, perform exactly one
mutating call on the graph (or a validated no-op), and return a
``HandlerOutcome``.  Any precondition failure is reported by raising
``HandlerError`` with a message naming what was wrong.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from patchlang.errors import HandlerError
from patchlang.graph.models import Channel, Role
from patchlang.graph.protocol import ResourceGraph
from patchlang.schema.params import ParamKind, ParamSpec


@dataclass(frozen=True)
class HandlerContext:
    """Per-apply information passed to every handler.

    Parameters
    ----------
    reason:
        Audit reason forwarded to every mutating graph call.
    """

    reason: str = ""


@dataclass(frozen=True)
class HandlerOutcome:
    """What a handler reports back on success."""

    ok: bool = True
    changed: bool = True
    affected_id: str | None = None


class Handler(ABC):
    """Base class for all handlers.

    Class attributes
    ----------------
    params:
        Declared kind of each parameter the handler reads, by name.  The
        operation map decides parameter *order*; names it lists that are
        not declared here are bound as free text.
    destructive:
        True when the mutation cannot be undone (delete-class handlers).
    summary:
        One-line description shown by ``patchlang handlers``.
    """

    params: ClassVar[Mapping[str, ParamKind]] = {}
    destructive: ClassVar[bool] = False
    summary: ClassVar[str] = ""

    @abstractmethod
    async def run(
        self,
        graph: ResourceGraph,
        args: Mapping[str, Any],
        ctx: HandlerContext,
    ) -> HandlerOutcome:
        """Perform the handler's single mutation."""

    @classmethod
    def schema(cls, names: Sequence[str]) -> tuple[ParamSpec, ...]:
        """Return the parameter schema for ``names`` in the given order."""
        return tuple(ParamSpec(n, cls.params.get(n, ParamKind.TEXT)) for n in names)

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    async def require_channel(graph: ResourceGraph, channel_id: str) -> Channel:
        channel = await graph.get_channel(channel_id)
        if channel is None:
            raise HandlerError(f"channel not found: {channel_id}")
        return channel

    @staticmethod
    async def require_role(graph: ResourceGraph, role_id: str) -> Role:
        role = await graph.get_role(role_id)
        if role is None:
            raise HandlerError(f"role not found: {role_id}")
        return role
