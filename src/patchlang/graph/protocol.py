"""The Resource Management API boundary.

Handlers talk to the target graph exclusively through this protocol.
Production deployments wrap their platform client in an object that
satisfies it; ``InMemoryGraph`` is the bundled implementation.

Every mutating method performs exactly one remote call and accepts the
audit ``reason`` recorded by the platform.  Lookups return ``None`` for
unknown ids instead of raising.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from patchlang.graph.models import Channel, ChannelKind, Role


@runtime_checkable
class ResourceGraph(Protocol):
    """Async interface to one target graph (one server, one tenant...)."""

    @property
    def id(self) -> str: ...

    # -- lookups -----------------------------------------------------------

    async def get_channel(self, channel_id: str) -> Channel | None: ...

    async def get_role(self, role_id: str) -> Role | None: ...

    def channels(self) -> Iterable[Channel]: ...

    def roles(self) -> Iterable[Role]: ...

    # -- channel mutations -------------------------------------------------

    async def create_channel(
        self, name: str, kind: ChannelKind, parent_id: str | None, *, reason: str
    ) -> Channel: ...

    async def rename_channel(self, channel_id: str, name: str, *, reason: str) -> None: ...

    async def set_channel_parent(
        self, channel_id: str, parent_id: str | None, *, reason: str
    ) -> None: ...

    async def set_channel_topic(self, channel_id: str, topic: str, *, reason: str) -> None: ...

    async def set_channel_slowmode(self, channel_id: str, seconds: int, *, reason: str) -> None: ...

    async def set_channel_nsfw(self, channel_id: str, enabled: bool, *, reason: str) -> None: ...

    async def delete_channel(self, channel_id: str, *, reason: str) -> None: ...

    # -- role mutations ----------------------------------------------------

    async def create_role(
        self,
        name: str,
        *,
        color: str,
        hoist: bool,
        mentionable: bool,
        reason: str,
    ) -> Role: ...

    async def rename_role(self, role_id: str, name: str, *, reason: str) -> None: ...

    async def delete_role(self, role_id: str, *, reason: str) -> None: ...

    # -- permission overwrites ---------------------------------------------

    async def set_permission_overwrite(
        self,
        channel_id: str,
        role_id: str,
        allow: frozenset[str],
        deny: frozenset[str],
        *,
        reason: str,
    ) -> None: ...

    async def remove_permission_overwrite(
        self, channel_id: str, role_id: str, *, reason: str
    ) -> None: ...
