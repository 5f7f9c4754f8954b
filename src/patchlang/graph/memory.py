"""In-memory ``ResourceGraph`` implementation.

Used by the CLI (backed by a snapshot file) and by the test-suite.  It
enforces the structural rules a real platform would reject with an API
error, raising ``GraphError`` in those cases, and keeps an ordered
audit log of every successful mutation.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from patchlang.errors import GraphError
from patchlang.graph.models import Channel, ChannelKind, Overwrite, Role

logger = logging.getLogger(__name__)

_ID_FLOOR = 100_000_000_000_000_000


@dataclass(frozen=True)
class AuditEntry:
    """One mutation recorded by ``InMemoryGraph``."""

    operation: str
    target_id: str
    reason: str


class InMemoryGraph:
    """A mutable resource graph held entirely in memory.

    Parameters
    ----------
    graph_id:
        Identifier of the graph itself.  A role with this id is the
        implicit default role.
    name:
        Display name, kept for snapshots.
    channels, roles:
        Initial content.
    """

    def __init__(
        self,
        graph_id: str,
        name: str = "",
        channels: Iterable[Channel] = (),
        roles: Iterable[Role] = (),
    ) -> None:
        self._id = graph_id
        self.name = name
        self._channels: dict[str, Channel] = {c.id: c for c in channels}
        self._roles: dict[str, Role] = {r.id: r for r in roles}
        self.audit_log: list[AuditEntry] = []
        known = [int(i) for i in (*self._channels, *self._roles, graph_id) if i.isdigit()]
        self._next_id = max([_ID_FLOOR, *known]) + 1

    @property
    def id(self) -> str:
        return self._id

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_channel(self, channel_id: str) -> Channel | None:
        return self._channels.get(channel_id)

    async def get_role(self, role_id: str) -> Role | None:
        return self._roles.get(role_id)

    def channels(self) -> list[Channel]:
        return list(self._channels.values())

    def roles(self) -> list[Role]:
        return list(self._roles.values())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _allocate_id(self) -> str:
        new_id = str(self._next_id)
        self._next_id += 1
        return new_id

    def _channel(self, channel_id: str) -> Channel:
        try:
            return self._channels[channel_id]
        except KeyError:
            raise GraphError(f"unknown channel: {channel_id}") from None

    def _role(self, role_id: str) -> Role:
        try:
            return self._roles[role_id]
        except KeyError:
            raise GraphError(f"unknown role: {role_id}") from None

    def _check_parent(self, parent_id: str | None) -> None:
        if parent_id is None:
            return
        parent = self._channels.get(parent_id)
        if parent is None:
            raise GraphError(f"unknown parent category: {parent_id}")
        if not parent.is_category:
            raise GraphError(f"parent {parent_id} is not a category")

    def _record(self, operation: str, target_id: str, reason: str) -> None:
        self.audit_log.append(AuditEntry(operation, target_id, reason))
        logger.debug("graph %s: %s %s", self._id, operation, target_id)

    # ------------------------------------------------------------------
    # Channel mutations
    # ------------------------------------------------------------------

    async def create_channel(
        self, name: str, kind: ChannelKind, parent_id: str | None, *, reason: str
    ) -> Channel:
        if kind is ChannelKind.CATEGORY and parent_id is not None:
            raise GraphError("a category cannot have a parent")
        self._check_parent(parent_id)
        channel = Channel(id=self._allocate_id(), name=name, kind=kind, parent_id=parent_id)
        self._channels[channel.id] = channel
        self._record("create_channel", channel.id, reason)
        return channel

    async def rename_channel(self, channel_id: str, name: str, *, reason: str) -> None:
        self._channel(channel_id).name = name
        self._record("rename_channel", channel_id, reason)

    async def set_channel_parent(self, channel_id: str, parent_id: str | None, *, reason: str) -> None:
        channel = self._channel(channel_id)
        if channel.is_category and parent_id is not None:
            raise GraphError("a category cannot have a parent")
        self._check_parent(parent_id)
        channel.parent_id = parent_id
        self._record("set_channel_parent", channel_id, reason)

    async def set_channel_topic(self, channel_id: str, topic: str, *, reason: str) -> None:
        if len(topic) > 1024:
            raise GraphError("topic longer than 1024 characters")
        self._channel(channel_id).topic = topic
        self._record("set_channel_topic", channel_id, reason)

    async def set_channel_slowmode(self, channel_id: str, seconds: int, *, reason: str) -> None:
        if seconds > 21600:
            raise GraphError("slowmode must be at most 21600 seconds")
        self._channel(channel_id).slowmode = seconds
        self._record("set_channel_slowmode", channel_id, reason)

    async def set_channel_nsfw(self, channel_id: str, enabled: bool, *, reason: str) -> None:
        self._channel(channel_id).nsfw = enabled
        self._record("set_channel_nsfw", channel_id, reason)

    async def delete_channel(self, channel_id: str, *, reason: str) -> None:
        channel = self._channel(channel_id)
        del self._channels[channel_id]
        if channel.is_category:
            for child in self._channels.values():
                if child.parent_id == channel_id:
                    child.parent_id = None
        self._record("delete_channel", channel_id, reason)

    # ------------------------------------------------------------------
    # Role mutations
    # ------------------------------------------------------------------

    async def create_role(
        self,
        name: str,
        *,
        color: str,
        hoist: bool,
        mentionable: bool,
        reason: str,
    ) -> Role:
        role = Role(id=self._allocate_id(), name=name, color=color, hoist=hoist, mentionable=mentionable)
        self._roles[role.id] = role
        self._record("create_role", role.id, reason)
        return role

    async def rename_role(self, role_id: str, name: str, *, reason: str) -> None:
        self._role(role_id).name = name
        self._record("rename_role", role_id, reason)

    async def delete_role(self, role_id: str, *, reason: str) -> None:
        if role_id == self._id:
            raise GraphError("the default role cannot be deleted")
        self._role(role_id)
        del self._roles[role_id]
        for channel in self._channels.values():
            channel.overwrites.pop(role_id, None)
        self._record("delete_role", role_id, reason)

    # ------------------------------------------------------------------
    # Permission overwrites
    # ------------------------------------------------------------------

    async def set_permission_overwrite(
        self,
        channel_id: str,
        role_id: str,
        allow: frozenset[str],
        deny: frozenset[str],
        *,
        reason: str,
    ) -> None:
        channel = self._channel(channel_id)
        if role_id != self._id and role_id not in self._roles:
            raise GraphError(f"unknown role: {role_id}")
        channel.overwrites[role_id] = Overwrite(role_id=role_id, allow=allow, deny=deny)
        self._record("set_permission_overwrite", f"{channel_id}:{role_id}", reason)

    async def remove_permission_overwrite(self, channel_id: str, role_id: str, *, reason: str) -> None:
        self._channel(channel_id).overwrites.pop(role_id, None)
        self._record("remove_permission_overwrite", f"{channel_id}:{role_id}", reason)
