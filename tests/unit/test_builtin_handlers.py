"""Unit tests for patchlang.handlers.builtin: each handler against an in-memory graph."""
from __future__ import annotations

from typing import Any

import pytest

from patchlang.errors import GraphError, HandlerError
from patchlang.graph import ChannelKind, InMemoryGraph
from patchlang.handlers import HandlerContext, HandlerOutcome, builtin_handlers

pytestmark = pytest.mark.asyncio

CTX = HandlerContext(reason="unit test")


async def run(handler_id: str, graph: InMemoryGraph, **args: Any) -> HandlerOutcome:
    return await builtin_handlers.create(handler_id).run(graph, args, CTX)


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class TestChannelHandlers:
    async def test_noop_changes_nothing(self, graph: InMemoryGraph) -> None:
        outcome = await run("noop", graph)
        assert outcome.ok and not outcome.changed
        assert graph.audit_log == []

    async def test_rename(self, graph: InMemoryGraph, ids) -> None:
        outcome = await run("channel.rename", graph, id=ids.general, name="chat")
        assert outcome.affected_id == ids.general
        assert (await graph.get_channel(ids.general)).name == "chat"
        assert graph.audit_log[-1].reason == "unit test"

    async def test_rename_missing_channel(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError, match="channel not found"):
            await run("channel.rename", graph, id=ids.missing, name="x")

    async def test_move_under_category(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.move", graph, id=ids.loose, parent=ids.category)
        assert (await graph.get_channel(ids.loose)).parent_id == ids.category

    async def test_move_detach(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.move", graph, id=ids.general, parent=None)
        assert (await graph.get_channel(ids.general)).parent_id is None

    async def test_move_parent_must_be_category(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError, match="not a category"):
            await run("channel.move", graph, id=ids.loose, parent=ids.general)

    async def test_topic(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.topic", graph, id=ids.general, topic="Rules first")
        assert (await graph.get_channel(ids.general)).topic == "Rules first"

    async def test_topic_rejected_for_voice(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError, match="voice"):
            await run("channel.topic", graph, id=ids.voice, topic="x")

    async def test_topic_too_long_rejected_by_graph(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(GraphError):
            await run("channel.topic", graph, id=ids.general, topic="x" * 1025)

    async def test_slowmode(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.slowmode", graph, id=ids.general, seconds=30)
        assert (await graph.get_channel(ids.general)).slowmode == 30

    async def test_slowmode_rejected_for_category(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError):
            await run("channel.slowmode", graph, id=ids.category, seconds=30)

    async def test_nsfw(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.nsfw", graph, id=ids.general, enabled=True)
        assert (await graph.get_channel(ids.general)).nsfw is True

    async def test_create_under_category(self, graph: InMemoryGraph, ids) -> None:
        outcome = await run("channel.create", graph, name="news", ctype=ChannelKind.ANNOUNCEMENT, parent=ids.category)
        created = await graph.get_channel(outcome.affected_id)
        assert created.kind is ChannelKind.ANNOUNCEMENT
        assert created.parent_id == ids.category

    async def test_create_with_missing_parent(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError):
            await run("channel.create", graph, name="x", ctype=ChannelKind.TEXT, parent=ids.missing)

    async def test_delete(self, graph: InMemoryGraph, ids) -> None:
        await run("channel.delete", graph, id=ids.loose)
        assert await graph.get_channel(ids.loose) is None

    async def test_create_category(self, graph: InMemoryGraph) -> None:
        outcome = await run("category.create", graph, name="Voice")
        assert (await graph.get_channel(outcome.affected_id)).is_category


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


class TestRoleHandlers:
    async def test_rename(self, graph: InMemoryGraph, ids) -> None:
        await run("role.rename", graph, id=ids.member_role, name="Regular")
        assert (await graph.get_role(ids.member_role)).name == "Regular"

    async def test_rename_missing(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(HandlerError, match="role not found"):
            await run("role.rename", graph, id=ids.missing, name="x")

    async def test_create(self, graph: InMemoryGraph) -> None:
        outcome = await run("role.create", graph, name="Helper", color="#00ff00", hoist=True, mentionable=False)
        role = await graph.get_role(outcome.affected_id)
        assert (role.name, role.color, role.hoist) == ("Helper", "#00ff00", True)

    async def test_delete_removes_overwrites(self, graph: InMemoryGraph, ids) -> None:
        await run("role.delete", graph, id=ids.mod_role)
        assert await graph.get_role(ids.mod_role) is None
        assert ids.mod_role not in (await graph.get_channel(ids.general)).overwrites

    async def test_default_role_cannot_be_deleted(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(GraphError):
            await run("role.delete", graph, id=ids.guild)


# ---------------------------------------------------------------------------
# Permission overwrites
# ---------------------------------------------------------------------------


class TestPermHandlers:
    async def test_set_replaces_overwrite(self, graph: InMemoryGraph, ids) -> None:
        outcome = await run(
            "perm.set",
            graph,
            channel=ids.general,
            role=ids.mod_role,
            allow=frozenset({"ViewChannel"}),
            deny=frozenset({"SendMessages"}),
        )
        assert outcome.affected_id == f"{ids.general}:{ids.mod_role}"
        ow = (await graph.get_channel(ids.general)).overwrites[ids.mod_role]
        assert ow.allow == frozenset({"ViewChannel"})
        assert ow.deny == frozenset({"SendMessages"})

    async def test_set_deny_wins_over_allow(self, graph: InMemoryGraph, ids) -> None:
        await run(
            "perm.set",
            graph,
            channel=ids.general,
            role=ids.member_role,
            allow=frozenset({"ViewChannel", "SendMessages"}),
            deny=frozenset({"SendMessages"}),
        )
        ow = (await graph.get_channel(ids.general)).overwrites[ids.member_role]
        assert ow.allow == frozenset({"ViewChannel"})

    async def test_set_for_default_role(self, graph: InMemoryGraph, ids) -> None:
        await run("perm.set", graph, channel=ids.loose, role=ids.guild, allow=frozenset(), deny=frozenset({"ViewChannel"}))
        assert ids.guild in (await graph.get_channel(ids.loose)).overwrites

    async def test_set_unknown_role(self, graph: InMemoryGraph, ids) -> None:
        with pytest.raises(GraphError):
            await run("perm.set", graph, channel=ids.general, role=ids.missing, allow=frozenset(), deny=frozenset())

    async def test_remove(self, graph: InMemoryGraph, ids) -> None:
        await run("perm.remove", graph, channel=ids.general, role=ids.mod_role)
        assert (await graph.get_channel(ids.general)).overwrites == {}
