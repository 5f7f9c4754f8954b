"""Built-in handlers for channels, categories, roles and overwrites.

``builtin_handlers`` is populated at import time through the
``register`` decorator.  It is never mutated afterwards; engines take a
``copy()`` of it (see ``default_catalog``) before adding anything.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from patchlang.errors import HandlerError
from patchlang.graph.models import NSFW_KINDS, SLOWMODE_KINDS, TOPIC_KINDS, ChannelKind
from patchlang.graph.protocol import ResourceGraph
from patchlang.handlers.base import Handler, HandlerContext, HandlerOutcome
from patchlang.handlers.registry import ENTRYPOINT_GROUP, HandlerRegistry
from patchlang.schema.params import ParamKind

builtin_handlers = HandlerRegistry("builtin")


def default_catalog(load_entrypoints: bool = True) -> HandlerRegistry:
    """Return a fresh catalog holding the built-ins plus installed plugins."""
    catalog = builtin_handlers.copy("default")
    if load_entrypoints:
        catalog.load_entrypoints(ENTRYPOINT_GROUP)
    return catalog


@builtin_handlers.register("noop")
class Noop(Handler):
    summary = "Do nothing (used by exported templates)"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        return HandlerOutcome(changed=False)


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


@builtin_handlers.register("channel.rename")
class ChannelRename(Handler):
    params = {"id": ParamKind.ID, "name": ParamKind.NAME}
    summary = "Rename a channel or category"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        await graph.rename_channel(channel.id, args["name"], reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("channel.move")
class ChannelMove(Handler):
    params = {"id": ParamKind.ID, "parent": ParamKind.OPTIONAL_ID}
    summary = "Move a channel under a category (parent=none detaches it)"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        parent_id = args["parent"]
        if parent_id is not None:
            parent = await self.require_channel(graph, parent_id)
            if not parent.is_category:
                raise HandlerError(f"parent {parent_id} is not a category")
        await graph.set_channel_parent(channel.id, parent_id, reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("channel.topic")
class ChannelTopic(Handler):
    params = {"id": ParamKind.ID, "topic": ParamKind.TEXT}
    summary = "Set a channel topic"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        if channel.kind not in TOPIC_KINDS:
            raise HandlerError(f"topic is not supported for {channel.kind.value} channels")
        await graph.set_channel_topic(channel.id, args["topic"], reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("channel.slowmode")
class ChannelSlowmode(Handler):
    params = {"id": ParamKind.ID, "seconds": ParamKind.INT}
    summary = "Set per-user slowmode in seconds"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        if channel.kind not in SLOWMODE_KINDS:
            raise HandlerError(f"slowmode is not supported for {channel.kind.value} channels")
        await graph.set_channel_slowmode(channel.id, args["seconds"], reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("channel.nsfw")
class ChannelNsfw(Handler):
    params = {"id": ParamKind.ID, "enabled": ParamKind.BOOL}
    summary = "Toggle the age-restricted flag"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        if channel.kind not in NSFW_KINDS:
            raise HandlerError(f"nsfw is not supported for {channel.kind.value} channels")
        await graph.set_channel_nsfw(channel.id, args["enabled"], reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("channel.create")
class ChannelCreate(Handler):
    params = {"name": ParamKind.NAME, "ctype": ParamKind.CHANNEL_KIND, "parent": ParamKind.OPTIONAL_ID}
    summary = "Create a channel, optionally under a category"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        parent_id = args["parent"]
        if parent_id is not None:
            parent = await self.require_channel(graph, parent_id)
            if not parent.is_category:
                raise HandlerError(f"parent {parent_id} is not a category")
        created = await graph.create_channel(args["name"], args["ctype"], parent_id, reason=ctx.reason)
        return HandlerOutcome(affected_id=created.id)


@builtin_handlers.register("channel.delete")
class ChannelDelete(Handler):
    params = {"id": ParamKind.ID}
    destructive = True
    summary = "Delete a channel or category"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        await graph.delete_channel(channel.id, reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


@builtin_handlers.register("category.create")
class CategoryCreate(Handler):
    params = {"name": ParamKind.NAME}
    summary = "Create a category"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        created = await graph.create_channel(args["name"], ChannelKind.CATEGORY, None, reason=ctx.reason)
        return HandlerOutcome(affected_id=created.id)


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------


@builtin_handlers.register("role.rename")
class RoleRename(Handler):
    params = {"id": ParamKind.ID, "name": ParamKind.NAME}
    summary = "Rename a role"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        role = await self.require_role(graph, args["id"])
        await graph.rename_role(role.id, args["name"], reason=ctx.reason)
        return HandlerOutcome(affected_id=role.id)


@builtin_handlers.register("role.create")
class RoleCreate(Handler):
    params = {
        "name": ParamKind.NAME,
        "color": ParamKind.COLOR,
        "hoist": ParamKind.OPTIONAL_BOOL,
        "mentionable": ParamKind.OPTIONAL_BOOL,
    }
    summary = "Create a role"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        created = await graph.create_role(
            args["name"],
            color=args.get("color", ""),
            hoist=bool(args.get("hoist")),
            mentionable=bool(args.get("mentionable")),
            reason=ctx.reason,
        )
        return HandlerOutcome(affected_id=created.id)


@builtin_handlers.register("role.delete")
class RoleDelete(Handler):
    params = {"id": ParamKind.ID}
    destructive = True
    summary = "Delete a role"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        role = await self.require_role(graph, args["id"])
        await graph.delete_role(role.id, reason=ctx.reason)
        return HandlerOutcome(affected_id=role.id)


# ---------------------------------------------------------------------------
# Permission overwrites
# ---------------------------------------------------------------------------


@builtin_handlers.register("perm.set")
class PermSet(Handler):
    params = {
        "channel": ParamKind.ID,
        "role": ParamKind.ID,
        "allow": ParamKind.PERMISSIONS,
        "deny": ParamKind.PERMISSIONS,
    }
    summary = "Replace a role's permission overwrite on a channel"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["channel"])
        deny: frozenset[str] = args.get("deny", frozenset())
        # a flag listed on both sides ends up denied
        allow = args.get("allow", frozenset()) - deny
        await graph.set_permission_overwrite(channel.id, args["role"], allow, deny, reason=ctx.reason)
        return HandlerOutcome(affected_id=f"{channel.id}:{args['role']}")


@builtin_handlers.register("perm.remove")
class PermRemove(Handler):
    params = {"channel": ParamKind.ID, "role": ParamKind.ID}
    summary = "Remove a role's permission overwrite from a channel"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["channel"])
        await graph.remove_permission_overwrite(channel.id, args["role"], reason=ctx.reason)
        return HandlerOutcome(affected_id=f"{channel.id}:{args['role']}")
