#!/usr/bin/env python3
"""Example: Custom handlers and operation maps

Registers a new handler in a copy of the default catalog and binds it
to a new verb through an operation map written inline.  Packages can
ship handlers the same way through the ``patchlang.handlers``
entry-point group.

Usage:
    python examples/03_custom_handler.py

Requirements:
    pip install patchlang
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from patchlang.engine import EngineContext
from patchlang.graph import ResourceGraph, load_snapshot
from patchlang.handlers import Handler, HandlerContext, HandlerOutcome, default_catalog
from patchlang.registry import OperationRegistry
from patchlang.schema import ParamKind
from patchlang.workflow import render_report

SNAPSHOT = Path(__file__).parent / "guild.yaml"

catalog = default_catalog().copy("example")


@catalog.register("channel.archive")
class ArchiveChannel(Handler):
    """Prefix a channel name with ``archived-`` and clear its topic."""

    params = {"id": ParamKind.ID}
    summary = "Mark a channel as archived"

    async def run(self, graph: ResourceGraph, args: Mapping[str, Any], ctx: HandlerContext) -> HandlerOutcome:
        channel = await self.require_channel(graph, args["id"])
        if channel.name.startswith("archived-"):
            return HandlerOutcome(changed=False, affected_id=channel.id)
        await graph.rename_channel(channel.id, f"archived-{channel.name}", reason=ctx.reason)
        await graph.set_channel_topic(channel.id, "", reason=ctx.reason)
        return HandlerOutcome(affected_id=channel.id)


OPS = """
keep:* = noop
archive:channel = channel.archive:id
rename:channel = channel.rename:id,name
"""


async def main() -> None:
    registry = OperationRegistry.from_text(OPS, catalog)
    engine = EngineContext(catalog=catalog, registry=registry)
    graph = load_snapshot(SNAPSHOT)
    workflow = engine.workflow({graph.id: graph})

    plan = await workflow.plan(
        graph.id,
        "archive channel 700000000000000004\narchive channel 700000000000000999\n",
    )
    print(plan.summary_text)
    report = await workflow.apply(graph.id, plan.confirmation_code, reason="archive sweep")
    print(render_report(report))


if __name__ == "__main__":
    asyncio.run(main())
