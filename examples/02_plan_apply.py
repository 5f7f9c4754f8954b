#!/usr/bin/env python3
"""Example: Plan, confirm and apply a patch

Loads the sample snapshot, exports a ``keep`` template, edits it,
then runs the two-phase workflow: plan returns a summary and a
confirmation code, apply executes the actions and reports per-line
results.  Delete operations need an explicit opt-in.

Usage:
    python examples/02_plan_apply.py

Requirements:
    pip install patchlang
"""
from __future__ import annotations

import asyncio
from pathlib import Path

import patchlang
from patchlang.errors import DestructiveBlockedError
from patchlang.graph import load_snapshot
from patchlang.workflow import render_report

SNAPSHOT = Path(__file__).parent / "guild.yaml"

EDITS = '''
rename channel 700000000000000002 "general chat"
create channel announcements ctype=announcement parent=700000000000000001
delete channel 700000000000000004
'''


async def main() -> None:
    graph = load_snapshot(SNAPSHOT)
    engine = patchlang.EngineContext()
    workflow = engine.workflow({graph.id: graph})

    template = patchlang.export_template(graph)
    print(template)

    plan = await workflow.plan(graph.id, template + EDITS)
    print(f"Plan: {plan.action_count} action(s), destructive={plan.contains_destructive}")
    print(plan.summary_text)
    print(f"Confirmation code: {plan.confirmation_code}")

    try:
        await workflow.apply(graph.id, plan.confirmation_code)
    except DestructiveBlockedError as exc:
        print(f"Blocked: {exc}")

    report = await workflow.apply(graph.id, plan.confirmation_code, allow_destructive=True, reason="example")
    print(render_report(report))

    print("\nAfter:")
    print(patchlang.export_template(graph))


if __name__ == "__main__":
    asyncio.run(main())
