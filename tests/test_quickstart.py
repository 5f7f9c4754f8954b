"""Test that the quickstart API works for patchlang."""
from __future__ import annotations

import asyncio


def test_quickstart_parse_import() -> None:
    import patchlang

    assert callable(patchlang.parse)
    assert callable(patchlang.export_template)


def test_quickstart_version(expected_version: str) -> None:
    import patchlang

    assert patchlang.__version__ == expected_version


def test_quickstart_parse_with_default_map() -> None:
    import patchlang

    result = patchlang.parse('rename channel 123456789012345678 "general chat"\n')
    assert result.ok
    assert result.actions[0].handler_id == "channel.rename"
    assert dict(result.actions[0].arguments) == {"id": "123456789012345678", "name": "general chat"}


def test_quickstart_parse_reports_errors() -> None:
    import patchlang

    result = patchlang.parse("frobnicate channel 1\n")
    assert not result.ok
    assert result.errors[0].code == "PL002"


def test_quickstart_engine_plan_and_apply(graph, ids) -> None:
    import patchlang

    engine = patchlang.EngineContext()
    workflow = engine.workflow({graph.id: graph})

    async def scenario() -> int:
        plan = await workflow.plan(graph.id, f"rename channel {ids.general} chat")
        report = await workflow.apply(graph.id, plan.confirmation_code)
        return report.success_count

    assert asyncio.run(scenario()) == 1
