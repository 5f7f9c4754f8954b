"""Sequential action executor with per-action failure isolation.

Actions run strictly in order, each awaited before the next starts.  A
failing action (unknown handler, bad argument, missing entity, rejected
graph call) is recorded as a failed ``ActionResult`` and the batch moves
on; nothing an individual action raises escapes ``apply_actions``.
Already-applied actions are never rolled back.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from patchlang.core.models import Action, ActionResult
from patchlang.graph.protocol import ResourceGraph
from patchlang.handlers.base import HandlerContext, HandlerOutcome
from patchlang.handlers.registry import HandlerRegistry
from patchlang.schema.params import coerce_arguments

logger = logging.getLogger(__name__)


async def execute_action(
    graph: ResourceGraph,
    action: Action,
    context: HandlerContext,
    catalog: HandlerRegistry,
) -> ActionResult:
    """Run one action and describe its outcome.

    Parameters
    ----------
    graph:
        Target resource graph.
    action:
        Resolved, bound action from the parser.
    context:
        Apply-wide context (audit reason).
    catalog:
        Handler catalog to look ``action.handler_id`` up in.

    Returns
    -------
    ActionResult
        ``success=False`` with the error message if anything failed.
    """
    if action.handler_id not in catalog:
        logger.warning("line %d: handler unknown: %s", action.line, action.handler_id)
        return ActionResult(
            success=False,
            line=action.line,
            handler_id=action.handler_id,
            error=f"handler unknown: {action.handler_id}",
        )

    handler_cls = catalog.get(action.handler_id)
    try:
        specs = action.params or handler_cls.schema(tuple(action.arguments))
        args = coerce_arguments(specs, action.arguments)
        outcome = await handler_cls().run(graph, args, context)
        if not isinstance(outcome, HandlerOutcome):
            raise TypeError(f"handler returned no outcome (got {type(outcome).__name__})")
    except Exception as exc:
        logger.warning("line %d: %s failed: %s", action.line, action.handler_id, exc)
        return ActionResult(
            success=False,
            line=action.line,
            handler_id=action.handler_id,
            error=str(exc) or type(exc).__name__,
        )

    if not outcome.ok:
        logger.warning("line %d: %s reported failure", action.line, action.handler_id)
        return ActionResult(
            success=False,
            line=action.line,
            handler_id=action.handler_id,
            error="handler reported failure",
            affected_id=outcome.affected_id,
        )

    logger.info(
        "line %d: %s ok (affected=%s, changed=%s)",
        action.line,
        action.handler_id,
        outcome.affected_id,
        outcome.changed,
    )
    return ActionResult(
        success=True,
        line=action.line,
        handler_id=action.handler_id,
        affected_id=outcome.affected_id,
        changed=outcome.changed,
    )


async def apply_actions(
    graph: ResourceGraph,
    actions: Sequence[Action],
    context: HandlerContext,
    catalog: HandlerRegistry,
) -> list[ActionResult]:
    """Execute ``actions`` one after another against ``graph``.

    Returns one ``ActionResult`` per action, in the same order.
    """
    results: list[ActionResult] = []
    for action in actions:
        results.append(await execute_action(graph, action, context, catalog))
    failures = sum(1 for r in results if not r.success)
    logger.info("applied %d action(s): %d ok, %d failed", len(results), len(results) - failures, failures)
    return results
