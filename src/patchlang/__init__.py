"""patchlang: declarative bulk patches for channel/role resource graphs.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import asyncio
    import patchlang

    engine = patchlang.EngineContext()

    # Parse only: pure, no graph access
    result = patchlang.parse('''
        rename channel 123456789012345678 "general chat"
        perm:set channel=123456789012345678 role=876543210987654321 allow=ViewChannel
    ''', engine.registry)
    assert result.ok

    # Plan, confirm, apply
    workflow = engine.workflow({graph.id: graph})
    plan = asyncio.run(workflow.plan(graph.id, script))
    report = asyncio.run(workflow.apply(graph.id, plan.confirmation_code))

    patchlang.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from patchlang.core.models import ParseResult
    from patchlang.graph.protocol import ResourceGraph
    from patchlang.registry.operations import OperationRegistry

from patchlang.engine import EngineContext


def parse(script_text: str, registry: "OperationRegistry | None" = None, max_actions: int = 500) -> "ParseResult":
    """Parse a patch script into actions and diagnostics.

    Parameters
    ----------
    script_text:
        Complete patch script.
    registry:
        Operation registry; the packaged default map when omitted.
    max_actions:
        Maximum number of actions the script may produce.

    Returns
    -------
    ParseResult
        Actions in script order plus every error and warning.
    """
    from patchlang.handlers.builtin import default_catalog
    from patchlang.parser.parser import parse as _parse
    from patchlang.registry.operations import OperationRegistry

    if registry is None:
        registry = OperationRegistry.default(default_catalog())
    return _parse(script_text, registry, max_actions=max_actions)


def export_template(graph: "ResourceGraph") -> str:
    """Render a graph as a script of ``keep`` lines.

    Parameters
    ----------
    graph:
        Graph to describe.

    Returns
    -------
    str
        A script that parses cleanly and applies as a no-op.
    """
    from patchlang.graph.template import export_template as _export_template

    return _export_template(graph)


__all__ = [
    "__version__",
    "EngineContext",
    "parse",
    "export_template",
]
