"""Engine context: the one object that owns a patch engine's state.

Everything that would otherwise be a module-level global (operation
table, handler catalog, pending-patch store, settings) lives on an
``EngineContext``.  Tests build as many independent engines as they
like; a long-running host builds one and calls ``reload()`` when its
operation map changes.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping

from patchlang.config.settings import PatchSettings
from patchlang.graph.protocol import ResourceGraph
from patchlang.handlers.builtin import default_catalog
from patchlang.handlers.registry import HandlerRegistry
from patchlang.registry.operations import OperationRegistry
from patchlang.workflow.controller import GraphProvider, PatchWorkflow
from patchlang.workflow.store import PlanStore

logger = logging.getLogger(__name__)


class EngineContext:
    """Settings, catalog, registry and plan store bundled together.

    Parameters
    ----------
    settings:
        Engine settings; ``PatchSettings()`` when omitted.
    catalog:
        Handler catalog; the built-ins plus installed plugins by default.
    registry:
        Operation registry; loaded from ``settings.ops_path`` (or the
        packaged map) and validated against ``catalog`` by default.
    clock:
        Time source for the plan store.
    """

    def __init__(
        self,
        settings: PatchSettings | None = None,
        catalog: HandlerRegistry | None = None,
        registry: OperationRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings or PatchSettings()
        self.catalog = catalog if catalog is not None else default_catalog()
        if registry is None:
            if self.settings.ops_path is not None:
                registry = OperationRegistry.from_path(self.settings.ops_path, self.catalog)
            else:
                registry = OperationRegistry.default(self.catalog)
        self.registry = registry
        self.store = PlanStore(ttl_seconds=self.settings.confirm_ttl_seconds, clock=clock)
        logger.debug("engine ready: %r, %r", self.registry, self.catalog)

    def reload(self) -> None:
        """Re-load the operation map; the old table survives a failure."""
        self.registry.reload()

    def workflow(
        self,
        graphs: Mapping[str, ResourceGraph] | GraphProvider,
        code_factory: Callable[[], str] | None = None,
    ) -> PatchWorkflow:
        """Return a workflow sharing this engine's registry, catalog and store."""
        kwargs = {} if code_factory is None else {"code_factory": code_factory}
        return PatchWorkflow(
            registry=self.registry,
            catalog=self.catalog,
            store=self.store,
            graphs=graphs,
            settings=self.settings,
            **kwargs,
        )
