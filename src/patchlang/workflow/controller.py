"""Two-phase patch workflow: ``plan`` → confirm → ``apply``.

``plan`` parses a script and parks the result in the plan store under a
fresh confirmation code.  ``apply`` takes that code back and, only if
every gate passes, runs the parked actions:

1. a patch is pending for the target (``NoPendingPatchError``)
2. it has not outlived the TTL (``PatchExpiredError``; slot dropped)
3. the code matches (``InvalidCodeError``; slot kept)
4. destructive patches were explicitly allowed
   (``DestructiveBlockedError``; slot kept)
5. a resource graph exists for the target (``UnknownTargetError``;
   slot kept)

A gate failure runs nothing.  Once execution starts the slot is cleared
whatever the outcome, so a patch is applied at most once.

All three entry points are coroutines serialized per target through
the store's locks, so a ``plan`` can never swap the pending patch out
from under an ``apply`` that is still running on the same target, even
from another workflow sharing the store.
"""
from __future__ import annotations

import hmac
import logging
import secrets
from collections.abc import Callable, Mapping

from patchlang.config.settings import PatchSettings
from patchlang.errors import (
    DestructiveBlockedError,
    InvalidCodeError,
    NoPendingPatchError,
    PatchExpiredError,
    PlanRejectedError,
    UnknownTargetError,
)
from patchlang.executor.executor import apply_actions
from patchlang.graph.protocol import ResourceGraph
from patchlang.handlers.base import HandlerContext
from patchlang.handlers.registry import HandlerRegistry
from patchlang.parser.parser import parse
from patchlang.registry.operations import OperationRegistry
from patchlang.workflow.store import PendingPatch, PlanStore
from patchlang.workflow.summary import ApplyReport, PlanSummary, render_summary

logger = logging.getLogger(__name__)

GraphProvider = Callable[[str], ResourceGraph]


def generate_code() -> str:
    """Return a six-character upper-case hex confirmation code."""
    return secrets.token_hex(3).upper()


def _normalize_code(code: str) -> str:
    return code.strip().upper()


class PatchWorkflow:
    """Drives plan / apply / cancel for any number of targets.

    Parameters
    ----------
    registry:
        Operation registry scripts are parsed against.
    catalog:
        Handler catalog the executor runs actions with.
    store:
        Pending-patch store (its clock and TTL govern expiry).
    graphs:
        Target id → resource graph, as a mapping or a callable.
    settings:
        Limits and defaults; ``PatchSettings()`` when omitted.
    code_factory:
        Confirmation code generator; injectable for tests.
    """

    def __init__(
        self,
        registry: OperationRegistry,
        catalog: HandlerRegistry,
        store: PlanStore,
        graphs: Mapping[str, ResourceGraph] | GraphProvider,
        settings: PatchSettings | None = None,
        code_factory: Callable[[], str] = generate_code,
    ) -> None:
        self.registry = registry
        self.catalog = catalog
        self.store = store
        self.settings = settings or PatchSettings()
        self._graphs: GraphProvider = graphs.__getitem__ if isinstance(graphs, Mapping) else graphs
        self._code_factory = code_factory

    def _graph_for(self, target_id: str) -> ResourceGraph:
        try:
            graph = self._graphs(target_id)
        except KeyError:
            graph = None
        if graph is None:
            logger.warning("apply for %s: unknown target", target_id)
            raise UnknownTargetError(target_id)
        return graph

    # ------------------------------------------------------------------
    # plan
    # ------------------------------------------------------------------

    async def plan(self, target_id: str, script_text: str) -> PlanSummary:
        """Parse ``script_text`` and store it as the target's pending patch.

        Raises
        ------
        PlanRejectedError
            If the script has any parse error.  The store is untouched.
        """
        async with self.store.locked(target_id):
            result = parse(script_text, self.registry, max_actions=self.settings.max_actions)
            if not result.ok:
                logger.info("plan for %s rejected: %d error(s)", target_id, len(result.errors))
                raise PlanRejectedError(result.errors, display_limit=self.settings.max_displayed_errors)

            actions = tuple(result.actions)
            patch = PendingPatch(
                confirmation_code=self._code_factory(),
                actions=actions,
                created_at=self.store.clock(),
                contains_destructive=any(a.destructive for a in actions),
            )
            self.store.put(target_id, patch)
            logger.info(
                "plan stored for %s: %d action(s), destructive=%s",
                target_id,
                len(actions),
                patch.contains_destructive,
            )
            return PlanSummary(
                target_id=target_id,
                summary_text=render_summary(actions),
                confirmation_code=patch.confirmation_code,
                contains_destructive=patch.contains_destructive,
                action_count=len(actions),
                expires_at=self.store.expires_at(patch),
            )

    # ------------------------------------------------------------------
    # apply
    # ------------------------------------------------------------------

    async def apply(
        self,
        target_id: str,
        code: str,
        allow_destructive: bool | None = None,
        reason: str = "",
    ) -> ApplyReport:
        """Confirm and execute the target's pending patch.

        Parameters
        ----------
        target_id:
            Target whose pending patch to apply.
        code:
            Confirmation code returned by ``plan`` (case and surrounding
            whitespace are ignored).
        allow_destructive:
            Permit destructive actions; defaults to ``settings.allow_deletes``.
        reason:
            Audit reason forwarded to every graph mutation.

        Raises
        ------
        GateError
            One of its subclasses, when a gate fails.  No action ran.
        """
        if allow_destructive is None:
            allow_destructive = self.settings.allow_deletes

        async with self.store.locked(target_id):
            patch = self.store.get(target_id)
            if patch is None:
                logger.warning("apply for %s: no pending patch", target_id)
                raise NoPendingPatchError(target_id)
            if self.store.is_expired(patch):
                self.store.discard(target_id, patch)
                logger.warning("apply for %s: pending patch expired", target_id)
                raise PatchExpiredError(target_id, self.store.ttl_seconds)
            if not hmac.compare_digest(_normalize_code(code).encode(), patch.confirmation_code.encode()):
                logger.warning("apply for %s: invalid confirmation code", target_id)
                raise InvalidCodeError(target_id)
            if patch.contains_destructive and not allow_destructive:
                logger.warning("apply for %s: destructive actions not allowed", target_id)
                raise DestructiveBlockedError(target_id)

            graph = self._graph_for(target_id)
            try:
                results = await apply_actions(graph, patch.actions, HandlerContext(reason=reason), self.catalog)
            finally:
                self.store.discard(target_id, patch)

            report = ApplyReport(target_id=target_id, results=results)
            logger.info(
                "apply for %s finished: %d ok, %d failed",
                target_id,
                report.success_count,
                report.failure_count,
            )
            return report

    # ------------------------------------------------------------------
    # cancel
    # ------------------------------------------------------------------

    async def cancel(self, target_id: str) -> bool:
        """Drop the target's pending patch; return whether one existed."""
        async with self.store.locked(target_id):
            removed = self.store.pop(target_id) is not None
            if removed:
                logger.info("pending patch for %s cancelled", target_id)
            return removed
