"""Pending-patch store: one slot per target, lazily expired.

A ``PendingPatch`` is what ``plan`` leaves behind for ``apply`` to pick
up.  Each target id has at most one slot; storing a new patch replaces
the old one.  Expiry is only checked when asked (``is_expired``);
``purge_expired`` exists for callers that want to reclaim memory from
targets that never came back.

The store also owns the per-target locks, so every workflow sharing a
store serializes on the same target.  A lock lives only while some
coroutine holds or waits for it.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from patchlang.core.models import Action

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class PendingPatch:
    """A parsed, summarized patch awaiting confirmation.

    Parameters
    ----------
    confirmation_code:
        Code the caller must echo back to apply.
    actions:
        Actions in script order.
    created_at:
        Clock reading when the patch was planned.
    contains_destructive:
        True if any action's operation is destructive.
    """

    confirmation_code: str
    actions: tuple[Action, ...]
    created_at: float
    contains_destructive: bool = False


class PlanStore:
    """In-memory, per-target single-slot patch store.

    Parameters
    ----------
    ttl_seconds:
        Age after which a patch is expired.
    clock:
        Monotonic time source; injectable for tests.
    """

    def __init__(self, ttl_seconds: float = 600, clock: Clock = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._slots: dict[str, PendingPatch] = {}
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def locked(self, target_id: str) -> AsyncIterator[None]:
        """Hold the target's lock for the duration of the block."""
        lock, users = self._locks.get(target_id, (asyncio.Lock(), 0))
        self._locks[target_id] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[target_id]
            if users == 1:
                del self._locks[target_id]
            else:
                self._locks[target_id] = (lock, users - 1)

    @property
    def active_locks(self) -> int:
        return len(self._locks)

    def get(self, target_id: str) -> PendingPatch | None:
        return self._slots.get(target_id)

    def put(self, target_id: str, patch: PendingPatch) -> None:
        """Store ``patch``, replacing any pending patch for the target."""
        if target_id in self._slots:
            logger.debug("replacing pending patch for %s", target_id)
        self._slots[target_id] = patch

    def pop(self, target_id: str) -> PendingPatch | None:
        return self._slots.pop(target_id, None)

    def discard(self, target_id: str, patch: PendingPatch | None = None) -> bool:
        """Delete the target's slot.

        When ``patch`` is given the slot is only deleted while it still
        holds that exact patch.  Returns True if something was deleted.
        """
        current = self._slots.get(target_id)
        if current is None or (patch is not None and current is not patch):
            return False
        del self._slots[target_id]
        return True

    def is_expired(self, patch: PendingPatch) -> bool:
        return self.clock() - patch.created_at > self.ttl_seconds

    def expires_at(self, patch: PendingPatch) -> float:
        return patch.created_at + self.ttl_seconds

    def purge_expired(self) -> int:
        """Remove every expired slot and return how many were removed."""
        expired = [t for t, p in self._slots.items() if self.is_expired(p)]
        for target_id in expired:
            del self._slots[target_id]
        if expired:
            logger.debug("purged %d expired pending patch(es)", len(expired))
        return len(expired)

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._slots

    def __len__(self) -> int:
        return len(self._slots)
