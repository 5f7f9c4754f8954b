"""Plain-text rendering of plan summaries and apply reports."""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from patchlang.core.diagnostics import Diagnostic
from patchlang.core.models import Action, ActionResult

BULLET = "•"


@dataclass(frozen=True)
class PlanSummary:
    """What ``plan`` returns to the caller."""

    target_id: str
    summary_text: str
    confirmation_code: str
    contains_destructive: bool
    action_count: int
    expires_at: float


@dataclass(frozen=True)
class ApplyReport:
    """What ``apply`` returns once the actions have run."""

    target_id: str
    results: list[ActionResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def failures(self) -> list[ActionResult]:
        return [r for r in self.results if not r.success]

    @property
    def ok(self) -> bool:
        return self.failure_count == 0


def render_summary(actions: Sequence[Action]) -> str:
    """Count actions per handler id, most frequent first.

    Ties keep the order in which the handler first appears in the script.
    """
    if not actions:
        return "No actions."
    # Counter preserves first-insertion order and sorted() is stable.
    counts = Counter(a.handler_id for a in actions)
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return "\n".join(f"{BULLET} {handler_id}: {n}" for handler_id, n in ranked)


def cap(items: Sequence, limit: int) -> tuple[list, int]:
    """Return the first ``limit`` items and how many were left out."""
    shown = list(items[:limit])
    return shown, max(0, len(items) - limit)


def render_diagnostics(diagnostics: Sequence[Diagnostic], limit: int = 15) -> str:
    """One diagnostic per line, capped with a trailing ``... and N more``."""
    shown, hidden = cap(diagnostics, limit)
    lines = [str(d) for d in shown]
    if hidden:
        lines.append(f"... and {hidden} more")
    return "\n".join(lines)


def render_report(report: ApplyReport, max_failures: int = 10) -> str:
    """Summarize an apply: counts, then up to ``max_failures`` failures."""
    lines = [f"Applied {report.success_count} action(s), {report.failure_count} failed."]
    shown, hidden = cap(report.failures, max_failures)
    lines.extend(str(r) for r in shown)
    if hidden:
        lines.append(f"... and {hidden} more")
    return "\n".join(lines)
