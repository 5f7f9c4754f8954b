"""Plan / apply workflow module."""
from __future__ import annotations

from patchlang.workflow.controller import PatchWorkflow, generate_code
from patchlang.workflow.store import PendingPatch, PlanStore
from patchlang.workflow.summary import (
    ApplyReport,
    PlanSummary,
    render_diagnostics,
    render_report,
    render_summary,
)

__all__ = [
    "PatchWorkflow",
    "generate_code",
    "PendingPatch",
    "PlanStore",
    "PlanSummary",
    "ApplyReport",
    "render_summary",
    "render_report",
    "render_diagnostics",
]
