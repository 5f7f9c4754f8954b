"""Action executor module."""
from __future__ import annotations

from patchlang.executor.executor import apply_actions, execute_action

__all__ = ["apply_actions", "execute_action"]
