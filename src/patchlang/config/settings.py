"""Engine settings: environment variables and CLI flags in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by click
  2. Env vars: ``PATCH_*`` prefix (``PATCH_MAX_ACTIONS=100``)
  3. Code defaults
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings


class PatchSettings(BaseSettings):
    """Tunable limits and defaults of the patch workflow.

    Attributes:
        max_actions: Most actions one script may produce.
        confirm_ttl_seconds: How long a planned patch can be applied.
        allow_deletes: Default for ``allow_destructive`` when apply
            does not say.
        ops_path: Operation map file; None uses the packaged ``ops.map``.
        max_displayed_errors: Parse errors shown when a plan is rejected.
        max_displayed_failures: Failed actions listed in an apply report.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PATCH_",
    }

    max_actions: int = Field(default=500, ge=1)
    confirm_ttl_seconds: float = Field(default=600, gt=0)
    allow_deletes: bool = False
    ops_path: Path | None = None
    max_displayed_errors: int = Field(default=15, ge=1)
    max_displayed_failures: int = Field(default=10, ge=1)

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> PatchSettings:
        """Build settings, letting CLI flags that were actually given win.

        Flags passed as None are dropped so env vars and defaults apply.
        """
        return cls(**{k: v for k, v in cli_flags.items() if v is not None})
