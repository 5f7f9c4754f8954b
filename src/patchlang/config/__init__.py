"""Configuration module."""
from __future__ import annotations

from patchlang.config.settings import PatchSettings

__all__ = ["PatchSettings"]
