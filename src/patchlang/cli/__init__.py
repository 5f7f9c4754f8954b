"""patchlang command-line interface."""
from __future__ import annotations

from patchlang.cli.main import cli

__all__ = ["cli"]
