"""Handler subsystem for patchlang.

Third-party handlers register through ``importlib.metadata``
entry-points under the ``patchlang.handlers`` group.

Example
-------
Declare a handler in pyproject.toml:

.. code-block:: toml

    [project.entry-points."patchlang.handlers"]
    "channel.archive" = "my_package.handlers:ArchiveChannel"
"""
from __future__ import annotations

from patchlang.handlers.base import Handler, HandlerContext, HandlerOutcome
from patchlang.handlers.builtin import builtin_handlers, default_catalog
from patchlang.handlers.registry import ENTRYPOINT_GROUP, HandlerRegistry

__all__ = [
    "Handler",
    "HandlerContext",
    "HandlerOutcome",
    "HandlerRegistry",
    "ENTRYPOINT_GROUP",
    "builtin_handlers",
    "default_catalog",
]
