"""Handler catalog for patchlang.

Provides a decorator-based registration system mapping handler ids
(``"channel.rename"``) to ``Handler`` subclasses.  Third-party packages
contribute handlers by declaring entry-points in their own
``pyproject.toml`` under the ``patchlang.handlers`` group.

Example
-------
Register a handler with the decorator::

    from patchlang.handlers import Handler, HandlerOutcome, HandlerRegistry

    catalog = HandlerRegistry("custom")

    @catalog.register("channel.archive")
    class ArchiveChannel(Handler):
        params = {"id": ParamKind.ID}

        async def run(self, graph, args, ctx):
            ...
            return HandlerOutcome(affected_id=args["id"])

Load all installed handlers via entry-points::

    catalog.load_entrypoints("patchlang.handlers")

Retrieve a handler by id::

    handler = catalog.create("channel.archive")
"""
from __future__ import annotations

import importlib.metadata
import logging
from collections.abc import Callable

from patchlang.errors import HandlerAlreadyRegisteredError, HandlerNotFoundError
from patchlang.handlers.base import Handler

logger = logging.getLogger(__name__)

ENTRYPOINT_GROUP = "patchlang.handlers"


class HandlerRegistry:
    """Registry of handler implementations keyed by handler id.

    Parameters
    ----------
    name:
        A human-readable name for this catalog (used in error messages).
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._handlers: dict[str, type[Handler]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, handler_id: str) -> Callable[[type[Handler]], type[Handler]]:
        """Return a class decorator that registers the decorated handler.

        Raises
        ------
        HandlerAlreadyRegisteredError
            If ``handler_id`` is already in use in this catalog.
        TypeError
            If the decorated class does not subclass ``Handler``.
        """

        def decorator(cls: type[Handler]) -> type[Handler]:
            self.register_class(handler_id, cls)
            return cls

        return decorator

    def register_class(self, handler_id: str, cls: type[Handler]) -> None:
        """Register a class directly without using the decorator syntax.

        Raises
        ------
        HandlerAlreadyRegisteredError
            If ``handler_id`` is already registered.
        TypeError
            If ``cls`` is not a subclass of ``Handler``.
        """
        if handler_id in self._handlers:
            raise HandlerAlreadyRegisteredError(handler_id, self._name)
        if not (isinstance(cls, type) and issubclass(cls, Handler)):
            raise TypeError(
                f"Cannot register {cls!r} under {handler_id!r}: "
                "it must be a subclass of Handler."
            )
        self._handlers[handler_id] = cls
        logger.debug(
            "Registered handler %r -> %s in catalog %r",
            handler_id,
            cls.__qualname__,
            self._name,
        )

    def deregister(self, handler_id: str) -> None:
        """Remove a handler from the catalog.

        Raises
        ------
        HandlerNotFoundError
            If ``handler_id`` is not currently registered.
        """
        if handler_id not in self._handlers:
            raise HandlerNotFoundError(handler_id, self._name)
        del self._handlers[handler_id]
        logger.debug("Deregistered handler %r from catalog %r", handler_id, self._name)

    def copy(self, name: str | None = None) -> "HandlerRegistry":
        """Return an independent catalog with the same registrations."""
        clone = HandlerRegistry(name or self._name)
        clone._handlers = dict(self._handlers)
        return clone

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, handler_id: str) -> type[Handler]:
        """Return the class registered under ``handler_id``.

        Raises
        ------
        HandlerNotFoundError
            If no handler is registered under ``handler_id``.
        """
        try:
            return self._handlers[handler_id]
        except KeyError:
            raise HandlerNotFoundError(handler_id, self._name) from None

    def create(self, handler_id: str) -> Handler:
        """Instantiate the handler registered under ``handler_id``."""
        return self.get(handler_id)()

    def list_handlers(self) -> list[str]:
        """Return all registered handler ids in alphabetical order."""
        return sorted(self._handlers)

    def __contains__(self, handler_id: object) -> bool:
        return handler_id in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"HandlerRegistry(name={self._name!r}, handlers={self.list_handlers()})"

    # ------------------------------------------------------------------
    # Entry-point loading
    # ------------------------------------------------------------------

    def load_entrypoints(self, group: str = ENTRYPOINT_GROUP) -> None:
        """Discover and register handlers declared as package entry-points.

        Handler ids that are already registered are skipped with a
        debug-level log entry, which makes repeated calls idempotent.
        An entry-point that fails to import or is not a ``Handler``
        subclass is logged and skipped.

        Example
        -------
        In a downstream package's ``pyproject.toml``::

            [project.entry-points."patchlang.handlers"]
            "channel.archive" = "my_package.handlers:ArchiveChannel"
        """
        for ep in importlib.metadata.entry_points(group=group):
            if ep.name in self._handlers:
                logger.debug(
                    "Entry-point %r already registered in %r; skipping.",
                    ep.name,
                    self._name,
                )
                continue
            try:
                cls = ep.load()
            except Exception:
                logger.exception(
                    "Failed to load entry-point %r from group %r; skipping.",
                    ep.name,
                    group,
                )
                continue
            try:
                self.register_class(ep.name, cls)
            except (HandlerAlreadyRegisteredError, TypeError):
                logger.warning(
                    "Entry-point %r loaded but could not be registered "
                    "in catalog %r; skipping.",
                    ep.name,
                    self._name,
                )
