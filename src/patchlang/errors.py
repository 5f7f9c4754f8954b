"""Exception hierarchy for patchlang.

Every failure a caller can observe derives from ``PatchlangError`` so
that front-ends (the CLI, a chat bot, an HTTP adapter) can turn any of
them into a human-readable message with a single ``except`` clause.

Parse problems are *not* raised: the parser collects them as
``Diagnostic`` objects (see ``patchlang.core.diagnostics``).  Handler
failures during apply are caught per action by the executor and never
escape it.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from patchlang.core.diagnostics import Diagnostic


class PatchlangError(Exception):
    """Base class for all patchlang errors."""


# ---------------------------------------------------------------------------
# Lexing / resolution
# ---------------------------------------------------------------------------


class LexError(PatchlangError):
    """Raised when a script line cannot be split into tokens.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    col:
        1-based column where the offending span starts.
    """

    def __init__(self, message: str, col: int) -> None:
        super().__init__(f"{message} (column {col})")
        self.lex_message = message
        self.col = col


class UnknownOperationError(PatchlangError, KeyError):
    """Raised when a ``verb:resourceType`` pair resolves to nothing."""

    def __init__(self, verb: str, resource_type: str) -> None:
        self.verb = verb
        self.resource_type = resource_type
        super().__init__(f'unknown operation "{verb}:{resource_type}"')

    def __str__(self) -> str:
        return str(self.args[0])


class RegistryLoadError(PatchlangError):
    """Raised when an operation mapping source cannot be loaded.

    ``problems`` lists every individual reason (for example, each
    dangling handler reference with its source line).
    """

    def __init__(self, message: str, problems: Sequence[str] = ()) -> None:
        self.problems = list(problems)
        detail = "".join(f"\n  {p}" for p in self.problems)
        super().__init__(f"{message}{detail}")


# ---------------------------------------------------------------------------
# Handler catalog / execution
# ---------------------------------------------------------------------------


class HandlerNotFoundError(PatchlangError, KeyError):
    """Raised when a requested handler id is not in the catalog."""

    def __init__(self, handler_id: str, catalog_name: str) -> None:
        self.handler_id = handler_id
        self.catalog_name = catalog_name
        super().__init__(
            f"Handler {handler_id!r} is not registered in the {catalog_name!r} catalog. "
            "Check that the package providing it is installed and its entry-points are declared."
        )

    def __str__(self) -> str:
        return str(self.args[0])


class HandlerAlreadyRegisteredError(PatchlangError, ValueError):
    """Raised when attempting to register a handler id that already exists."""

    def __init__(self, handler_id: str, catalog_name: str) -> None:
        self.handler_id = handler_id
        self.catalog_name = catalog_name
        super().__init__(
            f"Handler {handler_id!r} is already registered in the {catalog_name!r} catalog. "
            "Use a unique id or explicitly deregister the existing entry first."
        )


class HandlerError(PatchlangError):
    """Raised by a handler when a precondition of its single mutation fails."""


class GraphError(PatchlangError):
    """Raised by a resource graph when the platform rejects a mutation."""


class ArgumentError(HandlerError):
    """Raised when a bound argument does not satisfy its parameter kind.

    Parameters
    ----------
    param:
        Name of the offending parameter.
    message:
        What is wrong with the value.
    """

    def __init__(self, param: str, message: str) -> None:
        self.param = param
        super().__init__(f"{param}: {message}")


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class PlanRejectedError(PatchlangError):
    """Raised by ``plan`` when the script has parse errors.

    No pending patch is created or replaced when this is raised.

    Parameters
    ----------
    errors:
        Every error diagnostic produced by the parser.
    display_limit:
        How many of them ``displayed`` should return.
    """

    def __init__(self, errors: Sequence["Diagnostic"], display_limit: int = 15) -> None:
        self.errors = list(errors)
        self.display_limit = display_limit
        super().__init__(f"patch rejected: {len(self.errors)} error(s)")

    @property
    def displayed(self) -> list["Diagnostic"]:
        """Return the first ``display_limit`` errors."""
        return self.errors[: self.display_limit]


class GateError(PatchlangError):
    """Raised by ``apply`` when a gate fails; no action was executed."""

    reason: str = "gate"


class NoPendingPatchError(GateError):
    reason = "no_pending_patch"

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(f"no pending patch for {target_id}; run plan first")


class PatchExpiredError(GateError):
    reason = "expired"

    def __init__(self, target_id: str, ttl_seconds: float) -> None:
        self.target_id = target_id
        self.ttl_seconds = ttl_seconds
        super().__init__(
            f"pending patch for {target_id} expired after {int(ttl_seconds // 60)} min; plan again"
        )


class InvalidCodeError(GateError):
    reason = "invalid_code"

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__("invalid confirmation code")


class DestructiveBlockedError(GateError):
    reason = "destructive_blocked"

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(
            "destructive actions blocked: this patch deletes resources; "
            "apply again with destructive actions allowed"
        )


class UnknownTargetError(GateError):
    reason = "unknown_target"

    def __init__(self, target_id: str) -> None:
        self.target_id = target_id
        super().__init__(f"no resource graph is known for target {target_id}")
