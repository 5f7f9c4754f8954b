"""Patch script parser.

Turns a whole patch script into an ordered list of ``Action`` objects.
Each non-blank, non-comment line is one action::

    rename channel 123456789012345678 "General Chat"
    perm:set channel=123456789012345678 role=876543210987654321 allow=ViewChannel
    delete:role 112233445566778899

The verb and resource type come from the first two tokens, or from the
first token alone when it is written ``verb:type``.  The remaining
tokens are bound to the operation's parameters: a ``key=value`` token
binds by name, any other token fills the next unbound parameter in
declaration order, and a parameter left over is bound to ``""``.

Error recovery
--------------
The parser never raises on bad input.  A line that cannot be tokenized,
has no resource type or names an unknown operation is recorded as an
error ``Diagnostic`` and parsing continues with the next line, so one
pass reports every problem.  Values that will not satisfy their
parameter kind only produce warnings here; the executor rejects them
when the action runs.

Parsing is pure: it reads one registry snapshot and performs no I/O.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from patchlang.core.diagnostics import Diagnostic, error, warning
from patchlang.core.models import Action, ParseResult
from patchlang.errors import LexError, UnknownOperationError
from patchlang.lexer.lexer import split_arguments, tokenize
from patchlang.registry.operations import OperationDescriptor, OperationRegistry, resolve_in
from patchlang.schema.params import check_arguments

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACTIONS = 500

_LINE_SPLIT = re.compile(r"\r?\n")


class ScriptParser:
    """Line-by-line parser bound to one operation table.

    Parameters
    ----------
    registry:
        Operation registry (its current snapshot is taken once, here) or
        an already-captured table.
    max_actions:
        Maximum number of actions a script may produce.
    """

    def __init__(
        self,
        registry: OperationRegistry | Mapping[str, OperationDescriptor],
        max_actions: int = DEFAULT_MAX_ACTIONS,
    ) -> None:
        if isinstance(registry, OperationRegistry):
            self._table = registry.snapshot()
        else:
            self._table = registry
        self._max_actions = max_actions

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, script_text: str) -> ParseResult:
        """Parse ``script_text`` and return actions plus diagnostics."""
        result = ParseResult()
        for line_no, raw in enumerate(_LINE_SPLIT.split(script_text), 1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            action = self._parse_line(line, line_no, result)
            if action is None:
                continue
            if len(result.actions) >= self._max_actions:
                result.errors.append(
                    error(
                        "PL003",
                        f"too many actions (limit {self._max_actions})",
                        line_no,
                        suggestion="split the script into smaller patches",
                    )
                )
                break
            result.actions.append(action)

        logger.debug(
            "parsed %d action(s), %d error(s), %d warning(s)",
            len(result.actions),
            len(result.errors),
            len(result.warnings),
        )
        return result

    # ------------------------------------------------------------------
    # Line handling
    # ------------------------------------------------------------------

    def _parse_line(self, line: str, line_no: int, result: ParseResult) -> Action | None:
        try:
            tokens = tokenize(line)
        except LexError as exc:
            result.errors.append(
                error("PL004", exc.lex_message, line_no, suggestion=f"close the quote opened at column {exc.col}")
            )
            return None

        head = self._split_head(tokens)
        if head is None:
            result.errors.append(_invalid_format(line_no))
            return None
        verb, resource_type, rest = head

        try:
            descriptor = resolve_in(self._table, verb, resource_type)
        except UnknownOperationError as exc:
            result.errors.append(error("PL002", str(exc), line_no))
            return None

        arguments, leftovers = self._bind(descriptor, rest)
        if leftovers and descriptor.params:
            result.warnings.append(
                warning(
                    "PL102",
                    f"unused arguments: {', '.join(leftovers)}",
                    line_no,
                    suggestion=f"{descriptor.key} takes {', '.join(descriptor.param_names)}",
                )
            )
        for problem in check_arguments(descriptor.params, arguments):
            result.warnings.append(warning("PL101", str(problem), line_no))

        return Action(
            verb=verb,
            resource_type=resource_type,
            handler_id=descriptor.handler_id,
            arguments=arguments,
            line=line_no,
            raw=line,
            params=descriptor.params,
            destructive=descriptor.destructive,
        )

    @staticmethod
    def _split_head(tokens: list[str]) -> tuple[str, str, list[str]] | None:
        """Return ``(verb, resource_type, remaining_tokens)`` or None."""
        if not tokens:
            return None
        first = tokens[0]
        if ":" in first:
            verb, resource_type = first.split(":")[:2]
            rest = tokens[1:]
            if not resource_type and rest:
                # "verb: type ..." takes the type from the next token.
                resource_type, rest = rest[0], rest[1:]
        elif len(tokens) >= 2:
            verb, resource_type, rest = first, tokens[1], tokens[2:]
        else:
            return None
        if not verb or not resource_type:
            return None
        return verb, resource_type, rest

    @staticmethod
    def _bind(descriptor: OperationDescriptor, tokens: list[str]) -> tuple[dict[str, str], list[str]]:
        """Bind tokens to the descriptor's parameters.

        Returns the bound arguments (every parameter present, in schema
        order) and the tokens that were not consumed.
        """
        split = split_arguments(tokens)
        arguments: dict[str, str] = {}
        for name in descriptor.param_names:
            if name in split.named:
                arguments[name] = split.named.pop(name)
            elif split.positional:
                arguments[name] = split.positional.popleft()
            else:
                arguments[name] = ""
        leftovers = [f"{k}={v}" for k, v in split.named.items()]
        leftovers.extend(split.positional)
        return arguments, leftovers


def _invalid_format(line_no: int) -> Diagnostic:
    return error(
        "PL001",
        "invalid format (verb and resource type required)",
        line_no,
        suggestion='write "verb type args..." or "verb:type args..."',
    )


def parse(
    script_text: str,
    registry: OperationRegistry | Mapping[str, OperationDescriptor],
    max_actions: int = DEFAULT_MAX_ACTIONS,
) -> ParseResult:
    """Parse a patch script against an operation registry.

    Parameters
    ----------
    script_text:
        Complete script; ``\\n`` and ``\\r\\n`` line endings are accepted.
    registry:
        Operation registry or table to resolve verbs against.
    max_actions:
        Maximum number of actions; one more adds a ``PL003`` error and
        stops parsing.

    Returns
    -------
    ParseResult
        Actions in script order plus every error and warning.

    Example
    -------
    ::

        from patchlang.parser import parse
        from patchlang.registry import OperationRegistry

        result = parse("rename channel 123456789012345678 lounge", OperationRegistry.default())
        assert result.ok
    """
    return ScriptParser(registry, max_actions=max_actions).parse(script_text)
