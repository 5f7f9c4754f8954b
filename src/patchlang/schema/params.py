"""Typed parameter schema shared by the parser, the executor and handlers.

Script arguments are always bound as strings.  Each parameter of an
operation has a ``ParamKind`` that says how that string is validated
and converted.  Conversion happens in exactly one place
(``coerce_arguments``), called by the executor right before a handler
runs; the parser uses ``check_arguments`` to warn early about values
that will be rejected.

Kind names (usable as ``param@kind`` suffixes in the operation map):

    id      17–20 digit decimal identifier
    id?     identifier, or ``none`` / empty for "no value" (→ None)
    bool    on/true/1/yes or off/false/0/no, case-insensitive
    bool?   like ``bool``; empty means False
    int     non-negative base-10 integer
    text    any string, possibly empty
    name    non-empty string
    ctype   channel kind (text, voice, forum, announcement/news, stage, category)
    perms   comma-separated permission flag names (→ frozenset)
    color   empty, or a ``#rrggbb`` hex color (→ normalized lower-case)
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from patchlang.errors import ArgumentError
from patchlang.graph.models import PERMISSION_FLAGS, ChannelKind

IDENTIFIER_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]{17,20}$")
_INT_RE: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")
_COLOR_RE: Final[re.Pattern[str]] = re.compile(r"^#?([0-9a-fA-F]{6})$")

_TRUE: Final[frozenset[str]] = frozenset({"on", "true", "1", "yes"})
_FALSE: Final[frozenset[str]] = frozenset({"off", "false", "0", "no"})
_NONE_WORDS: Final[frozenset[str]] = frozenset({"", "none"})


class ParamKind(Enum):
    """How a bound string argument is validated and converted."""

    ID = "id"
    OPTIONAL_ID = "id?"
    BOOL = "bool"
    OPTIONAL_BOOL = "bool?"
    INT = "int"
    TEXT = "text"
    NAME = "name"
    CHANNEL_KIND = "ctype"
    PERMISSIONS = "perms"
    COLOR = "color"

    @classmethod
    def from_name(cls, name: str) -> "ParamKind":
        """Look a kind up by its short name.

        Raises
        ------
        ValueError
            If ``name`` is not a known kind.
        """
        return cls(name.strip())


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """One declared parameter of an operation."""

    name: str
    kind: ParamKind = ParamKind.TEXT

    def __str__(self) -> str:
        return f"{self.name}@{self.kind.value}"


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


def is_identifier(value: str) -> bool:
    """Return True if ``value`` matches the platform's numeric id format."""
    return bool(IDENTIFIER_RE.match(value))


def parse_bool(value: str) -> bool | None:
    """Return the boolean spelled by ``value``, or None if it spells neither."""
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def _to_id(param: str, raw: str) -> str:
    if not is_identifier(raw):
        raise ArgumentError(param, f"invalid identifier {raw!r} (expected 17-20 digits)")
    return raw


def _to_optional_id(param: str, raw: str) -> str | None:
    if raw.strip().lower() in _NONE_WORDS:
        return None
    return _to_id(param, raw)


def _to_bool(param: str, raw: str) -> bool:
    value = parse_bool(raw)
    if value is None:
        raise ArgumentError(param, f"invalid boolean {raw!r} (true/false, on/off, yes/no, 1/0)")
    return value


def _to_optional_bool(param: str, raw: str) -> bool:
    if not raw.strip():
        return False
    return _to_bool(param, raw)


def _to_int(param: str, raw: str) -> int:
    if not _INT_RE.match(raw):
        raise ArgumentError(param, f"invalid non-negative integer {raw!r}")
    return int(raw, 10)


def _to_text(param: str, raw: str) -> str:
    return raw


def _to_name(param: str, raw: str) -> str:
    if not raw:
        raise ArgumentError(param, "must not be empty")
    return raw


def _to_channel_kind(param: str, raw: str) -> ChannelKind:
    kind = ChannelKind.parse(raw)
    if kind is None:
        choices = "/".join(k.value for k in ChannelKind)
        raise ArgumentError(param, f"invalid channel type {raw!r} ({choices})")
    return kind


def _to_permissions(param: str, raw: str) -> frozenset[str]:
    names = [p.strip() for p in raw.split(",") if p.strip()]
    unknown = [n for n in names if n not in PERMISSION_FLAGS]
    if unknown:
        raise ArgumentError(param, f"unknown permission(s): {', '.join(unknown)}")
    return frozenset(names)


def _to_color(param: str, raw: str) -> str:
    if not raw:
        return ""
    match = _COLOR_RE.match(raw)
    if match is None:
        raise ArgumentError(param, f"invalid color {raw!r} (expected #rrggbb)")
    return "#" + match.group(1).lower()


_CONVERTERS: Final[dict[ParamKind, Any]] = {
    ParamKind.ID: _to_id,
    ParamKind.OPTIONAL_ID: _to_optional_id,
    ParamKind.BOOL: _to_bool,
    ParamKind.OPTIONAL_BOOL: _to_optional_bool,
    ParamKind.INT: _to_int,
    ParamKind.TEXT: _to_text,
    ParamKind.NAME: _to_name,
    ParamKind.CHANNEL_KIND: _to_channel_kind,
    ParamKind.PERMISSIONS: _to_permissions,
    ParamKind.COLOR: _to_color,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def coerce(spec: ParamSpec, raw: str) -> Any:
    """Convert one bound string according to ``spec.kind``.

    Raises
    ------
    ArgumentError
        If the value does not satisfy the kind.
    """
    return _CONVERTERS[spec.kind](spec.name, raw)


def coerce_arguments(specs: Iterable[ParamSpec], arguments: Mapping[str, str]) -> dict[str, Any]:
    """Convert every declared parameter of an action, in schema order.

    Parameters absent from ``arguments`` are treated as empty strings.
    The first failing parameter aborts conversion with ``ArgumentError``.
    """
    return {spec.name: coerce(spec, arguments.get(spec.name, "")) for spec in specs}


def check_arguments(specs: Iterable[ParamSpec], arguments: Mapping[str, str]) -> list[ArgumentError]:
    """Return every conversion failure without raising."""
    problems: list[ArgumentError] = []
    for spec in specs:
        try:
            coerce(spec, arguments.get(spec.name, ""))
        except ArgumentError as exc:
            problems.append(exc)
    return problems
