"""Operation registry: resolves ``(verb, resourceType)`` to an operation.

The registry is loaded from a line-oriented mapping source::

    # verb:resourceType = handlerId:param1,param2,...[:flags]
    rename:channel = channel.rename:id,name
    delete:channel = channel.delete:id:destructive
    keep:*         = noop

``resourceType`` may be the wildcard ``*``.  Resolution tries the exact
``verb:type`` key first, then ``verb:*``; it never falls back across
verbs.  A parameter may carry an explicit kind (``seconds@int``) that
overrides the kind declared by the handler.  The only flag understood
today is ``destructive``.

When a handler catalog is supplied, every handler id must be registered
in it; a single dangling reference rejects the whole source, so anything
that resolves at parse time is runnable at apply time.

Hot reload swaps the whole table in one assignment: parses that started
before the swap keep the snapshot they took, parses that start after it
see the new table.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from types import MappingProxyType

from patchlang.errors import RegistryLoadError, UnknownOperationError
from patchlang.handlers.registry import HandlerRegistry
from patchlang.schema.params import ParamKind, ParamSpec

logger = logging.getLogger(__name__)

WILDCARD = "*"
DEFAULT_OPS_RESOURCE = "ops.map"
_KNOWN_FLAGS = frozenset({"destructive"})

OperationTable = Mapping[str, "OperationDescriptor"]


@dataclass(frozen=True)
class OperationDescriptor:
    """One entry of the operation map.

    Parameters
    ----------
    verb:
        Action keyword, e.g. ``rename``.
    resource_type:
        Concrete resource type, or ``*``.
    handler_id:
        Handler that implements the operation.
    params:
        Ordered parameter schema; positional arguments bind in this order.
    source_line:
        1-based line of the entry in the mapping source.
    destructive:
        True when the operation is irreversible.
    """

    verb: str
    resource_type: str
    handler_id: str
    params: tuple[ParamSpec, ...] = ()
    source_line: int = 0
    destructive: bool = False

    @property
    def key(self) -> str:
        return f"{self.verb}:{self.resource_type}"

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.params)

    @property
    def is_wildcard(self) -> bool:
        return self.resource_type == WILDCARD


# ---------------------------------------------------------------------------
# Mapping source parsing
# ---------------------------------------------------------------------------


def _parse_params(raw: str, line_no: int, problems: list[str]) -> list[tuple[str, ParamKind | None]]:
    out: list[tuple[str, ParamKind | None]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, kind_name = item.partition("@")
        kind: ParamKind | None = None
        if sep:
            try:
                kind = ParamKind.from_name(kind_name)
            except ValueError:
                problems.append(f"line {line_no}: unknown parameter kind {kind_name!r} for {name.strip()!r}")
        out.append((name.strip(), kind))
    return out


def parse_operation_map(text: str, catalog: HandlerRegistry | None = None) -> dict[str, OperationDescriptor]:
    """Parse a mapping source into an operation table.

    Entries missing a verb, a resource type or a handler id are skipped.
    A later entry for the same ``verb:type`` replaces an earlier one.

    Parameters
    ----------
    text:
        Complete mapping source.
    catalog:
        When given, handler ids are checked against it and parameter
        kinds / destructiveness are taken from the handler classes.

    Raises
    ------
    RegistryLoadError
        If a handler id is not in ``catalog`` or a parameter kind is
        unknown.  Every problem in the source is listed.
    """
    table: dict[str, OperationDescriptor] = {}
    problems: list[str] = []

    for line_no, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        sides = line.split("=")
        left = sides[0].strip()
        right = sides[1].strip() if len(sides) > 1 else ""
        if not left or not right:
            logger.debug("ops line %d skipped: missing side of '='", line_no)
            continue

        left_parts = [p.strip() for p in left.split(":")]
        right_parts = [p.strip() for p in right.split(":")]
        verb = left_parts[0]
        resource_type = left_parts[1] if len(left_parts) > 1 else ""
        handler_id = right_parts[0]
        if not verb or not resource_type or not handler_id:
            logger.debug("ops line %d skipped: missing verb, type or handler", line_no)
            continue

        params = _parse_params(right_parts[1] if len(right_parts) > 1 else "", line_no, problems)
        flags = {f.strip() for f in (right_parts[2] if len(right_parts) > 2 else "").split(",") if f.strip()}
        for flag in flags - _KNOWN_FLAGS:
            logger.warning("ops line %d: ignoring unknown flag %r", line_no, flag)

        declared: Mapping[str, ParamKind] = {}
        destructive = "destructive" in flags
        if catalog is not None:
            if handler_id not in catalog:
                problems.append(f"line {line_no}: handler {handler_id!r} is not registered")
                continue
            handler_cls = catalog.get(handler_id)
            declared = handler_cls.params
            destructive = destructive or handler_cls.destructive

        descriptor = OperationDescriptor(
            verb=verb,
            resource_type=resource_type,
            handler_id=handler_id,
            params=tuple(ParamSpec(name, kind or declared.get(name, ParamKind.TEXT)) for name, kind in params),
            source_line=line_no,
            destructive=destructive,
        )
        if descriptor.key in table:
            logger.debug("ops line %d overrides %s", line_no, descriptor.key)
        table[descriptor.key] = descriptor

    if problems:
        raise RegistryLoadError("operation map rejected", problems)
    return table


def resolve_in(table: OperationTable, verb: str, resource_type: str) -> OperationDescriptor:
    """Resolve against a table: exact key, then the verb's wildcard.

    Raises
    ------
    UnknownOperationError
        If neither key is present.
    """
    exact = table.get(f"{verb}:{resource_type}")
    if exact is not None:
        return exact
    wild = table.get(f"{verb}:{WILDCARD}")
    if wild is not None:
        return wild
    raise UnknownOperationError(verb, resource_type)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class OperationRegistry:
    """Reloadable operation table.

    Prefer the ``from_text`` / ``from_path`` / ``default`` constructors.

    Parameters
    ----------
    table:
        Initial operations keyed by ``verb:type``.
    loader:
        Callable returning a fresh table; used by ``reload``.
    source:
        Human-readable description of where the table came from.
    """

    def __init__(
        self,
        table: Mapping[str, OperationDescriptor],
        loader: Callable[[], Mapping[str, OperationDescriptor]] | None = None,
        source: str = "<memory>",
    ) -> None:
        self._table: OperationTable = MappingProxyType(dict(table))
        self._loader = loader
        self.source = source

    @classmethod
    def from_text(cls, text: str, catalog: HandlerRegistry | None = None) -> "OperationRegistry":
        """Build a registry from mapping text; ``reload`` re-parses the same text."""
        return cls(parse_operation_map(text, catalog), lambda: parse_operation_map(text, catalog))

    @classmethod
    def from_path(cls, path: Path, catalog: HandlerRegistry | None = None) -> "OperationRegistry":
        """Build a registry from a mapping file; ``reload`` re-reads the file."""

        def load() -> dict[str, OperationDescriptor]:
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as exc:
                raise RegistryLoadError(f"cannot read operation map {path}: {exc}") from exc
            return parse_operation_map(text, catalog)

        return cls(load(), load, source=str(path))

    @classmethod
    def default(cls, catalog: HandlerRegistry | None = None) -> "OperationRegistry":
        """Build a registry from the ``ops.map`` shipped with the package."""

        def load() -> dict[str, OperationDescriptor]:
            text = resources.files("patchlang.data").joinpath(DEFAULT_OPS_RESOURCE).read_text(encoding="utf-8")
            return parse_operation_map(text, catalog)

        return cls(load(), load, source=f"patchlang:{DEFAULT_OPS_RESOURCE}")

    # ------------------------------------------------------------------
    # Reload
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Re-load the source and swap the table.

        On failure the current table stays in place and the error is
        re-raised.

        Raises
        ------
        RegistryLoadError
            If the registry has no source or the source is rejected.
        """
        if self._loader is None:
            raise RegistryLoadError("registry has no source to reload from")
        new_table = MappingProxyType(dict(self._loader()))
        self._table = new_table
        logger.info("operation map reloaded from %s: %d operation(s)", self.source, len(new_table))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def snapshot(self) -> OperationTable:
        """Return the current table; later reloads do not affect it."""
        return self._table

    def resolve(self, verb: str, resource_type: str) -> OperationDescriptor:
        """Resolve ``verb``/``resource_type`` (exact first, then wildcard).

        Raises
        ------
        UnknownOperationError
            If the operation is unknown.
        """
        return resolve_in(self._table, verb, resource_type)

    def lookup(self, verb: str, resource_type: str) -> OperationDescriptor | None:
        """Like ``resolve`` but return None instead of raising."""
        try:
            return self.resolve(verb, resource_type)
        except UnknownOperationError:
            return None

    def __iter__(self) -> Iterator[OperationDescriptor]:
        """Iterate descriptors in source-line order."""
        return iter(sorted(self._table.values(), key=lambda d: d.source_line))

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"OperationRegistry(source={self.source!r}, operations={len(self._table)})"
