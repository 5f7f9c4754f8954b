"""Snapshot serialization for ``InMemoryGraph``.

A snapshot is a plain dict/list structure that maps naturally to both
JSON and YAML.  The CLI uses it to load a graph before ``run`` and to
write the mutated graph back afterwards.

Usage
-----
::

    from patchlang.graph.snapshot import GraphSerializer

    serializer = GraphSerializer()
    graph = serializer.from_yaml(Path("server.yaml").read_text())
    text = serializer.to_yaml(graph)
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from patchlang.errors import PatchlangError
from patchlang.graph.memory import InMemoryGraph
from patchlang.graph.models import Channel, ChannelKind, Overwrite, Role


class SnapshotError(PatchlangError):
    """Raised when a snapshot document is malformed."""


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{what} entry must be a mapping, got {type(value).__name__}")
    return value


class GraphSerializer:
    """Converts between ``InMemoryGraph`` objects and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (graph → dict)
    # ------------------------------------------------------------------

    def to_dict(self, graph: InMemoryGraph) -> dict[str, object]:
        return {
            "id": graph.id,
            "name": graph.name,
            "channels": [self._channel_to_dict(c) for c in graph.channels()],
            "roles": [self._role_to_dict(r) for r in graph.roles()],
        }

    def _channel_to_dict(self, channel: Channel) -> dict[str, object]:
        return {
            "id": channel.id,
            "name": channel.name,
            "kind": channel.kind.value,
            "parent": channel.parent_id,
            "topic": channel.topic,
            "nsfw": channel.nsfw,
            "slowmode": channel.slowmode,
            "overwrites": [
                {"role": ow.role_id, "allow": sorted(ow.allow), "deny": sorted(ow.deny)}
                for ow in channel.overwrites.values()
            ],
        }

    def _role_to_dict(self, role: Role) -> dict[str, object]:
        return {
            "id": role.id,
            "name": role.name,
            "color": role.color,
            "hoist": role.hoist,
            "mentionable": role.mentionable,
        }

    def to_json(self, graph: InMemoryGraph, indent: int = 2) -> str:
        return json.dumps(self.to_dict(graph), indent=indent, ensure_ascii=False) + "\n"

    def to_yaml(self, graph: InMemoryGraph) -> str:
        return yaml.safe_dump(self.to_dict(graph), sort_keys=False, allow_unicode=True)

    # ------------------------------------------------------------------
    # Deserialization (dict → graph)
    # ------------------------------------------------------------------

    def from_dict(self, data: Any) -> InMemoryGraph:
        """Build an ``InMemoryGraph`` from a snapshot dict.

        Raises
        ------
        SnapshotError
            If a required key is missing or a value has the wrong shape.
        """
        if not isinstance(data, dict):
            raise SnapshotError("snapshot root must be a mapping")
        try:
            graph_id = str(data["id"])
            channels = [self._channel_from_dict(_mapping(c, "channel")) for c in data.get("channels") or []]
            roles = [self._role_from_dict(_mapping(r, "role")) for r in data.get("roles") or []]
        except (KeyError, TypeError, ValueError) as exc:
            raise SnapshotError(f"malformed snapshot: {exc}") from exc
        return InMemoryGraph(graph_id, name=str(data.get("name") or ""), channels=channels, roles=roles)

    def _channel_from_dict(self, d: dict[str, Any]) -> Channel:
        kind = ChannelKind.parse(str(d.get("kind") or "text"))
        if kind is None:
            raise ValueError(f"unknown channel kind {d.get('kind')!r}")
        parent = d.get("parent")
        overwrites = {}
        for ow in d.get("overwrites") or []:
            ow = _mapping(ow, "overwrite")
            role_id = str(ow["role"])
            overwrites[role_id] = Overwrite(
                role_id=role_id,
                allow=frozenset(ow.get("allow") or ()),
                deny=frozenset(ow.get("deny") or ()),
            )
        return Channel(
            id=str(d["id"]),
            name=str(d["name"]),
            kind=kind,
            parent_id=str(parent) if parent not in (None, "", "none") else None,
            topic=str(d.get("topic") or ""),
            nsfw=bool(d.get("nsfw", False)),
            slowmode=int(d.get("slowmode") or 0),
            overwrites=overwrites,
        )

    def _role_from_dict(self, d: dict[str, Any]) -> Role:
        return Role(
            id=str(d["id"]),
            name=str(d["name"]),
            color=str(d.get("color") or ""),
            hoist=bool(d.get("hoist", False)),
            mentionable=bool(d.get("mentionable", False)),
        )

    def from_json(self, text: str) -> InMemoryGraph:
        try:
            return self.from_dict(json.loads(text))
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"invalid JSON snapshot: {exc}") from exc

    def from_yaml(self, text: str) -> InMemoryGraph:
        try:
            return self.from_dict(yaml.safe_load(text))
        except yaml.YAMLError as exc:
            raise SnapshotError(f"invalid YAML snapshot: {exc}") from exc


def load_snapshot(path: Path) -> InMemoryGraph:
    """Read a ``.json`` or ``.yaml``/``.yml`` snapshot file."""
    text = path.read_text(encoding="utf-8")
    serializer = GraphSerializer()
    if path.suffix.lower() == ".json":
        return serializer.from_json(text)
    return serializer.from_yaml(text)


def save_snapshot(path: Path, graph: InMemoryGraph) -> None:
    """Write ``graph`` to ``path`` in the format implied by its suffix."""
    serializer = GraphSerializer()
    if path.suffix.lower() == ".json":
        text = serializer.to_json(graph)
    else:
        text = serializer.to_yaml(graph)
    path.write_text(text, encoding="utf-8")
