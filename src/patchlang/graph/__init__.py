"""Resource graph boundary: protocol, data views, in-memory graph, snapshots."""
from __future__ import annotations

from patchlang.graph.memory import AuditEntry, InMemoryGraph
from patchlang.graph.models import PERMISSION_FLAGS, Channel, ChannelKind, Overwrite, Role
from patchlang.graph.protocol import ResourceGraph
from patchlang.graph.snapshot import GraphSerializer, SnapshotError, load_snapshot, save_snapshot
from patchlang.graph.template import export_template

__all__ = [
    "ResourceGraph",
    "InMemoryGraph",
    "AuditEntry",
    "Channel",
    "ChannelKind",
    "Overwrite",
    "Role",
    "PERMISSION_FLAGS",
    "GraphSerializer",
    "SnapshotError",
    "load_snapshot",
    "save_snapshot",
    "export_template",
]
