"""Export a patch script template describing an existing graph.

Every line uses the ``keep`` verb, which the default operation mapping
resolves to the ``noop`` handler, so the exported file plans cleanly
and applies as a no-op.  Users edit ``keep`` into ``rename``, ``move``,
``perm``... on the lines they want to change.
"""
from __future__ import annotations

from patchlang.graph.models import Channel
from patchlang.graph.protocol import ResourceGraph

_HEADER = (
    "# patchlang template",
    '# Change "keep" to rename/move/topic/perm/... then plan the file',
    "# ------------------------------------------------------------",
)


def quote(value: str) -> str:
    """Return ``value`` as a double-quoted script argument."""
    text = value.replace("\\", "\\\\").replace('"', '\\"').replace("\r", " ").replace("\n", " ")
    return f'"{text}"'


def _channel_line(channel: Channel) -> str:
    parent = channel.parent_id or "none"
    return (
        f"keep channel {channel.id} name={quote(channel.name)} ctype={channel.kind.value} "
        f"parent={parent} topic={quote(channel.topic)} nsfw={str(channel.nsfw).lower()}"
    )


def export_template(graph: ResourceGraph) -> str:
    """Render ``graph`` as a script of ``keep`` lines.

    Sections: categories, channels, roles (the default role, whose id
    equals the graph id, is skipped) and role permission overwrites.
    """
    channels = list(graph.channels())
    lines: list[str] = [*_HEADER, "", "# Categories"]
    for ch in channels:
        if ch.is_category:
            lines.append(f"keep category {ch.id} name={quote(ch.name)}")

    lines += ["", "# Channels"]
    for ch in channels:
        if not ch.is_category:
            lines.append(_channel_line(ch))

    lines += ["", "# Roles (excluding the default role)"]
    for role in graph.roles():
        if role.id == graph.id:
            continue
        lines.append(
            f"keep role {role.id} name={quote(role.name)} color={role.color} "
            f"hoist={str(role.hoist).lower()} mentionable={str(role.mentionable).lower()}"
        )

    lines += ["", "# Permission overwrites (can be large)"]
    for ch in channels:
        for ow in ch.overwrites.values():
            lines.append(
                f"keep perm:set channel={ch.id} role={ow.role_id} "
                f"allow={','.join(sorted(ow.allow))} deny={','.join(sorted(ow.deny))}"
            )
    lines.append("")
    return "\n".join(lines)
