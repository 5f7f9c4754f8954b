"""Sample graph and scripts shared by the patchlang benchmarks."""
from __future__ import annotations

from patchlang.graph import Channel, ChannelKind, InMemoryGraph, Role

GUILD_ID = "800000000000000000"
CATEGORY_ID = "800000000000000001"
ROLE_ID = "800000000000000002"
_FIRST_CHANNEL = 800000000000001000


def channel_ids(count: int) -> list[str]:
    return [str(_FIRST_CHANNEL + i) for i in range(count)]


def build_graph(channels: int = 50) -> InMemoryGraph:
    """Return a graph with one category, ``channels`` text channels and one role."""
    return InMemoryGraph(
        GUILD_ID,
        name="Bench Guild",
        channels=[
            Channel(id=CATEGORY_ID, name="Bench", kind=ChannelKind.CATEGORY),
            *(Channel(id=cid, name=f"chan-{i}", parent_id=CATEGORY_ID) for i, cid in enumerate(channel_ids(channels))),
        ],
        roles=[Role(id=GUILD_ID, name="@everyone"), Role(id=ROLE_ID, name="Bench")],
    )


def build_script(channels: int = 50) -> str:
    """Return a script touching every channel of :func:`build_graph` three ways."""
    lines = ["# benchmark patch"]
    for i, cid in enumerate(channel_ids(channels)):
        lines.append(f'rename channel {cid} "renamed {i}"')
        lines.append(f"topic channel {cid} topic='Bench topic {i}'")
        lines.append(f"perm:set channel={cid} role={ROLE_ID} allow=ViewChannel,SendMessages deny=AddReactions")
    return "\n".join(lines) + "\n"
