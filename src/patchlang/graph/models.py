"""Plain data views of the resource graph: channels, roles, overwrites.

These are what a ``ResourceGraph`` implementation hands back from its
lookups.  They carry no behaviour; mutations always go through the
graph's async methods so that a remote implementation can perform the
real API call.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final


class ChannelKind(Enum):
    """Kinds of container a channel-like node can be."""

    TEXT = "text"
    VOICE = "voice"
    FORUM = "forum"
    ANNOUNCEMENT = "announcement"
    STAGE = "stage"
    CATEGORY = "category"

    @classmethod
    def parse(cls, value: str) -> "ChannelKind | None":
        """Return the kind named by ``value`` (case-insensitive), or None.

        ``news`` is accepted as an alias of ``announcement``.
        """
        text = value.strip().lower()
        if text == "news":
            return cls.ANNOUNCEMENT
        for kind in cls:
            if kind.value == text:
                return kind
        return None


# Permission flag names accepted in overwrites.
PERMISSION_FLAGS: Final[frozenset[str]] = frozenset(
    {
        "CreateInstantInvite",
        "KickMembers",
        "BanMembers",
        "Administrator",
        "ManageChannels",
        "ManageGuild",
        "AddReactions",
        "ViewAuditLog",
        "PrioritySpeaker",
        "Stream",
        "ViewChannel",
        "SendMessages",
        "SendTTSMessages",
        "ManageMessages",
        "EmbedLinks",
        "AttachFiles",
        "ReadMessageHistory",
        "MentionEveryone",
        "UseExternalEmojis",
        "ViewGuildInsights",
        "Connect",
        "Speak",
        "MuteMembers",
        "DeafenMembers",
        "MoveMembers",
        "UseVAD",
        "ChangeNickname",
        "ManageNicknames",
        "ManageRoles",
        "ManageWebhooks",
        "ManageEmojisAndStickers",
        "ManageGuildExpressions",
        "UseApplicationCommands",
        "RequestToSpeak",
        "ManageEvents",
        "ManageThreads",
        "CreatePublicThreads",
        "CreatePrivateThreads",
        "UseExternalStickers",
        "SendMessagesInThreads",
        "UseEmbeddedActivities",
        "ModerateMembers",
        "ViewCreatorMonetizationAnalytics",
        "UseSoundboard",
        "CreateGuildExpressions",
        "CreateEvents",
        "UseExternalSounds",
        "SendVoiceMessages",
        "SendPolls",
        "UseExternalApps",
    }
)

# Kinds whose nodes accept a topic / slowmode / nsfw flag.
TOPIC_KINDS: Final[frozenset[ChannelKind]] = frozenset(
    {ChannelKind.TEXT, ChannelKind.ANNOUNCEMENT, ChannelKind.FORUM}
)
SLOWMODE_KINDS: Final[frozenset[ChannelKind]] = frozenset(
    {ChannelKind.TEXT, ChannelKind.FORUM, ChannelKind.VOICE, ChannelKind.STAGE}
)
NSFW_KINDS: Final[frozenset[ChannelKind]] = frozenset(
    {ChannelKind.TEXT, ChannelKind.ANNOUNCEMENT, ChannelKind.FORUM, ChannelKind.VOICE, ChannelKind.STAGE}
)


@dataclass
class Overwrite:
    """Permission overwrite of one role on one channel."""

    role_id: str
    allow: frozenset[str] = frozenset()
    deny: frozenset[str] = frozenset()


@dataclass
class Channel:
    """A channel or category node."""

    id: str
    name: str
    kind: ChannelKind = ChannelKind.TEXT
    parent_id: str | None = None
    topic: str = ""
    nsfw: bool = False
    slowmode: int = 0
    overwrites: dict[str, Overwrite] = field(default_factory=dict)

    @property
    def is_category(self) -> bool:
        return self.kind is ChannelKind.CATEGORY


@dataclass
class Role:
    """A role-like entity."""

    id: str
    name: str
    color: str = ""
    hoist: bool = False
    mentionable: bool = False
