"""Shared test fixtures for patchlang.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from patchlang.config import PatchSettings
from patchlang.engine import EngineContext
from patchlang.graph import Channel, ChannelKind, InMemoryGraph, Overwrite, Role
from patchlang.handlers import HandlerRegistry, default_catalog
from patchlang.registry import OperationRegistry

GUILD_ID = "900000000000000000"
CATEGORY_ID = "900000000000000010"
GENERAL_ID = "900000000000000011"
VOICE_ID = "900000000000000012"
LOOSE_ID = "900000000000000013"
MOD_ROLE_ID = "900000000000000020"
MEMBER_ROLE_ID = "900000000000000021"
MISSING_ID = "999999999999999999"


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def build_graph() -> InMemoryGraph:
    """Return a small graph: one category, three channels, three roles."""
    return InMemoryGraph(
        GUILD_ID,
        name="Test Guild",
        channels=[
            Channel(id=CATEGORY_ID, name="Text Channels", kind=ChannelKind.CATEGORY),
            Channel(
                id=GENERAL_ID,
                name="general",
                parent_id=CATEGORY_ID,
                topic="Say hi",
                overwrites={
                    MOD_ROLE_ID: Overwrite(MOD_ROLE_ID, allow=frozenset({"ManageMessages"})),
                },
            ),
            Channel(id=VOICE_ID, name="Lounge", kind=ChannelKind.VOICE, parent_id=CATEGORY_ID),
            Channel(id=LOOSE_ID, name="loose-ends"),
        ],
        roles=[
            Role(id=GUILD_ID, name="@everyone"),
            Role(id=MOD_ROLE_ID, name="Moderator", color="#ff0000", hoist=True),
            Role(id=MEMBER_ROLE_ID, name="Member"),
        ],
    )


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "patchlang"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def graph() -> InMemoryGraph:
    return build_graph()


@pytest.fixture()
def catalog() -> HandlerRegistry:
    return default_catalog(load_entrypoints=False)


@pytest.fixture()
def registry(catalog: HandlerRegistry) -> OperationRegistry:
    return OperationRegistry.default(catalog)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def engine(catalog: HandlerRegistry, registry: OperationRegistry, clock: FakeClock) -> EngineContext:
    return EngineContext(PatchSettings(), catalog=catalog, registry=registry, clock=clock)


class Ids:
    """Identifiers of the entities in ``build_graph``."""

    guild = GUILD_ID
    category = CATEGORY_ID
    general = GENERAL_ID
    voice = VOICE_ID
    loose = LOOSE_ID
    mod_role = MOD_ROLE_ID
    member_role = MEMBER_ROLE_ID
    missing = MISSING_ID


@pytest.fixture()
def ids() -> type[Ids]:
    return Ids
