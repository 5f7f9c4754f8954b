"""Unit tests for patchlang.config.settings and patchlang.engine."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from patchlang.config import PatchSettings
from patchlang.engine import EngineContext
from patchlang.errors import RegistryLoadError


class TestPatchSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("MAX_ACTIONS", "CONFIRM_TTL_SECONDS", "ALLOW_DELETES", "OPS_PATH"):
            monkeypatch.delenv(f"PATCH_{name}", raising=False)
        settings = PatchSettings()
        assert settings.max_actions == 500
        assert settings.confirm_ttl_seconds == 600
        assert settings.allow_deletes is False
        assert settings.ops_path is None
        assert settings.max_displayed_errors == 15
        assert settings.max_displayed_failures == 10

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATCH_MAX_ACTIONS", "25")
        monkeypatch.setenv("PATCH_ALLOW_DELETES", "true")
        settings = PatchSettings()
        assert settings.max_actions == 25
        assert settings.allow_deletes is True

    def test_cli_flags_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATCH_MAX_ACTIONS", "25")
        assert PatchSettings.from_cli(max_actions=7).max_actions == 7

    def test_none_flags_fall_back_to_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATCH_MAX_ACTIONS", "25")
        assert PatchSettings.from_cli(max_actions=None).max_actions == 25

    def test_frozen(self) -> None:
        settings = PatchSettings()
        with pytest.raises(ValidationError):
            settings.max_actions = 1  # type: ignore[misc]

    def test_rejects_non_positive_limit(self) -> None:
        with pytest.raises(ValidationError):
            PatchSettings(max_actions=0)


class TestEngineContext:
    def test_default_engine_resolves_builtin_ops(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PATCH_OPS_PATH", raising=False)
        engine = EngineContext()
        assert engine.registry.resolve("rename", "channel").handler_id == "channel.rename"
        assert engine.store.ttl_seconds == engine.settings.confirm_ttl_seconds

    def test_ops_path_setting(self, tmp_path: Path, catalog) -> None:
        path = tmp_path / "ops.map"
        path.write_text("retitle:channel = channel.rename:id,name\n", encoding="utf-8")
        engine = EngineContext(PatchSettings(ops_path=path), catalog=catalog)
        assert engine.registry.lookup("retitle", "channel") is not None
        assert engine.registry.lookup("rename", "channel") is None

    def test_dangling_handler_fails_construction(self, tmp_path: Path, catalog) -> None:
        path = tmp_path / "ops.map"
        path.write_text("x:y = no.such.handler\n", encoding="utf-8")
        with pytest.raises(RegistryLoadError):
            EngineContext(PatchSettings(ops_path=path), catalog=catalog)

    def test_reload_is_visible_to_next_parse(self, tmp_path: Path, catalog) -> None:
        from patchlang.parser import parse

        path = tmp_path / "ops.map"
        path.write_text("keep:* = noop\n", encoding="utf-8")
        engine = EngineContext(PatchSettings(ops_path=path), catalog=catalog)
        assert not parse("rename role 1 x", engine.registry).ok

        path.write_text("keep:* = noop\nrename:role = role.rename:id,name\n", encoding="utf-8")
        engine.reload()
        assert parse("rename role 1 x", engine.registry).ok

    def test_engines_are_independent(self, catalog, registry) -> None:
        a = EngineContext(catalog=catalog, registry=registry)
        b = EngineContext(catalog=catalog, registry=registry)
        assert a.store is not b.store
