"""Unit tests for patchlang.cli.main: commands driven through click's CliRunner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from patchlang.cli.main import cli
from patchlang.graph import InMemoryGraph, load_snapshot, save_snapshot


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def snapshot(tmp_path: Path, graph: InMemoryGraph) -> Path:
    path = tmp_path / "guild.yaml"
    save_snapshot(path, graph)
    return path


def write_script(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "patch.txt"
    path.write_text(text, encoding="utf-8")
    return path


class TestInfoCommands:
    def test_version(self, runner: CliRunner, expected_version: str) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert expected_version in result.output

    def test_ops(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["ops"])
        assert result.exit_code == 0
        assert "keep:*" in result.output

    def test_ops_with_bad_map(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "ops.map"
        bad.write_text("x:y = no.such.handler\n", encoding="utf-8")
        result = runner.invoke(cli, ["ops", "--ops", str(bad)])
        assert result.exit_code == 1
        assert "no.such.handler" in result.output

    def test_handlers(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["handlers"])
        assert result.exit_code == 0
        assert "perm.set" in result.output


class TestCheckAndParse:
    def test_check_clean(self, runner: CliRunner, tmp_path: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\n")
        result = runner.invoke(cli, ["check", str(script)])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_check_errors_exit_1(self, runner: CliRunner, tmp_path: Path) -> None:
        script = write_script(tmp_path, "bogus thing\n")
        result = runner.invoke(cli, ["check", str(script)])
        assert result.exit_code == 1
        assert "PL002" in result.output

    def test_check_warnings_only_exit_0(self, runner: CliRunner, tmp_path: Path) -> None:
        script = write_script(tmp_path, "rename channel 42 chat\n")
        result = runner.invoke(cli, ["check", str(script)])
        assert result.exit_code == 0
        assert "PL101" in result.output

    def test_check_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["check", str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_parse_to_json_file(self, runner: CliRunner, tmp_path: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\ndelete role {ids.member_role}\n")
        out = tmp_path / "actions.json"
        result = runner.invoke(cli, ["parse", str(script), "-o", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["ok"] is True
        assert [a["handler"] for a in data["actions"]] == ["channel.rename", "role.delete"]
        assert data["actions"][1]["destructive"] is True

    def test_parse_yaml_to_stdout(self, runner: CliRunner, tmp_path: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\n")
        result = runner.invoke(cli, ["parse", str(script), "--format", "yaml"])
        assert result.exit_code == 0
        assert "channel.rename" in result.output


class TestExport:
    def test_export_to_stdout(self, runner: CliRunner, snapshot: Path, ids) -> None:
        result = runner.invoke(cli, ["export", str(snapshot)])
        assert result.exit_code == 0
        assert f"keep category {ids.category}" in result.output

    def test_export_bad_snapshot(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{nope", encoding="utf-8")
        result = runner.invoke(cli, ["export", str(bad)])
        assert result.exit_code == 1

    def test_export_snapshot_with_bad_entry(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("id: \"1\"\nchannels:\n  - oops\n", encoding="utf-8")
        result = runner.invoke(cli, ["export", str(bad)])
        assert result.exit_code == 1
        assert "Cannot load snapshot" in result.output


class TestRun:
    def test_run_with_yes_updates_snapshot(self, runner: CliRunner, tmp_path: Path, snapshot: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\n")
        result = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--yes", "--reason", "tidy"])
        assert result.exit_code == 0, result.output
        assert "channel.rename: 1" in result.output
        graph = load_snapshot(snapshot)
        assert next(c for c in graph.channels() if c.id == ids.general).name == "chat"

    def test_run_dry_run_changes_nothing(self, runner: CliRunner, tmp_path: Path, snapshot: Path, ids) -> None:
        before = snapshot.read_text(encoding="utf-8")
        script = write_script(tmp_path, f"rename channel {ids.general} chat\n")
        result = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--dry-run"])
        assert result.exit_code == 0
        assert snapshot.read_text(encoding="utf-8") == before

    def test_run_wrong_code(self, runner: CliRunner, tmp_path: Path, snapshot: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\n")
        result = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot)], input="nope\n")
        assert result.exit_code == 1
        assert "invalid confirmation code" in result.output

    def test_run_destructive_needs_flag(self, runner: CliRunner, tmp_path: Path, snapshot: Path, ids) -> None:
        script = write_script(tmp_path, f"delete channel {ids.loose}\n")
        blocked = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--yes"])
        assert blocked.exit_code == 1
        assert "destructive" in blocked.output

        allowed = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--yes", "--allow-destructive"])
        assert allowed.exit_code == 0
        assert all(c.id != ids.loose for c in load_snapshot(snapshot).channels())

    def test_run_rejected_plan(self, runner: CliRunner, tmp_path: Path, snapshot: Path) -> None:
        script = write_script(tmp_path, "bogus thing\nrename\n")
        result = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--yes"])
        assert result.exit_code == 1
        assert "Patch rejected" in result.output
        assert 'unknown operation "bogus:thing"' in result.output

    def test_run_partial_failure_exits_1(self, runner: CliRunner, tmp_path: Path, snapshot: Path, ids) -> None:
        script = write_script(tmp_path, f"rename channel {ids.general} chat\nrename channel {ids.missing} x\n")
        result = runner.invoke(cli, ["run", str(script), "--graph", str(snapshot), "--yes"])
        assert result.exit_code == 1
        assert "1 failed" in result.output
        graph = load_snapshot(snapshot)
        assert next(c for c in graph.channels() if c.id == ids.general).name == "chat"
