"""Structural tests for the patchlang benchmark module."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent / "benchmarks"))


def test_bench_throughput_importable() -> None:
    """Verify bench_throughput module can be imported."""
    mod = importlib.import_module("bench_throughput")
    assert hasattr(mod, "bench_parse_throughput")
    assert hasattr(mod, "bench_apply_throughput")


def test_bench_latency_importable() -> None:
    """Verify bench_latency module can be imported."""
    mod = importlib.import_module("bench_latency")
    assert hasattr(mod, "bench_parse_latency")


def test_bench_memory_importable() -> None:
    """Verify bench_memory module can be imported."""
    mod = importlib.import_module("bench_memory")
    assert hasattr(mod, "bench_parse_memory")


def test_sample_script_parses_cleanly() -> None:
    """Verify the shared benchmark script is valid against the default map."""
    import patchlang
    from samples import build_script

    result = patchlang.parse(build_script(10))
    assert result.ok
    assert not result.warnings
    assert len(result.actions) == 30


def test_parse_throughput_returns_expected_keys() -> None:
    """Verify bench_parse_throughput returns expected result keys."""
    from bench_throughput import bench_parse_throughput

    result = bench_parse_throughput()
    assert "operation" in result
    assert "iterations" in result
    assert "ops_per_second" in result
    assert "avg_latency_ms" in result
    assert float(result["ops_per_second"]) > 0  # type: ignore[arg-type]


def test_apply_throughput_returns_expected_keys() -> None:
    """Verify bench_apply_throughput returns expected result keys."""
    from bench_throughput import bench_apply_throughput

    result = bench_apply_throughput()
    assert "operation" in result
    assert "ops_per_second" in result
    assert "avg_latency_ms" in result


def test_memory_bench_stays_under_action_limit() -> None:
    """Verify bench_parse_memory parses its script without overflow."""
    from bench_memory import bench_parse_memory

    result = bench_parse_memory()
    assert result["actions_per_parse"] == 498


def test_plan_latency_reports_percentiles() -> None:
    """Verify bench_plan_latency reports p50 <= p95."""
    from bench_latency import bench_plan_latency

    result = bench_plan_latency()
    assert float(result["p50_ms"]) <= float(result["p95_ms"])  # type: ignore[arg-type]


def test_compare_table_marks_missing_results(tmp_path: Path) -> None:
    """Verify compare.build_table renders a row for every known result file."""
    from compare import RESULT_FILES, build_table, load_results

    (tmp_path / "latency_baseline.json").write_text('{"operation": "x", "p95_ms": 1.5}', encoding="utf-8")
    results = load_results(tmp_path)
    assert results["latency_baseline.json"] == {"operation": "x", "p95_ms": 1.5}
    assert results["memory_baseline.json"] is None
    assert build_table(results).row_count == len(RESULT_FILES)
