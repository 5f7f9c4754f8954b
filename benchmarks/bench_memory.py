"""Benchmark: Memory usage while parsing a script at the action limit."""
from __future__ import annotations

import json
import sys
import tracemalloc
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import patchlang
from samples import build_script

_ITERATIONS: int = 50

# 166 channels x 3 lines = 498 actions, just under the default limit
_SCRIPT = build_script(166)


def bench_parse_memory() -> dict[str, object]:
    """Benchmark memory usage while parsing a near-limit script.

    Returns
    -------
    dict with keys: operation, iterations, peak_memory_kb, current_memory_kb.
    """
    registry = patchlang.EngineContext().registry

    tracemalloc.start()
    snapshot_before = tracemalloc.take_snapshot()

    results = [patchlang.parse(_SCRIPT, registry) for _ in range(_ITERATIONS)]

    snapshot_after = tracemalloc.take_snapshot()
    tracemalloc.stop()

    stats = snapshot_after.compare_to(snapshot_before, "lineno")
    total_bytes = sum(stat.size_diff for stat in stats if stat.size_diff > 0)
    peak_kb = round(total_bytes / 1024, 2)

    result: dict[str, object] = {
        "operation": "patch_parse_memory",
        "iterations": _ITERATIONS,
        "actions_per_parse": len(results[0].actions),
        "peak_memory_kb": peak_kb,
        "current_memory_kb": peak_kb,
        "ops_per_second": 0.0,
        "avg_latency_ms": 0.0,
    }
    print(f"[bench_memory] {result['operation']}: peak {peak_kb:.2f} KB over {_ITERATIONS} iterations")
    return result


if __name__ == "__main__":
    result = bench_parse_memory()
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)
    output_path = results_dir / "memory_baseline.json"
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(result, fh, indent=2)
    print(f"Results saved to {output_path}")
