"""Benchmark: parse and plan latency (p50/p95/mean).

Parsing a one-line script is the common interactive case; planning adds
the per-target lock, the store write and summary rendering on top.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from collections.abc import Callable
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import patchlang
from samples import build_graph, build_script

_WARMUP: int = 100
_ITERATIONS: int = 3_000
_PLAN_ITERATIONS: int = 300

_SINGLE_LINE = 'rename channel 800000000000001000 "general chat"\n'


def _summarize(operation: str, latencies_ms: list[float]) -> dict[str, object]:
    ordered = sorted(latencies_ms)
    n = len(ordered)
    total = sum(latencies_ms) / 1000
    result: dict[str, object] = {
        "operation": operation,
        "iterations": n,
        "total_seconds": round(total, 4),
        "ops_per_second": round(n / total, 1),
        "avg_latency_ms": round(sum(latencies_ms) / n, 4),
        "p50_ms": round(ordered[int(n * 0.50)], 4),
        "p95_ms": round(ordered[min(int(n * 0.95), n - 1)], 4),
    }
    print(
        f"[bench_latency] {operation}: "
        f"p50={result['p50_ms']:.4f}ms  p95={result['p95_ms']:.4f}ms  "
        f"mean={result['avg_latency_ms']:.4f}ms"
    )
    return result


def _time_calls(fn: Callable[[], object], iterations: int) -> list[float]:
    latencies_ms: list[float] = []
    for _ in range(iterations):
        t0 = time.perf_counter()
        fn()
        latencies_ms.append((time.perf_counter() - t0) * 1000)
    return latencies_ms


def bench_parse_latency() -> dict[str, object]:
    """Benchmark parse latency on a one-line script.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms, p50_ms, p95_ms.
    """
    registry = patchlang.EngineContext().registry

    def call() -> object:
        return patchlang.parse(_SINGLE_LINE, registry)

    _time_calls(call, _WARMUP)
    return _summarize("patch_parse_latency_single_line", _time_calls(call, _ITERATIONS))


def bench_plan_latency() -> dict[str, object]:
    """Benchmark ``PatchWorkflow.plan`` on a 150-action script.

    Every call replaces the pending patch of the same target, so the
    store holds a single slot throughout.
    """
    graph = build_graph(50)
    workflow = patchlang.EngineContext().workflow({graph.id: graph})
    script = build_script(50)

    async def run_all() -> list[float]:
        latencies_ms: list[float] = []
        for _ in range(_PLAN_ITERATIONS):
            t0 = time.perf_counter()
            await workflow.plan(graph.id, script)
            latencies_ms.append((time.perf_counter() - t0) * 1000)
        return latencies_ms

    return _summarize("patch_plan_latency_150_actions", asyncio.run(run_all()))


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_parse_latency, "latency_baseline.json"),
        (bench_plan_latency, "plan_latency_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
