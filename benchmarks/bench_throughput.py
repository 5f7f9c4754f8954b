"""Benchmark: patch script parse and plan/apply throughput.

Measures how many parse operations and full plan/apply cycles can
complete per second using the public patchlang.parse() and
EngineContext APIs.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import patchlang
from samples import build_graph, build_script

_ITERATIONS: int = 500
_APPLY_ITERATIONS: int = 100

_SCRIPT = build_script(50)


def _report(operation: str, iterations: int, total: float) -> dict[str, object]:
    result: dict[str, object] = {
        "operation": operation,
        "iterations": iterations,
        "total_seconds": round(total, 4),
        "ops_per_second": round(iterations / total, 1),
        "avg_latency_ms": round(total / iterations * 1000, 4),
    }
    print(
        f"[bench_throughput] {result['operation']}: "
        f"{result['ops_per_second']:,.0f} ops/sec  "
        f"avg {result['avg_latency_ms']:.4f} ms"
    )
    return result


def bench_parse_throughput() -> dict[str, object]:
    """Benchmark parsing of a 150-action script.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    registry = patchlang.EngineContext().registry

    start = time.perf_counter()
    for _ in range(_ITERATIONS):
        patchlang.parse(_SCRIPT, registry)
    total = time.perf_counter() - start
    return _report("patch_parse_throughput", _ITERATIONS, total)


def bench_apply_throughput() -> dict[str, object]:
    """Benchmark plan + confirm + apply of a 150-action script on a fresh graph.

    Returns
    -------
    dict with keys: operation, iterations, total_seconds, ops_per_second,
    avg_latency_ms.
    """
    engine = patchlang.EngineContext()

    async def cycle() -> None:
        graph = build_graph(50)
        workflow = engine.workflow({graph.id: graph})
        plan = await workflow.plan(graph.id, _SCRIPT)
        await workflow.apply(graph.id, plan.confirmation_code)

    async def run_all() -> float:
        start = time.perf_counter()
        for _ in range(_APPLY_ITERATIONS):
            await cycle()
        return time.perf_counter() - start

    total = asyncio.run(run_all())
    return _report("patch_apply_throughput", _APPLY_ITERATIONS, total)


if __name__ == "__main__":
    results_dir = Path(__file__).parent / "results"
    results_dir.mkdir(exist_ok=True)

    for bench_fn, fname in [
        (bench_parse_throughput, "parse_throughput_baseline.json"),
        (bench_apply_throughput, "apply_throughput_baseline.json"),
    ]:
        result = bench_fn()
        output_path = results_dir / fname
        with open(output_path, "w", encoding="utf-8") as fh:
            json.dump(result, fh, indent=2)
        print(f"Results saved to {output_path}")
