"""Print a table of the saved patchlang benchmark results."""
from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

RESULT_FILES = (
    "parse_throughput_baseline.json",
    "apply_throughput_baseline.json",
    "latency_baseline.json",
    "plan_latency_baseline.json",
    "memory_baseline.json",
)


def load_results(results_dir: Path) -> dict[str, dict[str, object] | None]:
    """Return each known result file's payload, or None when it was never produced."""
    loaded: dict[str, dict[str, object] | None] = {}
    for fname in RESULT_FILES:
        path = results_dir / fname
        loaded[fname] = json.loads(path.read_text(encoding="utf-8")) if path.exists() else None
    return loaded


def _fmt(value: object, template: str) -> str:
    number = float(value or 0)  # type: ignore[arg-type]
    return template.format(number) if number > 0 else "[dim]n/a[/dim]"


def build_table(results: dict[str, dict[str, object] | None]) -> Table:
    table = Table(title="patchlang benchmark results")
    table.add_column("Operation", style="bold")
    table.add_column("Ops/sec", justify="right")
    table.add_column("Avg latency", justify="right")
    table.add_column("p95", justify="right")
    table.add_column("Peak mem", justify="right")
    for fname, data in results.items():
        if data is None:
            table.add_row(f"[dim]{fname}[/dim]", "[dim]not run[/dim]", "", "", "")
            continue
        table.add_row(
            str(data.get("operation", fname)),
            _fmt(data.get("ops_per_second"), "{:,.0f}"),
            _fmt(data.get("avg_latency_ms"), "{:.3f} ms"),
            _fmt(data.get("p95_ms"), "{:.3f} ms"),
            _fmt(data.get("peak_memory_kb"), "{:,.0f} KB"),
        )
    return table


def main() -> None:
    console = Console()
    console.print(build_table(load_results(Path(__file__).parent / "results")))
    console.print(
        "Run: python benchmarks/bench_throughput.py, bench_latency.py, bench_memory.py",
        style="dim",
    )


if __name__ == "__main__":
    main()
