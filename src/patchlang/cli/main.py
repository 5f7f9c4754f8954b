"""CLI entry point for patchlang.

Invoked as::

    patchlang [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m patchlang.cli.main

Commands
--------
version     Show version information
ops         List the operations of an operation map
handlers    List registered handlers
check       Parse a patch script and report diagnostics
parse       Dump the resolved actions to JSON or YAML
export      Write a template script describing a graph snapshot
run         Plan, confirm and apply a script against a graph snapshot
"""
from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from patchlang.engine import EngineContext

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a text file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _engine_or_exit(ops: str | None, **overrides: object) -> "EngineContext":
    """Build an engine from env settings plus CLI overrides, exiting on error."""
    from pydantic import ValidationError

    from patchlang.config import PatchSettings
    from patchlang.engine import EngineContext
    from patchlang.errors import RegistryLoadError

    try:
        settings = PatchSettings.from_cli(ops_path=Path(ops) if ops else None, **overrides)
    except ValidationError as exc:
        err_console.print(f"[red]Invalid settings:[/red] {escape(str(exc))}")
        sys.exit(1)
    try:
        return EngineContext(settings)
    except RegistryLoadError as exc:
        err_console.print(f"[red]Operation map error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
    }
    return colors.get(severity_name, "white")


def _diagnostics_table(title: str, diagnostics: list) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=6)
    table.add_column("Line", min_width=4)
    table.add_column("Message")
    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            str(d.line),
            escape(d.message) + (f"\n[dim]hint: {escape(d.suggestion)}[/dim]" if d.suggestion else ""),
        )
    return table


ops_option = click.option(
    "--ops",
    "ops",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Operation map file (defaults to PATCH_OPS_PATH or the built-in map)",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="patchlang")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log engine activity to stderr")
def cli(verbose: bool) -> None:
    """Declarative bulk patches for channel/role graphs: plan, confirm, apply."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from patchlang import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]patchlang[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# ops / handlers commands
# ---------------------------------------------------------------------------


@cli.command(name="ops")
@ops_option
def ops_command(ops: str | None) -> None:
    """List every operation of the operation map."""
    engine = _engine_or_exit(ops)

    table = Table(title=f"Operations ({engine.registry.source})")
    table.add_column("Operation", style="bold")
    table.add_column("Handler")
    table.add_column("Parameters")
    table.add_column("Destructive")
    for desc in engine.registry:
        table.add_row(
            desc.key,
            desc.handler_id,
            ", ".join(str(p) for p in desc.params) or "[dim]-[/dim]",
            "[red]yes[/red]" if desc.destructive else "",
        )
    console.print(table)


@cli.command(name="handlers")
def handlers_command() -> None:
    """List all registered handlers, including entry-point plugins."""
    from patchlang.handlers import default_catalog

    catalog = default_catalog()
    table = Table(title=f"Handlers ({len(catalog)})")
    table.add_column("Id", style="bold")
    table.add_column("Parameters")
    table.add_column("Destructive")
    table.add_column("Description")
    for handler_id in catalog.list_handlers():
        cls = catalog.get(handler_id)
        table.add_row(
            handler_id,
            ", ".join(f"{name}@{kind.value}" for name, kind in cls.params.items()) or "[dim]-[/dim]",
            "[red]yes[/red]" if cls.destructive else "",
            cls.summary,
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("file", type=click.Path(exists=False))
@ops_option
@click.option("--max-actions", type=int, default=None, help="Override PATCH_MAX_ACTIONS")
def check_command(file: str, ops: str | None, max_actions: int | None) -> None:
    """Parse a patch script and report every diagnostic.

    FILE is the path to the patch script.  Exits 1 if there are errors.
    """
    from patchlang.parser import parse

    source = _read_source(file)
    engine = _engine_or_exit(ops, max_actions=max_actions)
    result = parse(source, engine.registry, max_actions=engine.settings.max_actions)

    if not result.diagnostics:
        console.print(f"[green]OK[/green] {file}: {len(result.actions)} action(s), no issues found")
        sys.exit(0)

    console.print(_diagnostics_table(f"Check: {file}", result.diagnostics))
    console.print(
        f"\n[bold]Summary:[/bold] {len(result.actions)} action(s), "
        f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    )
    if result.errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# parse command
# ---------------------------------------------------------------------------


@cli.command(name="parse")
@click.argument("file", type=click.Path(exists=False))
@ops_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def parse_command(file: str, ops: str | None, output_format: str, output: str | None) -> None:
    """Parse a patch script and dump the resolved actions.

    FILE is the path to the patch script.
    """
    from patchlang.core.serializer import ParseResultSerializer
    from patchlang.parser import parse

    source = _read_source(file)
    engine = _engine_or_exit(ops)
    result = parse(source, engine.registry, max_actions=engine.settings.max_actions)

    serializer = ParseResultSerializer()
    if output_format.lower() == "json":
        text = serializer.to_json(result, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(result)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Actions written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=True))


# ---------------------------------------------------------------------------
# export command
# ---------------------------------------------------------------------------


@cli.command(name="export")
@click.argument("snapshot", type=click.Path(exists=False))
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def export_command(snapshot: str, output: str | None) -> None:
    """Write a ``keep`` template script describing a graph snapshot.

    SNAPSHOT is a .yaml/.yml or .json graph snapshot.
    """
    from patchlang.errors import PatchlangError
    from patchlang.graph import export_template, load_snapshot

    try:
        graph = load_snapshot(Path(snapshot))
    except (OSError, PatchlangError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot load snapshot {snapshot}: {escape(str(exc))}")
        sys.exit(1)

    text = export_template(graph)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Template written to[/green] {output}")
    else:
        click.echo(text, nl=False)


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("file", type=click.Path(exists=False))
@click.option("--graph", "graph_path", required=True, type=click.Path(exists=False), help="Graph snapshot to patch")
@ops_option
@click.option("--allow-destructive", is_flag=True, default=False, help="Permit delete operations")
@click.option("--reason", default="", help="Audit reason recorded with every change")
@click.option("--yes", "-y", "assume_yes", is_flag=True, default=False, help="Confirm without prompting")
@click.option("--dry-run", is_flag=True, default=False, help="Plan and show the summary only")
def run_command(
    file: str,
    graph_path: str,
    ops: str | None,
    allow_destructive: bool,
    reason: str,
    assume_yes: bool,
    dry_run: bool,
) -> None:
    """Plan FILE, confirm it, apply it to --graph and save the result.

    FILE is the path to the patch script.  The snapshot is rewritten in
    place once the patch has been applied.  Exits 1 if the plan is
    rejected, a gate fails or any action fails.
    """
    from patchlang.errors import GateError, PatchlangError, PlanRejectedError
    from patchlang.graph import load_snapshot, save_snapshot
    from patchlang.workflow import render_diagnostics, render_report

    source = _read_source(file)
    snapshot = Path(graph_path)
    try:
        graph = load_snapshot(snapshot)
    except (OSError, PatchlangError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot load snapshot {graph_path}: {escape(str(exc))}")
        sys.exit(1)

    engine = _engine_or_exit(ops, allow_deletes=True if allow_destructive else None)
    workflow = engine.workflow({graph.id: graph})

    async def _run() -> int:
        try:
            plan = await workflow.plan(graph.id, source)
        except PlanRejectedError as exc:
            err_console.print(f"[red]Patch rejected[/red] ({len(exc.errors)} error(s)):")
            err_console.print(render_diagnostics(exc.errors, engine.settings.max_displayed_errors), markup=False)
            return 1

        body = plan.summary_text
        if plan.contains_destructive:
            body += "\n\n[red]This patch contains destructive actions.[/red]"
        console.print(
            Panel(body, title=f"Plan for {graph.name or graph.id}: {plan.action_count} action(s)", expand=False)
        )
        if dry_run:
            await workflow.cancel(graph.id)
            console.print("[dim]Dry run: nothing applied.[/dim]")
            return 0

        console.print(f"Confirmation code: [bold]{plan.confirmation_code}[/bold]")
        code = plan.confirmation_code if assume_yes else click.prompt("Enter the confirmation code to apply")

        try:
            report = await workflow.apply(graph.id, code, reason=reason)
        except GateError as exc:
            err_console.print(f"[red]Not applied:[/red] {escape(str(exc))}")
            return 1

        if any(r.success and r.changed for r in report.results):
            save_snapshot(snapshot, graph)
            console.print(f"[green]Snapshot updated:[/green] {graph_path}")
        color = "green" if report.ok else "yellow"
        console.print(render_report(report, engine.settings.max_displayed_failures), style=color, markup=False)
        return 0 if report.ok else 1

    sys.exit(asyncio.run(_run()))


if __name__ == "__main__":
    cli()
