"""
Rendering functions for regcheck output.

This module handles all pretty-printing and table formatting.
Services return verdicts, this module makes them human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Optional

from .domain import EntryReport, PipelineResult, PipelineState, ValidationVerdict, Level

console = Console()


def render_verdict(verdict: ValidationVerdict, title: Optional[str] = None) -> None:
    """Print every error and warning of a verdict."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    problems = [d for d in verdict.diagnostics if d.level is not Level.INFO]
    if not problems:
        console.print("  [green]✓[/green] no problems")
        return
    for diagnostic in problems:
        colour = "red" if diagnostic.level is Level.ERROR else "yellow"
        subject = f"{diagnostic.subject}: " if diagnostic.subject else ""
        console.print(f"  [{colour}]✗[/{colour}] {subject}{diagnostic.message}")


def render_entry_table(reports: List[EntryReport], title: str = "Release Checks") -> None:
    """
    Render per-entry verdicts as a table.

    Args:
        reports: Entry reports from the release stage
        title: Table title
    """
    if not reports:
        console.print("[yellow]No changed entries to check.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Kind", style="dim")
    table.add_column("Entry", style="cyan")
    table.add_column("Version", style="blue")
    table.add_column("Result")
    table.add_column("Problems", style="red")

    for report in reports:
        errors = report.verdict.errors
        result = "[green]✅ pass[/green]" if report.verdict.ok else "[red]❌ fail[/red]"
        problems = "\n".join(d.message for d in errors)
        table.add_row(
            report.kind,
            report.entry_id,
            report.version or "N/A",
            result,
            problems,
        )

    console.print(table)


def render_pipeline_result(result: PipelineResult) -> None:
    """Print the outcome of a full pipeline run, ending with the aggregate line."""
    console.print(f"\n[bold]Classification:[/bold] {result.classification.value}")

    if result.state is PipelineState.SKIPPED:
        console.print("[green]No registry files modified. Nothing to validate.[/green]")
    elif result.state is PipelineState.REJECTED:
        _render_errors(result.verdict.errors)
    else:
        render_entry_table(result.entries)
        entry_subjects = {r.entry_id for r in result.entries}
        # Problems that belong to no entry row (schema, unreadable registry)
        _render_errors([d for d in result.verdict.errors if d.subject not in entry_subjects])

    render_summary_line(result.ok)


def render_summary_line(ok: bool) -> None:
    if ok:
        console.print("\n[bold green]Validation Suite Passed![/bold green]")
    else:
        console.print("\n[bold red]Validation Suite FAILED.[/bold red]")


def _render_errors(diagnostics) -> None:
    if not diagnostics:
        return
    console.print("\n[red]Errors:[/red]")
    for diagnostic in diagnostics:
        subject = f"{diagnostic.subject}: " if diagnostic.subject else ""
        console.print(f"  [red]✗[/red] {subject}{diagnostic.message}")
