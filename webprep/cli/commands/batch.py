"""Batch command: convert every folder below a root directory."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from webprep.cli.callbacks import validate_start_at
from webprep.cli.shared.context import RunContext
from webprep.cli.shared.summary import simplify_error
from webprep.config import WebprepSettings
from webprep.core.converter import DirectoryConverter
from webprep.core.models import ConversionReport
from webprep.exceptions import WebprepError
from webprep.utils.fs import list_conversion_units
from webprep.utils.logging import get_console, get_logger

console = get_console()
log = get_logger(__name__)


@dataclass
class BatchOutcome:
    """Reports and errors of a batch, keyed by unit."""

    reports: dict[Path, ConversionReport] = field(default_factory=dict)
    errors: dict[Path, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors and all(r.success for r in self.reports.values())


def batch(
    root: Annotated[
        Path,
        typer.Argument(
            help="Root directory whose subfolders are converted.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    skip_converted: Annotated[
        bool,
        typer.Option(
            "--skip-converted/--include-converted",
            help="Leave out folders whose name contains 'converted'.",
        ),
    ] = True,
    start_at: Annotated[
        int,
        typer.Option(
            "--start-at",
            help="Index of the first folder to convert (resume a walk).",
            callback=validate_start_at,
        ),
    ] = 0,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    json_logs: Annotated[
        bool,
        typer.Option(
            "--json-logs",
            help="Write console and task logs as JSON lines.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="List the folders that would be converted.",
        ),
    ] = False,
) -> None:
    """Convert every folder below ROOT, strictly one after another.

    Hidden and underscore-prefixed folders are never converted.

    Examples:
        webprep batch ./projects
        webprep batch ./projects --start-at 12
        webprep batch ./projects --include-converted --dry-run
    """
    settings = RunContext.create(
        console, command_prefix="batch", verbose=verbose, json_logs=json_logs
    ).settings

    units = list_conversion_units(root, skip_converted=skip_converted)
    console.print(str(root), soft_wrap=True)

    if dry_run:
        _show_dry_run(units, start_at)
        return

    if not units:
        console.print("[yellow]No folders to convert.[/yellow]")
        return

    try:
        outcome = asyncio.run(_execute_batch(units, settings, start_at))
    except KeyboardInterrupt:
        console.print("\n[yellow]Batch interrupted. Use --start-at to continue.[/yellow]")
        raise typer.Exit(130) from None

    console.print(f"{root} is done", soft_wrap=True)
    _display_summary(outcome)
    if not outcome.success:
        raise typer.Exit(1)


async def _execute_batch(
    units: list[Path], settings: WebprepSettings, start_at: int = 0
) -> BatchOutcome:
    """Convert units in order; a failing unit is recorded and the walk goes on."""
    outcome = BatchOutcome()
    converter = DirectoryConverter(settings=settings)
    pending = list(enumerate(units))[start_at:]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Converting folders", total=len(pending))

        for index, unit in pending:
            progress.update(task, description=f"Converting {unit.name}")
            try:
                outcome.reports[unit] = await converter.convert(unit)
            except (WebprepError, OSError) as e:
                log.error("Folder conversion failed", folder=str(unit), error=str(e))
                outcome.errors[unit] = str(e)
            else:
                progress.console.print(f"{index}: {unit} is done", soft_wrap=True)
            progress.advance(task)

    return outcome


def _show_dry_run(units: list[Path], start_at: int) -> None:
    """Display the batch plan without executing."""
    console.print("\n[bold blue]Batch Plan (Dry Run)[/bold blue]\n")
    for index, unit in enumerate(units):
        marker = "[dim](skipped)[/dim] " if index < start_at else ""
        console.print(f"  {index}: {marker}{unit.name}")
    console.print(f"\n  [bold]Folders:[/bold] {max(len(units) - start_at, 0)}")


def _display_summary(outcome: BatchOutcome) -> None:
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Summary")
    table.add_column("Folder", style="bold")
    table.add_column("Records", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed", justify="right")

    for unit, report in outcome.reports.items():
        table.add_row(
            unit.name,
            f"[green]{report.converted}[/green]",
            f"[yellow]{report.skipped}[/yellow]",
            f"[red]{len(report.failures)}[/red]",
        )
    for unit in outcome.errors:
        table.add_row(unit.name, "-", "-", "[red]aborted[/red]")

    console.print(table)

    if outcome.errors:
        console.print()
        console.print("[bold red]Aborted Folders:[/bold red]")
        for unit, error in outcome.errors.items():
            console.print(f"  [dim]-[/dim] {unit.name}")
            console.print(f"    [dim]{simplify_error(error)}[/dim]")
