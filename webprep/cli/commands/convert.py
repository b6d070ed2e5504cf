"""Convert command for a single source directory."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from webprep.cli.shared.context import RunContext
from webprep.cli.shared.summary import display_report
from webprep.config import WebprepSettings
from webprep.core.converter import DirectoryConverter
from webprep.core.models import ConversionReport
from webprep.utils.logging import get_logger

console = Console()
log = get_logger(__name__)


def convert(
    source_dir: Annotated[
        Path,
        typer.Argument(
            help="Source directory to convert.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
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
) -> None:
    """Convert one source directory into a sibling "<name>-converted" tree.

    Examples:
        webprep convert ./projects/spring-campaign
        webprep convert ./projects/spring-campaign -v
    """
    settings = RunContext.create(
        console, command_prefix="convert", verbose=verbose, json_logs=json_logs
    ).settings

    try:
        report = _execute_conversion(source_dir, settings, verbose)
    except KeyboardInterrupt:
        log.warning("Task Interrupted by KeyboardInterrupt", source=str(source_dir))
        console.print("\n[yellow]Interrupted. Exiting...[/yellow]")
        raise typer.Exit(130) from None
    except Exception as e:
        log.error("Conversion failed", error=str(e), exc_info=True)
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    display_report(console, report)
    if not report.success:
        raise typer.Exit(1)
    console.print("[bold green]Conversion completed![/bold green]")


def _execute_conversion(
    source_dir: Path, settings: WebprepSettings, verbose: bool
) -> ConversionReport:
    """Run the converter, behind a spinner unless verbose."""
    converter = DirectoryConverter(settings=settings)

    if verbose:
        return asyncio.run(converter.convert(source_dir))

    # Keep the spinner readable: silence console handlers, the task log still records
    root_logger = logging.getLogger()
    console_handlers = [
        h
        for h in root_logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]
    original_levels = [(h, h.level) for h in console_handlers]
    for handler in console_handlers:
        handler.setLevel(logging.CRITICAL + 1)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task(f"Converting {source_dir.name}...", total=None)

            def on_progress(item, _result, _error) -> None:
                progress.update(task, description=f"Converting {item}...")

            return asyncio.run(converter.convert(source_dir, on_progress=on_progress))
    finally:
        for handler, level in original_levels:
            handler.setLevel(level)
