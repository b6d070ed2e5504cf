"""Rich rendering of conversion reports."""

from rich.console import Console
from rich.table import Table

from webprep.core.models import ConversionReport

MAX_LISTED_FAILURES = 10


def simplify_error(error: str) -> str:
    """Reduce an error message to its core reason for console display."""
    if ": " in error and error.startswith("Conversion failed for "):
        error = error.split(": ", 1)[1]
    first_line = error.strip().splitlines()[0] if error.strip() else "Unknown error"
    return first_line if len(first_line) <= 120 else first_line[:117] + "..."


def display_report(console: Console, report: ConversionReport, title: str = "Conversion Summary") -> None:
    """Display one run's outcome as a table followed by its failed units."""
    console.print()

    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Source", str(report.source_dir))
    table.add_row("Output", str(report.output_dir))
    table.add_row("Manifest", str(report.manifest_path))
    table.add_row("Records", f"[green]{report.converted}[/green]")
    table.add_row("Skipped", f"[yellow]{report.skipped}[/yellow]")
    table.add_row("Failed", f"[red]{len(report.failures)}[/red]")

    console.print(table)

    if report.failures:
        console.print()
        console.print("[bold red]Failed Units:[/bold red]")
        for failure in report.failures[:MAX_LISTED_FAILURES]:
            console.print(f"  [dim]-[/dim] {failure.unit}")
            console.print(f"    [dim]{simplify_error(failure.error)}[/dim]")
        if len(report.failures) > MAX_LISTED_FAILURES:
            console.print(f"  [dim]... and {len(report.failures) - MAX_LISTED_FAILURES} more[/dim]")
