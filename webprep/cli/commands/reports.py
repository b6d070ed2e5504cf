"""Auxiliary report commands: folder index and project front matter."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from webprep.cli.callbacks import validate_source_dir
from webprep.cli.shared.context import load_settings
from webprep.reports.frontmatter import write_project_frontmatter
from webprep.reports.index import build_index, default_index_path, write_index
from webprep.utils.logging import get_logger, setup_logging

console = Console()
log = get_logger(__name__)


def index(
    root: Annotated[
        Path,
        typer.Argument(
            help="Directory holding converted folders.",
            callback=validate_source_dir,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Index file to write (default: ROOT/index.csv).",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
) -> None:
    """Write a tab-separated index (index, slug, year) of converted folders."""
    settings = load_settings(console)
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    rows = build_index(
        root,
        output_suffix=settings.layout.output_suffix,
        manifest_filename=settings.layout.manifest_filename,
    )
    if not rows:
        console.print("[yellow]No converted folders with a manifest found.[/yellow]")
        return

    path = write_index(rows, output or default_index_path(root))
    console.print(f"[green]Index written:[/green] {path} ({len(rows)} folders)")


def frontmatter(
    root: Annotated[
        Path,
        typer.Argument(
            help="Directory holding data.csv and the projects/ folder.",
            callback=validate_source_dir,
            resolve_path=True,
        ),
    ],
) -> None:
    """Write index.md front matter into project folders from ROOT/data.csv."""
    settings = load_settings(console)
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    sheet = root / "data.csv"
    if not sheet.is_file():
        console.print(f"[red]Error:[/red] Project sheet not found: {sheet}")
        raise typer.Exit(1)

    written = write_project_frontmatter(root, output_suffix=settings.layout.output_suffix)
    for path in written:
        console.print(f"{path.parent.name} -> {path}")
    console.print(f"[green]{len(written)} front matter files written.[/green]")
