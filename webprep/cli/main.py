"""Main CLI application using Typer."""

from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from webprep import __version__
from webprep.cli.commands.batch import batch
from webprep.cli.commands.config import config_app
from webprep.cli.commands.convert import convert
from webprep.cli.commands.reports import frontmatter, index

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="webprep",
    help="Batch-convert media asset folders into web-ready renditions.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

app.command(name="convert", help="Convert one source directory.")(convert)
app.command(name="batch", help="Convert every folder below a root, one after another.")(batch)
app.command(name="index", help="Write a tab-separated index of converted folders.")(index)
app.command(name="frontmatter", help="Write index.md front matter from a project sheet.")(
    frontmatter
)
app.add_typer(config_app, name="config")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]webprep[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """webprep - web-ready renditions of media asset folders.

    Resizes images into responsive variants, rasterizes paged documents,
    assembles animations from frame folders and writes a JSON manifest.
    """
    pass


if __name__ == "__main__":
    app()
