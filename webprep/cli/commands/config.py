"""Config command for configuration management."""

import typer
from rich.console import Console
from rich.table import Table

from webprep.cli.shared.context import load_settings
from webprep.config.constants import CONFIG_LOCATIONS

config_app = typer.Typer(help="Configuration management.")
console = Console()


@config_app.command("show")
def show() -> None:
    """Show current configuration."""
    settings = load_settings(console)

    console.print("\n[bold blue]Current Configuration[/bold blue]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", settings.log_level)
    table.add_row("Log Format", settings.log_format)
    table.add_row("Log Directory", settings.log_dir)

    table.add_row("Max Width", str(settings.responsive.max_width))
    table.add_row("Max Height", str(settings.responsive.max_height))
    table.add_row("Base Size (0x)", str(settings.responsive.base_size))
    table.add_row("Vector Formats", ", ".join(settings.responsive.vector_formats))

    table.add_row("Identify Command", " ".join(settings.render.identify_command))
    table.add_row("Convert Command", " ".join(settings.render.convert_command))
    table.add_row("Thumbnail Command", " ".join(settings.render.thumbnail_command))
    table.add_row("Page Density", str(settings.render.page_density))

    table.add_row("Animation Prefix", settings.layout.animation_prefix)
    table.add_row("Output Suffix", settings.layout.output_suffix)
    table.add_row("Manifest File", settings.layout.manifest_filename)

    table.add_row("File Workers", str(settings.concurrency.file_workers))

    console.print(table)
    console.print()


@config_app.command("locations")
def locations() -> None:
    """Show where configuration files are looked up."""
    for location in CONFIG_LOCATIONS:
        status = "[green]found[/green]" if location.exists() else "[dim]missing[/dim]"
        console.print(f"  {location} {status}")
