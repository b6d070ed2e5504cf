"""CLI callback functions."""

from pathlib import Path

import typer


def validate_source_dir(value: Path) -> Path:
    """Validate that a directory argument exists."""
    if not value.exists():
        raise typer.BadParameter(f"Directory not found: {value}")

    if not value.is_dir():
        raise typer.BadParameter(f"Path is not a directory: {value}")

    return value


def validate_start_at(value: int) -> int:
    """Validate the batch start index."""
    if value < 0:
        raise typer.BadParameter("Start index must be zero or greater")
    return value
