"""Run context shared by the conversion commands."""

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console

from webprep.config import WebprepSettings, get_settings
from webprep.exceptions import ConfigurationError
from webprep.utils.logging import get_logger, setup_task_logging

log = get_logger(__name__)


def load_settings(console: Console) -> WebprepSettings:
    """Load settings, turning an invalid configuration into a clean exit."""
    try:
        return get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@dataclass
class RunContext:
    """Settings and task log of one ``convert`` or ``batch`` invocation."""

    settings: WebprepSettings
    task_id: str
    log_path: Path

    @classmethod
    def create(
        cls,
        console: Console,
        command_prefix: str = "task",
        verbose: bool = False,
        json_logs: bool = False,
    ) -> "RunContext":
        """Load settings and start the run's task log.

        ``json_logs`` forces JSON lines; otherwise ``log_format`` decides.
        """
        settings = load_settings(console)
        task_id, log_path = setup_task_logging(
            log_dir=settings.log_dir,
            prefix=command_prefix,
            verbose=verbose,
            json_format=json_logs or settings.log_format == "json",
        )
        if verbose:
            log.info("Logs will be saved to", log_file=str(log_path))
        log.info("Task Configuration", task_id=task_id, config=settings.model_dump())
        return cls(settings=settings, task_id=task_id, log_path=log_path)
