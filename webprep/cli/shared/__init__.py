"""Shared helpers for CLI commands."""

from webprep.cli.shared.context import RunContext, load_settings
from webprep.cli.shared.summary import display_report, simplify_error

__all__ = ["RunContext", "display_report", "load_settings", "simplify_error"]
