"""Utility module for webprep."""

from webprep.utils.concurrency import BoundedRunner, TaskResult
from webprep.utils.fs import (
    atomic_write,
    discover_directories,
    discover_paths,
    is_hidden,
    list_conversion_units,
    remove_matching,
    replicate_tree,
    slugify,
    temporary_directory,
)

__all__ = [
    # Concurrency
    "BoundedRunner",
    "TaskResult",
    # File system
    "atomic_write",
    "discover_directories",
    "discover_paths",
    "is_hidden",
    "list_conversion_units",
    "remove_matching",
    "replicate_tree",
    "slugify",
    "temporary_directory",
]
