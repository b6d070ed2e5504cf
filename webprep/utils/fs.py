"""File system utilities for webprep.

Provides tree replication, discovery, scoped temporary storage and safe
writes used by the conversion pipeline.
"""

import os
import re
import shutil
import tempfile
import unicodedata
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from webprep.utils.logging import get_logger

log = get_logger(__name__)

_SLUG_RE = re.compile(r"[^\w\-]+")
_DASHES_RE = re.compile(r"-{2,}")


def is_hidden(path: Path) -> bool:
    """Check if a path name is hidden (dot-prefixed)."""
    return path.name.startswith(".")


def slugify(text: str, fallback: str = "untitled") -> str:
    """Return *text* as a lowercase, ASCII, filesystem-safe slug.

    Examples:
        >>> slugify("Spring Poster (Final)")
        'spring-poster-final'
        >>> slugify("Café Menü")
        'cafe-menu'
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    slug = _SLUG_RE.sub("-", ascii_text)
    slug = _DASHES_RE.sub("-", slug).strip("-").lower()
    return slug or fallback


def replicate_tree(source: Path, target: Path, exclude_prefix: str | None = None) -> int:
    """Destructively recreate the directory skeleton of ``source`` at ``target``.

    Only directories are created. Hidden directories and directories whose
    name starts with ``exclude_prefix`` are skipped together with their subtree.

    Args:
        source: Directory to mirror
        target: Directory to (re)create; removed first if it exists
        exclude_prefix: Directory name prefix to leave out of the skeleton

    Returns:
        Number of directories created below ``target``
    """
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True)

    created = 0
    for root, dirs, _files in os.walk(source):
        dirs[:] = sorted(
            d
            for d in dirs
            if not d.startswith(".") and not (exclude_prefix and d.startswith(exclude_prefix))
        )
        rel = Path(root).relative_to(source)
        for d in dirs:
            (target / rel / d).mkdir()
            created += 1

    log.debug("Directory skeleton replicated", source=str(source), target=str(target), dirs=created)
    return created


def discover_paths(root: Path) -> list[Path]:
    """Recursively list non-hidden files below ``root`` in sorted order."""
    files = []
    for dirpath, dirs, filenames in os.walk(root):
        dirs[:] = [d for d in dirs if not d.startswith(".")]
        files.extend(Path(dirpath) / name for name in filenames if not name.startswith("."))
    files.sort()
    return files


def discover_directories(root: Path) -> list[Path]:
    """Recursively list non-hidden directories below ``root`` in sorted order."""
    found = []
    for dirpath, dirs, _filenames in os.walk(root):
        dirs[:] = [d for d in dirs if not d.startswith(".")]
        found.extend(Path(dirpath) / d for d in dirs)
    found.sort()
    return found


def remove_matching(directory: Path, pattern: str) -> int:
    """Delete every file in ``directory`` matching the glob ``pattern``.

    Returns:
        Number of files removed
    """
    removed = 0
    for match in directory.glob(pattern):
        if match.is_file():
            match.unlink()
            removed += 1
    return removed


def list_conversion_units(root: Path, skip_converted: bool = True) -> list[Path]:
    """List the immediate subdirectories of ``root`` that form conversion units.

    Hidden and underscore-prefixed directories are never units. With
    ``skip_converted`` the output trees of earlier runs are left out too.
    """
    units = []
    for child in sorted(root.iterdir()):
        if not child.is_dir():
            continue
        if child.name.startswith((".", "_")):
            continue
        if skip_converted and "converted" in child.name:
            continue
        units.append(child)
    return units


@contextmanager
def atomic_write(
    file_path: Path,
    mode: str = "w",
    encoding: str | None = "utf-8",
) -> Iterator[IO[Any]]:
    """Context manager for atomic file writes.

    Writes to a temp file first, then atomically moves to target.

    Args:
        file_path: Target file path
        mode: File mode ('w' or 'wb')
        encoding: File encoding (ignored for binary mode)

    Yields:
        File handle
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_name = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
    )
    temp_path = Path(temp_name)

    try:
        os.close(temp_fd)

        if "b" in mode:
            with open(temp_path, mode) as f:
                yield f
        else:
            with open(temp_path, mode, encoding=encoding) as f:
                yield f

        temp_path.replace(file_path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


@contextmanager
def temporary_directory(prefix: str = "webprep-") -> Iterator[Path]:
    """Context manager for a temporary directory.

    Yields:
        Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)
