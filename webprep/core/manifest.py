"""Run manifest persistence (``data.json``)."""

import json
from pathlib import Path

from webprep.core.models import FileRecord
from webprep.exceptions import ManifestWriteError
from webprep.utils.fs import atomic_write
from webprep.utils.logging import get_logger

log = get_logger(__name__)


def render_manifest(records: list[FileRecord]) -> str:
    """Serialize records as a pretty-printed JSON array."""
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def write_manifest(path: Path, records: list[FileRecord]) -> Path:
    """Write the manifest once, atomically.

    Raises:
        ManifestWriteError: If the file cannot be written
    """
    try:
        with atomic_write(path) as f:
            f.write(render_manifest(records))
    except OSError as e:
        raise ManifestWriteError(path, e) from e

    log.info("Manifest written", path=str(path), records=len(records))
    return path


def read_manifest(path: Path) -> list[FileRecord]:
    """Load a manifest, dropping ``null`` entries left by older tools."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return [FileRecord.from_dict(item) for item in data if item]
