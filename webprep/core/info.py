"""Parsing of the rendering engine's identify report."""

import re
from pathlib import Path

from webprep.core.models import FileInfo
from webprep.exceptions import FileInfoParseError
from webprep.render.executor import Executor
from webprep.render.operations import OperationRequest
from webprep.utils.logging import get_logger

log = get_logger(__name__)

_GEOMETRY_RE = re.compile(r"^(\d+)x(\d+)$")


def _strip_filename(line: str, file_path: Path, multi_layer: bool) -> str:
    """Remove the echoed filename so whitespace inside it cannot shift tokens."""
    marker = "[0]" if multi_layer else ""
    for name in (str(file_path), file_path.name):
        token = f"{name}{marker}"
        if token in line:
            return line.replace(token, "", 1)
    return line


def parse_file_info(file_path: Path, report: str | None) -> FileInfo:
    """Parse an identify report into a FileInfo.

    An identify report has one line per embedded layer or page, e.g.::

        poster.ai[0] PDF 612x792 612x792+0+0 16-bit sRGB 0.010u 0:00.009
        poster.ai[1] PDF 612x792 612x792+0+0 16-bit sRGB 0.010u 0:00.009

    Only the first line is used for format and geometry; the line count gives
    the layer count.

    Raises:
        FileInfoParseError: If the report is empty or has no usable geometry
    """
    if not report or not report.strip():
        raise FileInfoParseError(file_path, report)

    layers = [line for line in report.strip().splitlines() if line.strip()]
    line = _strip_filename(layers[0], file_path, multi_layer=len(layers) > 1)

    parts = line.split()
    if len(parts) < 2:
        raise FileInfoParseError(file_path, report)

    match = _GEOMETRY_RE.match(parts[1])
    if match is None:
        raise FileInfoParseError(file_path, report)

    width, height = int(match.group(1)), int(match.group(2))
    if width < 1 or height < 1:
        raise FileInfoParseError(file_path, report)

    return FileInfo(
        format=parts[0].lower(),
        width=width,
        height=height,
        layers=len(layers),
    )


async def get_file_info(executor: Executor, file_path: Path) -> FileInfo:
    """Identify a file through the rendering engine and parse the report."""
    report = await executor.run(OperationRequest.identify(file_path))
    info = parse_file_info(file_path, report)
    log.debug(
        "File identified",
        file=str(file_path),
        format=info.format,
        width=info.width,
        height=info.height,
        layers=info.layers,
    )
    return info
