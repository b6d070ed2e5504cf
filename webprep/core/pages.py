"""Page extraction for multi-page and multi-layer documents."""

import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from webprep.config.settings import ResponsiveConfig
from webprep.core.models import FileInfo
from webprep.core.responsive import create_responsive_images
from webprep.render.executor import Executor
from webprep.render.operations import OperationRequest
from webprep.utils.fs import remove_matching, slugify, temporary_directory
from webprep.utils.logging import get_logger

log = get_logger(__name__)

_PAGE_INDEX_RE = re.compile(r"-(\d+)\.png$")


def page_slug(source: Path) -> str:
    """Filesystem-safe page prefix, e.g. ``ai-spring-poster`` for ``Spring Poster.ai``."""
    tag = source.suffix.lower().lstrip(".")
    return f"{tag}-{slugify(source.stem)}".lower()


def _page_index(path: Path) -> int:
    match = _PAGE_INDEX_RE.search(path.name)
    return int(match.group(1)) if match else -1


@asynccontextmanager
async def rasterized_pages(
    executor: Executor, source: Path, prefix: str
) -> AsyncIterator[list[Path]]:
    """Rasterize every page of ``source`` into a scoped temporary directory.

    Yields the page files (``<prefix>-<n>.png``) in page order. Every file
    matching the page pattern is removed on exit, whatever happened inside.
    """
    pattern = f"{prefix}-*.png"
    with temporary_directory(prefix="webprep-pages-") as work_dir:
        try:
            await executor.run(OperationRequest.extract_pages(source, work_dir, prefix))
            pages = sorted(work_dir.glob(pattern), key=_page_index)
            log.debug("Pages rasterized", source=str(source), pages=len(pages))
            yield pages
        finally:
            removed = remove_matching(work_dir, pattern)
            log.debug("Temporary pages removed", source=str(source), removed=removed)


async def extract_pages(
    executor: Executor,
    source: Path,
    info: FileInfo,
    destination_dir: Path,
    config: ResponsiveConfig | None = None,
) -> list[Path]:
    """Explode a multi-layer document into one responsive set per page.

    Pages are resized one at a time into ``destination_dir``, named after the
    lowercased temporary page file (``ai-poster-0-1x.png`` and so on).

    Returns:
        Every size variant produced across all pages
    """
    produced: list[Path] = []

    async with rasterized_pages(executor, source, page_slug(source)) as pages:
        if not pages:
            log.warning("No pages extracted", source=str(source))
        for page in pages:
            destination = destination_dir / page.name.lower()
            produced.extend(
                await create_responsive_images(executor, page, destination, info, config)
            )

    return produced
