"""Assembly of animated images from frame directories and paged documents."""

from pathlib import Path

from webprep.core.classifier import Classifier, is_image_name
from webprep.core.models import AnimationGroup, FileRecord, FileStat, SourceEntry
from webprep.core.pages import rasterized_pages
from webprep.render.executor import Executor
from webprep.render.operations import OperationRequest
from webprep.utils.fs import discover_directories, slugify
from webprep.utils.logging import get_logger

log = get_logger(__name__)

ANIMATION_EXTENSION = ".gif"


def load_animation_group(directory: Path, root: Path) -> AnimationGroup:
    """Describe one frame directory.

    Members are the directory's non-hidden files with an extension, in name
    order. The first image-family member stands in for the group's file
    statistics.
    """
    members = tuple(
        sorted(
            p.name
            for p in directory.iterdir()
            if p.is_file() and not p.name.startswith(".") and p.suffix
        )
    )
    first_image = next((name for name in members if is_image_name(name)), None)
    return AnimationGroup(
        path=directory,
        relative_path=directory.relative_to(root).as_posix(),
        members=members,
        first_stat=FileStat.of(directory / first_image) if first_image else None,
    )


def discover_animation_groups(root: Path, classifier: Classifier) -> list[AnimationGroup]:
    """Find every frame directory below ``root``, in sorted path order."""
    return [
        load_animation_group(directory, root)
        for directory in discover_directories(root)
        if classifier.is_animation_dir(directory.name)
    ]


def animation_destination(group: AnimationGroup, output_dir: Path) -> Path:
    """``<output>/<relative path of the group>.gif``."""
    return output_dir / f"{group.relative_path}{ANIMATION_EXTENSION}"


async def assemble_group(
    executor: Executor, group: AnimationGroup, output_dir: Path
) -> FileRecord | None:
    """Assemble one frame directory into a single animated file.

    Returns:
        The group's manifest record, or None when nothing was produced
    """
    if group.first_stat is None:
        log.warning("Animation group has no image frames", group=group.relative_path)
        return None

    destination = animation_destination(group, output_dir)
    destination.parent.mkdir(parents=True, exist_ok=True)
    frames = [group.path / name for name in group.members]

    output = await executor.run(OperationRequest.assemble_animation(frames, destination))
    if output is None:
        return None

    log.info("Animation assembled", group=group.relative_path, frames=len(frames))
    return FileRecord(
        filename=group.relative_path,
        dirname=group.relative_path,
        metadata=group.first_stat,
    )


async def animate_document(
    executor: Executor, entry: SourceEntry, output_dir: Path
) -> FileRecord | None:
    """Turn the pages of a flagged paged document into one animated file.

    The animation is written to ``<output>/<relative dir>/<slug>.gif``.
    """
    slug = slugify(entry.stem)
    destination = output_dir / entry.relative_dir / f"{slug}{ANIMATION_EXTENSION}"
    destination.parent.mkdir(parents=True, exist_ok=True)

    async with rasterized_pages(executor, entry.path, slug) as pages:
        if not pages:
            log.warning("No frames extracted from document", file=str(entry.path))
            return None
        output = await executor.run(OperationRequest.assemble_animation(pages, destination))

    if output is None:
        return None
    return FileRecord(filename=slug, dirname=entry.relative_dir, metadata=entry.stat)
