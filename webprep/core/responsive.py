"""Responsive size sets: plan construction and execution."""

from dataclasses import dataclass
from pathlib import Path

from webprep.config.settings import ResponsiveConfig
from webprep.core.models import FileInfo, Orientation
from webprep.render.executor import Executor
from webprep.render.operations import OperationRequest
from webprep.utils.logging import get_logger

log = get_logger(__name__)

SIZE_LABELS = ("0x", "1x", "2x")


@dataclass(frozen=True)
class ResizeQuery:
    """A named size variant and its resize geometry."""

    label: str
    size: int
    geometry: str


@dataclass(frozen=True)
class ConversionPlan:
    """Ordered size variants for one source file and their destinations."""

    source: Path
    destination: Path
    queries: tuple[ResizeQuery, ...]

    def target_for(self, query: ResizeQuery) -> Path:
        """``<basename>-<label><ext>`` beside the destination path."""
        ext = self.destination.suffix.lower()
        return self.destination.with_name(f"{self.destination.stem}-{query.label}{ext}")

    @property
    def targets(self) -> list[Path]:
        return [self.target_for(q) for q in self.queries]


def baseline_size(info: FileInfo, config: ResponsiveConfig) -> int:
    """Largest rendition along the long axis.

    Raster sources are never upscaled; vector sources report geometry that is
    no upper bound and always get the full cap.
    """
    if info.orientation is Orientation.HORIZONTAL:
        cap, native = config.max_width, info.width
    else:
        cap, native = config.max_height, info.height

    if info.format.lower() in config.vector_formats:
        return cap
    return min(native, cap)


def build_queries(info: FileInfo, config: ResponsiveConfig) -> tuple[ResizeQuery, ...]:
    baseline = baseline_size(info, config)
    sizes = {
        "0x": config.base_size,
        "1x": baseline // 2,
        "2x": baseline,
    }
    horizontal = info.orientation is Orientation.HORIZONTAL
    return tuple(
        ResizeQuery(
            label=label,
            size=sizes[label],
            geometry=f"{sizes[label]}x" if horizontal else f"x{sizes[label]}",
        )
        for label in SIZE_LABELS
    )


def build_plan(
    source: Path, destination: Path, info: FileInfo, config: ResponsiveConfig | None = None
) -> ConversionPlan:
    """Compute the responsive plan for one file."""
    return ConversionPlan(
        source=source,
        destination=destination,
        queries=build_queries(info, config or ResponsiveConfig()),
    )


async def create_responsive_images(
    executor: Executor,
    source: Path,
    destination: Path,
    info: FileInfo,
    config: ResponsiveConfig | None = None,
) -> list[Path]:
    """Render every size variant of ``source``, one after another.

    Returns:
        The variant paths whose resize operation succeeded
    """
    plan = build_plan(source, destination, info, config)
    produced: list[Path] = []

    for query in plan.queries:
        target = plan.target_for(query)
        output = await executor.run(OperationRequest.resize(source, query.geometry, target))
        if output is None:
            log.warning("Size variant not produced", source=str(source), label=query.label)
            continue
        produced.append(target)

    return produced
