"""Typed requests for external rendering and filesystem operations.

Plans are built from these values; only the executor turns them into a
process invocation.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class OperationKind(str, Enum):
    """Kinds of external operations the pipeline can request."""

    IDENTIFY = "identify"
    RESIZE = "resize"
    EXTRACT_PAGES = "extract_pages"
    ASSEMBLE_ANIMATION = "assemble_animation"
    THUMBNAIL = "thumbnail"
    COPY = "copy"


@dataclass(frozen=True)
class OperationRequest:
    """One external operation with explicit arguments.

    Attributes:
        kind: Operation to perform
        source: Input file (unused by ASSEMBLE_ANIMATION)
        destination: Output file, or output directory for THUMBNAIL
        geometry: Resize geometry such as ``800x`` or ``x600``; None keeps size
        directory: Output directory for EXTRACT_PAGES
        prefix: Page filename prefix for EXTRACT_PAGES
        frames: Ordered frame files for ASSEMBLE_ANIMATION
    """

    kind: OperationKind
    source: Path | None = None
    destination: Path | None = None
    geometry: str | None = None
    directory: Path | None = None
    prefix: str | None = None
    frames: tuple[Path, ...] = field(default_factory=tuple)

    @classmethod
    def identify(cls, source: Path) -> "OperationRequest":
        return cls(OperationKind.IDENTIFY, source=source)

    @classmethod
    def resize(cls, source: Path, geometry: str | None, destination: Path) -> "OperationRequest":
        return cls(OperationKind.RESIZE, source=source, geometry=geometry, destination=destination)

    @classmethod
    def extract_pages(cls, source: Path, directory: Path, prefix: str) -> "OperationRequest":
        return cls(OperationKind.EXTRACT_PAGES, source=source, directory=directory, prefix=prefix)

    @classmethod
    def assemble_animation(cls, frames: list[Path], destination: Path) -> "OperationRequest":
        return cls(OperationKind.ASSEMBLE_ANIMATION, frames=tuple(frames), destination=destination)

    @classmethod
    def thumbnail(cls, source: Path, directory: Path) -> "OperationRequest":
        return cls(OperationKind.THUMBNAIL, source=source, destination=directory)

    @classmethod
    def copy(cls, source: Path, destination: Path) -> "OperationRequest":
        return cls(OperationKind.COPY, source=source, destination=destination)

    def describe(self) -> str:
        """Short human-readable form for logs."""
        if self.kind is OperationKind.ASSEMBLE_ANIMATION:
            return f"{self.kind.value} {len(self.frames)} frames -> {self.destination}"
        target = self.destination or self.directory
        return f"{self.kind.value} {self.source} -> {target}" if target else f"{self.kind.value} {self.source}"
