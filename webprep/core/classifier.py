"""Classification of discovered source files."""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath

from webprep.config.constants import (
    DEFAULT_ANIMATION_PREFIX,
    DEFAULT_RASTER_EXTENSION,
    IMAGE_EXTENSIONS,
    LAYERED_EXTENSIONS,
    PAGED_EXTENSIONS,
    TEXT_EXTENSIONS,
    VECTOR_EXTENSIONS,
    VIDEO_EXTENSIONS,
)
from webprep.core.models import SourceEntry


class EntryKind(str, Enum):
    """What a source file is, as far as the pipeline is concerned."""

    IMAGE = "image"
    PAGED_DOCUMENT = "paged_document"
    TEXT_LIKE = "text_like"
    VIDEO = "video"  # recognized, not converted
    ANIMATION_FRAME = "animation_frame"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Classification:
    """Classifier verdict for one entry.

    Attributes:
        kind: Routing decision
        entry: The classified entry
        output_extension: Extension of rendered variants, when it differs
            from the source extension (layered and scan formats)
        group_dir: Relative directory of the animation group, for frame members
    """

    kind: EntryKind
    entry: SourceEntry
    output_extension: str | None = None
    group_dir: str | None = None

    def __str__(self) -> str:
        return self.entry.relative_path.as_posix()


class Classifier:
    """Assigns each source entry to exactly one :class:`EntryKind`.

    Frame membership is decided first, from the name of the containing
    directory, then the extension family decides the rest.
    """

    def __init__(
        self,
        animation_prefix: str = DEFAULT_ANIMATION_PREFIX,
        raster_extension: str = DEFAULT_RASTER_EXTENSION,
    ) -> None:
        self.animation_prefix = animation_prefix
        self.raster_extension = raster_extension

    def is_animation_dir(self, name: str) -> bool:
        return name.startswith(self.animation_prefix)

    def is_animation_source(self, entry: SourceEntry) -> bool:
        """A paged document whose own name flags it as animation frames."""
        return entry.extension in PAGED_EXTENSIONS | VECTOR_EXTENSIONS and self.is_animation_dir(
            entry.name
        )

    def classify(self, entry: SourceEntry) -> Classification:
        rel_dir = entry.relative_dir
        if rel_dir:
            parts = PurePosixPath(rel_dir).parts
            if self.is_animation_dir(parts[-1]):
                return Classification(EntryKind.ANIMATION_FRAME, entry, group_dir=rel_dir)
            if any(self.is_animation_dir(part) for part in parts[:-1]):
                # Nested below a frame directory: no mirrored output location
                return Classification(EntryKind.UNSUPPORTED, entry)

        ext = entry.extension
        if ext in PAGED_EXTENSIONS or ext in VECTOR_EXTENSIONS:
            return Classification(EntryKind.PAGED_DOCUMENT, entry)
        if ext in LAYERED_EXTENSIONS:
            return Classification(EntryKind.IMAGE, entry, output_extension=self.raster_extension)
        if ext in IMAGE_EXTENSIONS:
            return Classification(EntryKind.IMAGE, entry)
        if ext in VIDEO_EXTENSIONS:
            return Classification(EntryKind.VIDEO, entry)
        if ext in TEXT_EXTENSIONS:
            return Classification(EntryKind.TEXT_LIKE, entry)
        return Classification(EntryKind.UNSUPPORTED, entry)


def is_image_name(name: str) -> bool:
    """Whether a bare filename belongs to the image family."""
    return PurePosixPath(name).suffix.lower() in IMAGE_EXTENSIONS
