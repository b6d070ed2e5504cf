"""Data model of a conversion run."""

import os
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any


class Orientation(str, Enum):
    """Which axis of an image is the long one."""

    HORIZONTAL = "HORIZONTAL"
    VERTICAL = "VERTICAL"

    @classmethod
    def of(cls, width: int, height: int) -> "Orientation":
        """Square images count as horizontal."""
        return cls.HORIZONTAL if width >= height else cls.VERTICAL


def _iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).isoformat()


@dataclass(frozen=True)
class FileStat:
    """Serializable snapshot of a file's ``os.stat_result``."""

    size: int
    mode: int
    ino: int
    dev: int
    nlink: int
    uid: int
    gid: int
    atime_ms: float
    mtime_ms: float
    ctime_ms: float
    birthtime_ms: float

    @classmethod
    def from_stat(cls, st: os.stat_result) -> "FileStat":
        # st_birthtime is only reported on macOS/BSD (and Windows from 3.12)
        birthtime = getattr(st, "st_birthtime", st.st_ctime)
        return cls(
            size=st.st_size,
            mode=st.st_mode,
            ino=st.st_ino,
            dev=st.st_dev,
            nlink=st.st_nlink,
            uid=st.st_uid,
            gid=st.st_gid,
            atime_ms=st.st_atime * 1000,
            mtime_ms=st.st_mtime * 1000,
            ctime_ms=st.st_ctime * 1000,
            birthtime_ms=birthtime * 1000,
        )

    @classmethod
    def of(cls, path: Path) -> "FileStat":
        return cls.from_stat(path.stat())

    @property
    def birth_year(self) -> int:
        return datetime.fromtimestamp(self.birthtime_ms / 1000, tz=UTC).year

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["atime"] = _iso(self.atime_ms / 1000)
        data["mtime"] = _iso(self.mtime_ms / 1000)
        data["ctime"] = _iso(self.ctime_ms / 1000)
        data["birthtime"] = _iso(self.birthtime_ms / 1000)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileStat":
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class SourceEntry:
    """A file discovered under the source root."""

    path: Path
    root: Path
    stat: FileStat

    @classmethod
    def discover(cls, path: Path, root: Path) -> "SourceEntry":
        return cls(path=path, root=root, stat=FileStat.of(path))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    @property
    def relative_dir(self) -> str:
        """Containing directory relative to the root, "" for the root itself."""
        rel = self.path.parent.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    @property
    def relative_path(self) -> Path:
        return self.path.relative_to(self.root)


@dataclass(frozen=True)
class FileInfo:
    """Structured description of an image-like file from an identify report."""

    format: str
    width: int
    height: int
    layers: int = 1

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"dimensions must be positive, got {self.width}x{self.height}")
        if self.layers < 1:
            raise ValueError(f"layer count must be >= 1, got {self.layers}")

    @property
    def orientation(self) -> Orientation:
        return Orientation.of(self.width, self.height)

    @property
    def is_multi_layer(self) -> bool:
        return self.layers > 1


@dataclass(frozen=True)
class FileRecord:
    """One manifest entry."""

    filename: str
    dirname: str
    metadata: FileStat

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "dirname": self.dirname,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileRecord":
        return cls(
            filename=data["filename"],
            dirname=data["dirname"],
            metadata=FileStat.from_dict(data["metadata"]),
        )


@dataclass(frozen=True)
class AnimationGroup:
    """A source directory of frame images that becomes one animated file."""

    path: Path
    relative_path: str
    members: tuple[str, ...]
    first_stat: FileStat | None = None

    def __str__(self) -> str:
        return self.relative_path


@dataclass
class UnitFailure:
    """A unit whose processing raised."""

    unit: str
    error: str


@dataclass
class ConversionReport:
    """Outcome of one directory conversion run."""

    source_dir: Path
    output_dir: Path
    manifest_path: Path
    records: list[FileRecord] = field(default_factory=list)
    failures: list[UnitFailure] = field(default_factory=list)
    skipped: int = 0

    @property
    def converted(self) -> int:
        return len(self.records)

    @property
    def success(self) -> bool:
        return not self.failures
