"""Index of converted folders: one row per folder with its earliest year."""

import csv
from dataclasses import dataclass
from pathlib import Path

from webprep.config.constants import DEFAULT_INDEX_FILENAME, DEFAULT_MANIFEST_FILENAME
from webprep.core.manifest import read_manifest
from webprep.utils.fs import list_conversion_units
from webprep.utils.logging import get_logger

log = get_logger(__name__)

INDEX_HEADERS = ["index", "slug", "year"]


@dataclass
class IndexRow:
    """One converted folder in the index."""

    index: int
    slug: str
    year: int | None

    def as_row(self) -> list[str]:
        return [str(self.index), self.slug, "" if self.year is None else str(self.year)]


def build_index(
    root: Path,
    output_suffix: str = "-converted",
    manifest_filename: str = DEFAULT_MANIFEST_FILENAME,
) -> list[IndexRow]:
    """Collect an index row for every folder under ``root`` that has a manifest.

    The slug is the folder name without the output suffix; the year is the
    earliest creation year among the folder's manifest records.
    """
    rows = []
    folders = [
        folder
        for folder in list_conversion_units(root, skip_converted=False)
        if (folder / manifest_filename).is_file()
    ]
    for index, folder in enumerate(folders):
        records = read_manifest(folder / manifest_filename)
        years = [record.metadata.birth_year for record in records]
        slug = folder.name.replace(output_suffix, "")
        rows.append(IndexRow(index=index, slug=slug, year=min(years) if years else None))
    return rows


def write_index(rows: list[IndexRow], path: Path) -> Path:
    """Write index rows as a tab-separated file with a header row."""
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, delimiter="\t")
        writer.writerow(INDEX_HEADERS)
        writer.writerows(row.as_row() for row in rows)

    log.info("Index written", path=str(path), rows=len(rows))
    return path


def default_index_path(root: Path) -> Path:
    return root / DEFAULT_INDEX_FILENAME
