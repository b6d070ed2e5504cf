"""Per-project ``index.md`` files with YAML front matter.

Project metadata comes from a ``data.csv`` sheet with the columns
``index, slug, title, text, year`` followed by any number of tag columns.
"""

import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from webprep.utils.fs import list_conversion_units
from webprep.utils.logging import get_logger

log = get_logger(__name__)

_SCALAR_COLUMNS = ("index", "slug", "title", "text", "year")


@dataclass
class ProjectMetadata:
    """One row of the project sheet, lowercased."""

    index: str
    slug: str
    title: str = ""
    text: str = ""
    year: str = ""
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: list[str]) -> "ProjectMetadata":
        cells = [cell.strip().lower() for cell in row]
        padded = cells + [""] * (len(_SCALAR_COLUMNS) - len(cells))
        scalars = dict(zip(_SCALAR_COLUMNS, padded, strict=False))
        tags = [tag for tag in cells[len(_SCALAR_COLUMNS) :] if tag]
        return cls(**scalars, tags=tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "slug": self.slug,
            "title": self.title,
            "text": self.text,
            "year": self.year,
            "tags": self.tags,
        }


def read_project_sheet(path: Path) -> list[ProjectMetadata]:
    """Parse the sheet, skipping the header row and blank lines."""
    with path.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    return [ProjectMetadata.from_row(row) for row in rows[1:] if any(c.strip() for c in row)]


def render_frontmatter(metadata: ProjectMetadata) -> str:
    """Render the metadata as a YAML front matter block."""
    body = yaml.safe_dump(
        metadata.to_dict(),
        allow_unicode=True,
        default_flow_style=None,
        sort_keys=False,
    )
    return f"---\n{body}---\n"


def find_project_folder(
    projects_dir: Path, slug: str, output_suffix: str = "-converted"
) -> Path | None:
    for folder in list_conversion_units(projects_dir, skip_converted=False):
        if folder.name.replace(output_suffix, "") == slug:
            return folder
    return None


def write_project_frontmatter(
    root: Path,
    sheet_name: str = "data.csv",
    projects_name: str = "projects",
    output_suffix: str = "-converted",
) -> list[Path]:
    """Write ``index.md`` into every project folder listed in the sheet.

    Returns:
        The files written; rows with no matching folder are logged and skipped
    """
    projects_dir = root / projects_name
    written = []

    for metadata in read_project_sheet(root / sheet_name):
        folder = find_project_folder(projects_dir, metadata.slug, output_suffix)
        if folder is None:
            log.warning("No project folder for sheet row", slug=metadata.slug)
            continue

        target = folder / "index.md"
        target.write_text(render_frontmatter(metadata), encoding="utf-8")
        log.info("Front matter written", slug=metadata.slug, path=str(target))
        written.append(target)

    return written
