"""Directory converter: the orchestrator of one conversion run."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

from webprep.config.constants import VECTOR_EXTENSIONS
from webprep.config.settings import WebprepSettings, get_settings
from webprep.core.animation import animate_document, assemble_group, discover_animation_groups
from webprep.core.classifier import Classification, Classifier, EntryKind
from webprep.core.info import get_file_info
from webprep.core.manifest import write_manifest
from webprep.core.models import (
    AnimationGroup,
    ConversionReport,
    FileRecord,
    SourceEntry,
    UnitFailure,
)
from webprep.core.pages import extract_pages
from webprep.core.responsive import create_responsive_images
from webprep.exceptions import ConversionError
from webprep.render.executor import CommandExecutor, Executor
from webprep.render.operations import OperationRequest
from webprep.utils.concurrency import BoundedRunner, TaskResult
from webprep.utils.fs import discover_paths, replicate_tree
from webprep.utils.logging import get_logger

log = get_logger(__name__)

ProgressCallback = Callable[[Any, Any, Exception | None], None]


class DirectoryConverter:
    """Converts one source directory into a sibling ``<name>-converted`` tree.

    A run destroys and rebuilds the output tree, converts every file one at
    a time, then assembles every frame directory, and finally writes the
    manifest. Units that raise are logged and reported; they never stop the
    run. Only a manifest write failure is fatal.
    """

    def __init__(
        self,
        settings: WebprepSettings | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the converter.

        Args:
            settings: Application settings (defaults to the cached settings)
            executor: Operation executor (defaults to a CommandExecutor)
        """
        self.settings = settings or get_settings()
        self.executor = executor or CommandExecutor(self.settings.render)
        self.classifier = Classifier(
            animation_prefix=self.settings.layout.animation_prefix,
            raster_extension=self.settings.layout.raster_extension,
        )
        self.runner = BoundedRunner(self.settings.concurrency.file_workers)
        self._run_output_dir: Path | None = None

    @property
    def _output_dir(self) -> Path:
        if self._run_output_dir is None:
            raise RuntimeError("no conversion run in progress")
        return self._run_output_dir

    def output_dir_for(self, source_dir: Path) -> Path:
        return source_dir.parent / f"{source_dir.name}{self.settings.layout.output_suffix}"

    async def convert(
        self, source_dir: Path, on_progress: ProgressCallback | None = None
    ) -> ConversionReport:
        """Run the full conversion of ``source_dir``.

        Args:
            source_dir: Directory to convert
            on_progress: Optional callback invoked after every unit

        Returns:
            ConversionReport with manifest records and per-unit failures

        Raises:
            ConversionError: If ``source_dir`` is not a directory
            ManifestWriteError: If the manifest cannot be written
        """
        source_dir = source_dir.resolve()
        if not source_dir.is_dir():
            raise ConversionError(source_dir, "source is not a directory")

        output_dir = self.output_dir_for(source_dir)
        manifest_path = output_dir / self.settings.layout.manifest_filename

        log.info("Starting directory conversion", source=str(source_dir), output=str(output_dir))
        replicate_tree(source_dir, output_dir, exclude_prefix=self.classifier.animation_prefix)

        self._run_output_dir = output_dir
        classifications = [
            self.classifier.classify(SourceEntry.discover(path, source_dir))
            for path in discover_paths(source_dir)
        ]
        units = [c for c in classifications if c.kind is not EntryKind.ANIMATION_FRAME]
        groups = discover_animation_groups(source_dir, self.classifier)

        log.info(
            "Source tree discovered",
            files=len(units),
            frames=len(classifications) - len(units),
            animation_groups=len(groups),
        )

        file_results = await self.runner.map(units, self._convert_unit, on_progress)
        group_results = await self.runner.map(groups, self._convert_group, on_progress)

        report = ConversionReport(
            source_dir=source_dir,
            output_dir=output_dir,
            manifest_path=manifest_path,
        )
        self._collect(report, [*file_results, *group_results])

        write_manifest(manifest_path, report.records)

        log.info(
            "Directory conversion finished",
            source=str(source_dir),
            records=report.converted,
            skipped=report.skipped,
            failed=len(report.failures),
        )
        return report

    @staticmethod
    def _collect(report: ConversionReport, results: list[TaskResult]) -> None:
        for result in results:
            if not result.success:
                report.failures.append(
                    UnitFailure(unit=str(result.item), error=result.error or "Unknown error")
                )
            elif result.result is None:
                report.skipped += 1
            else:
                report.records.append(result.result)

    def _mirror(self, entry: SourceEntry, extension: str | None = None) -> Path:
        """Destination path of ``entry`` in the output tree."""
        target = self._output_dir / entry.relative_path
        return target.with_suffix(extension) if extension else target

    async def _convert_unit(self, classification: Classification) -> FileRecord | None:
        entry = classification.entry
        kind = classification.kind

        if kind is EntryKind.IMAGE:
            info = await get_file_info(self.executor, entry.path)
            produced = await create_responsive_images(
                self.executor,
                entry.path,
                self._mirror(entry, classification.output_extension),
                info,
                self.settings.responsive,
            )
            return _record(entry, entry.name) if produced else None

        if kind is EntryKind.PAGED_DOCUMENT:
            return await self._convert_document(entry)

        if kind is EntryKind.TEXT_LIKE:
            thumbnail_dir = self._output_dir / entry.relative_dir
            output = await self.executor.run(OperationRequest.thumbnail(entry.path, thumbnail_dir))
            return _record(entry, entry.stem) if output is not None else None

        log.debug("Skipping entry", file=str(entry.path), kind=kind.value)
        return None

    async def _convert_document(self, entry: SourceEntry) -> FileRecord | None:
        if self.classifier.is_animation_source(entry):
            return await animate_document(self.executor, entry, self._output_dir)

        info = await get_file_info(self.executor, entry.path)

        if info.is_multi_layer:
            if entry.extension in VECTOR_EXTENSIONS:
                log.info("Extracting layers", file=str(entry.path), layers=info.layers)
                produced = await extract_pages(
                    self.executor,
                    entry.path,
                    info,
                    self._mirror(entry).parent,
                    self.settings.responsive,
                )
                return _record(entry, entry.name) if produced else None

            # Multi-page PDFs are published as-is
            output = await self.executor.run(OperationRequest.copy(entry.path, self._mirror(entry)))
            return _record(entry, entry.name) if output is not None else None

        filename = f"{info.format}-{entry.stem}.png"
        produced = await create_responsive_images(
            self.executor,
            entry.path,
            self._output_dir / entry.relative_dir / filename,
            info,
            self.settings.responsive,
        )
        return _record(entry, filename) if produced else None

    async def _convert_group(self, group: AnimationGroup) -> FileRecord | None:
        return await assemble_group(self.executor, group, self._output_dir)


def _record(entry: SourceEntry, filename: str) -> FileRecord:
    return FileRecord(filename=filename, dirname=entry.relative_dir, metadata=entry.stat)


async def convert_directory(
    source_dir: Path,
    settings: WebprepSettings | None = None,
    executor: Executor | None = None,
    on_progress: ProgressCallback | None = None,
) -> ConversionReport:
    """Convenience wrapper around :class:`DirectoryConverter`."""
    converter = DirectoryConverter(settings=settings, executor=executor)
    return await converter.convert(source_dir, on_progress=on_progress)
