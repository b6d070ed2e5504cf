"""End-to-end directory conversions against a scripted rendering engine."""

import json

import pytest

from webprep.config import WebprepSettings
from webprep.core.converter import DirectoryConverter, convert_directory
from webprep.exceptions import ConversionError, ManifestWriteError
from webprep.render.operations import OperationKind

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


def load_manifest(report):
    return json.loads(report.manifest_path.read_text(encoding="utf-8"))


def write(path, content=b"data"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


class TestImages:
    """Raster and layered image sources."""

    async def test_landscape_photo(self, source_root, fake_executor_factory, report_for):
        """Test the three variants of a wide photo and its manifest entry."""
        write(source_root / "photo.jpg")
        executor = fake_executor_factory(
            reports={"photo.jpg": report_for("photo.jpg", "JPEG", 2000, 1000)}
        )

        report = await convert_directory(source_root, executor=executor)

        output = source_root.parent / "spring-converted"
        assert report.output_dir == output
        assert [r.geometry for r in executor.of_kind(OperationKind.RESIZE)] == [
            "200x",
            "800x",
            "1600x",
        ]
        for label in ("0x", "1x", "2x"):
            assert (output / f"photo-{label}.jpg").exists()

        manifest = load_manifest(report)
        assert len(manifest) == 1
        assert manifest[0]["filename"] == "photo.jpg"
        assert manifest[0]["dirname"] == ""
        assert manifest[0]["metadata"]["size"] == 4

    async def test_layered_source_nested(self, source_root, fake_executor_factory, report_for):
        """Test a portrait psd in a subfolder rendered as jpg variants."""
        write(source_root / "print" / "cover.psd")
        executor = fake_executor_factory(
            reports={"cover.psd": report_for("cover.psd", "PSD", 3000, 4000)}
        )

        report = await convert_directory(source_root, executor=executor)

        output = report.output_dir / "print"
        assert sorted(p.name for p in output.iterdir()) == [
            "cover-0x.jpg",
            "cover-1x.jpg",
            "cover-2x.jpg",
        ]
        assert [r.geometry for r in executor.of_kind(OperationKind.RESIZE)] == [
            "x200",
            "x600",
            "x1200",
        ]
        assert load_manifest(report)[0]["dirname"] == "print"


class TestAnimations:
    """Frame directories and flagged documents."""

    async def test_frame_directory(self, source_root, fake_executor_factory):
        """Test that a gif-run folder becomes exactly one animation and one record."""
        for name in ("c.png", "a.png", "b.png"):
            write(source_root / "gif-run" / name)
        executor = fake_executor_factory()

        report = await convert_directory(source_root, executor=executor)

        assert [r.kind for r in executor.requests] == [OperationKind.ASSEMBLE_ANIMATION]
        assert [f.name for f in executor.requests[0].frames] == ["a.png", "b.png", "c.png"]
        assert (report.output_dir / "gif-run.gif").exists()
        assert not (report.output_dir / "gif-run").exists()

        manifest = load_manifest(report)
        assert [(m["filename"], m["dirname"]) for m in manifest] == [("gif-run", "gif-run")]

    async def test_flagged_document(self, source_root, fake_executor_factory):
        """Test that a gif-named pdf is animated rather than rasterized."""
        write(source_root / "gif-intro.pdf")
        executor = fake_executor_factory(pages={"gif-intro.pdf": 3})

        report = await convert_directory(source_root, executor=executor)

        assert executor.of_kind(OperationKind.IDENTIFY) == []
        assert executor.of_kind(OperationKind.RESIZE) == []
        assert (report.output_dir / "gif-intro.gif").exists()
        assert sorted(p.name for p in source_root.iterdir()) == ["gif-intro.pdf"]
        assert load_manifest(report)[0]["filename"] == "gif-intro"


class TestDocuments:
    """Paged and vector documents."""

    async def test_multi_page_pdf_copied(self, source_root, fake_executor_factory, report_for):
        """Test that a multi-page pdf is published verbatim with no variants."""
        write(source_root / "docs" / "deck.pdf", b"%PDF-1.7 deck")
        executor = fake_executor_factory(
            reports={"deck.pdf": report_for("deck.pdf", "PDF", 612, 792, layers=3)}
        )

        report = await convert_directory(source_root, executor=executor)

        assert executor.of_kind(OperationKind.RESIZE) == []
        assert (report.output_dir / "docs" / "deck.pdf").read_bytes() == b"%PDF-1.7 deck"
        assert load_manifest(report)[0]["filename"] == "deck.pdf"

    async def test_multi_layer_ai_pages(self, source_root, fake_executor_factory, report_for):
        """Test one responsive set per page and no leftover page files."""
        write(source_root / "poster.ai")
        executor = fake_executor_factory(
            reports={"poster.ai": report_for("poster.ai", "AI", 612, 792, layers=2)},
            pages={"poster.ai": 2},
        )

        report = await convert_directory(source_root, executor=executor)

        assert sorted(p.name for p in report.output_dir.iterdir() if p.suffix == ".png") == [
            "ai-poster-0-0x.png",
            "ai-poster-0-1x.png",
            "ai-poster-0-2x.png",
            "ai-poster-1-0x.png",
            "ai-poster-1-1x.png",
            "ai-poster-1-2x.png",
        ]
        assert sorted(p.name for p in source_root.iterdir()) == ["poster.ai"]
        extract = executor.of_kind(OperationKind.EXTRACT_PAGES)[0]
        assert not extract.directory.exists()

    async def test_single_page_pdf(self, source_root, fake_executor_factory, report_for):
        """Test the format-tagged responsive set of a one-page document."""
        write(source_root / "flyer.pdf")
        executor = fake_executor_factory(
            reports={"flyer.pdf": report_for("flyer.pdf", "PDF", 612, 792)}
        )

        report = await convert_directory(source_root, executor=executor)

        for label in ("0x", "1x", "2x"):
            assert (report.output_dir / f"pdf-flyer-{label}.png").exists()
        assert [r.geometry for r in executor.of_kind(OperationKind.RESIZE)] == [
            "x200",
            "x396",
            "x792",
        ]
        assert load_manifest(report)[0]["filename"] == "pdf-flyer.png"


class TestOtherKinds:
    """Text-like, video and unsupported files."""

    async def test_text_thumbnail(self, source_root, fake_executor_factory):
        """Test that text-like files get a thumbnail and a stem record."""
        write(source_root / "notes" / "brief.md")
        executor = fake_executor_factory()

        report = await convert_directory(source_root, executor=executor)

        thumbnail = executor.of_kind(OperationKind.THUMBNAIL)[0]
        assert thumbnail.destination == report.output_dir / "notes"
        assert load_manifest(report)[0]["filename"] == "brief"

    async def test_video_and_unknown_skipped(self, source_root, fake_executor_factory):
        """Test that recognized-but-unconverted files produce nothing."""
        write(source_root / "clip.mov")
        write(source_root / "archive.zip")
        executor = fake_executor_factory()

        report = await convert_directory(source_root, executor=executor)

        assert executor.requests == []
        assert report.skipped == 2
        assert load_manifest(report) == []


class TestRunPolicy:
    """Failure isolation, idempotence and output rebuilding."""

    async def test_parse_failure_does_not_abort(self, source_root, fake_executor_factory, report_for):
        """Test that one unidentifiable file is reported while the rest convert."""
        write(source_root / "a-broken.jpg")
        write(source_root / "b-photo.jpg")
        executor = fake_executor_factory(
            reports={"b-photo.jpg": report_for("b-photo.jpg", "JPEG", 800, 600)}
        )

        report = await convert_directory(source_root, executor=executor)

        assert [f.unit for f in report.failures] == ["a-broken.jpg"]
        assert "empty identify report" in report.failures[0].error
        assert [m["filename"] for m in load_manifest(report)] == ["b-photo.jpg"]

    async def test_all_variants_failing_is_skipped(
        self, source_root, fake_executor_factory, report_for
    ):
        """Test that a unit with no output gets no manifest entry."""
        write(source_root / "photo.jpg")
        executor = fake_executor_factory(
            reports={"photo.jpg": report_for("photo.jpg", "JPEG", 800, 600)},
            fail={OperationKind.RESIZE},
        )

        report = await convert_directory(source_root, executor=executor)

        assert report.success
        assert report.skipped == 1
        assert load_manifest(report) == []

    async def test_rerun_is_identical(self, source_root, fake_executor_factory, report_for):
        """Test that converting twice yields the same manifest."""
        write(source_root / "photo.jpg")
        write(source_root / "gif-run" / "1.png")
        executor = fake_executor_factory(
            reports={"photo.jpg": report_for("photo.jpg", "JPEG", 2000, 1000)}
        )
        converter = DirectoryConverter(executor=executor)

        first = load_manifest(await converter.convert(source_root))
        second = load_manifest(await converter.convert(source_root))

        def strip_times(manifest):
            return [
                (m["filename"], m["dirname"], m["metadata"]["size"], m["metadata"]["mtime_ms"])
                for m in manifest
            ]

        assert strip_times(first) == strip_times(second)

    async def test_output_rebuilt(self, source_root, fake_executor_factory):
        """Test that stale output from earlier runs is removed."""
        stale = write(source_root.parent / "spring-converted" / "old" / "stale-2x.jpg")
        executor = fake_executor_factory()

        await convert_directory(source_root, executor=executor)

        assert not stale.exists()
        assert (source_root.parent / "spring-converted" / "data.json").exists()

    async def test_hidden_files_ignored(self, source_root, fake_executor_factory):
        """Test that dotfiles never reach the pipeline."""
        write(source_root / ".DS_Store")
        executor = fake_executor_factory()

        report = await convert_directory(source_root, executor=executor)

        assert executor.requests == []
        assert report.skipped == 0

    async def test_custom_layout(self, source_root, fake_executor_factory, report_for):
        """Test configured suffix and manifest name."""
        write(source_root / "photo.jpg")
        settings = WebprepSettings(
            layout={"output_suffix": "-web", "manifest_filename": "manifest.json"}
        )
        executor = fake_executor_factory(
            reports={"photo.jpg": report_for("photo.jpg", "JPEG", 100, 100)}
        )

        report = await convert_directory(source_root, settings=settings, executor=executor)

        assert report.manifest_path == source_root.parent / "spring-web" / "manifest.json"
        assert report.manifest_path.exists()

    async def test_source_must_be_directory(self, tmp_path, fake_executor_factory):
        """Test that a file source is rejected before anything is touched."""
        path = write(tmp_path / "photo.jpg")

        with pytest.raises(ConversionError):
            await convert_directory(path, executor=fake_executor_factory())

    async def test_manifest_failure_is_fatal(
        self, source_root, fake_executor_factory, monkeypatch
    ):
        """Test that a manifest that cannot be written fails the run."""
        from webprep.core import converter as converter_module

        def refuse(path, records):
            raise ManifestWriteError(path, PermissionError("read-only"))

        monkeypatch.setattr(converter_module, "write_manifest", refuse)

        with pytest.raises(ManifestWriteError):
            await convert_directory(source_root, executor=fake_executor_factory())
