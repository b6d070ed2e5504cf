"""Tests for responsive size set planning."""

from pathlib import Path

import pytest

from webprep.config import ResponsiveConfig
from webprep.core.models import FileInfo
from webprep.core.responsive import (
    SIZE_LABELS,
    baseline_size,
    build_plan,
    build_queries,
    create_responsive_images,
)
from webprep.render.operations import OperationKind


def geometries(info: FileInfo, config: ResponsiveConfig | None = None) -> list[str]:
    return [q.geometry for q in build_queries(info, config or ResponsiveConfig())]


class TestBaselineSize:
    """Tests for baseline_size."""

    def test_horizontal_clamped_to_max_width(self):
        """Test that wide images are clamped to the width cap."""
        info = FileInfo(format="jpeg", width=4000, height=1000)
        assert baseline_size(info, ResponsiveConfig()) == 1600

    def test_vertical_clamped_to_max_height(self):
        """Test that tall images are clamped to the height cap."""
        info = FileInfo(format="jpeg", width=1000, height=3000)
        assert baseline_size(info, ResponsiveConfig()) == 1200

    def test_no_upscale(self):
        """Test that small rasters keep their native size."""
        info = FileInfo(format="png", width=640, height=480)
        assert baseline_size(info, ResponsiveConfig()) == 640

    def test_vector_always_gets_cap(self):
        """Test that vector formats render at the cap regardless of geometry."""
        info = FileInfo(format="AI", width=300, height=200)
        assert baseline_size(info, ResponsiveConfig()) == 1600

    def test_custom_vector_formats(self):
        """Test configurable vector formats."""
        config = ResponsiveConfig(vector_formats=["pdf"])
        info = FileInfo(format="pdf", width=612, height=792)
        assert baseline_size(info, config) == 1200


class TestBuildQueries:
    """Tests for build_queries."""

    def test_labels_in_order(self):
        """Test that variants are 0x, 1x, 2x."""
        queries = build_queries(FileInfo("png", 2000, 1000), ResponsiveConfig())
        assert tuple(q.label for q in queries) == SIZE_LABELS

    def test_horizontal_geometries(self):
        """Test width-bound geometry for landscape sources."""
        assert geometries(FileInfo("jpeg", 2000, 1000)) == ["200x", "800x", "1600x"]

    def test_vertical_geometries(self):
        """Test height-bound geometry for portrait sources."""
        assert geometries(FileInfo("jpeg", 1000, 3000)) == ["x200", "x600", "x1200"]

    def test_half_size_rounds_down(self):
        """Test that 1x is half of 2x, rounded down."""
        queries = build_queries(FileInfo("png", 801, 400), ResponsiveConfig())
        sizes = {q.label: q.size for q in queries}

        assert sizes["2x"] == 801
        assert sizes["1x"] == 400

    def test_base_size_is_fixed(self):
        """Test that 0x ignores the source size."""
        queries = build_queries(FileInfo("png", 50, 40), ResponsiveConfig())
        assert queries[0].size == 200


class TestConversionPlan:
    """Tests for plan target naming."""

    def test_targets(self):
        """Test <basename>-<label><ext> naming."""
        plan = build_plan(
            Path("/src/photo.JPG"),
            Path("/out/photo.JPG"),
            FileInfo("jpeg", 2000, 1000),
        )
        assert plan.targets == [
            Path("/out/photo-0x.jpg"),
            Path("/out/photo-1x.jpg"),
            Path("/out/photo-2x.jpg"),
        ]


class TestCreateResponsiveImages:
    """Tests for create_responsive_images."""

    @pytest.mark.asyncio
    async def test_one_resize_per_variant(self, tmp_path, fake_executor_factory):
        """Test that three resize operations are issued in order."""
        executor = fake_executor_factory()
        produced = await create_responsive_images(
            executor,
            tmp_path / "photo.jpg",
            tmp_path / "photo.jpg",
            FileInfo("jpeg", 2000, 1000),
        )

        requests = executor.of_kind(OperationKind.RESIZE)
        assert [r.geometry for r in requests] == ["200x", "800x", "1600x"]
        assert [p.name for p in produced] == ["photo-0x.jpg", "photo-1x.jpg", "photo-2x.jpg"]
        assert all(p.exists() for p in produced)

    @pytest.mark.asyncio
    async def test_failed_variants_are_left_out(self, tmp_path, fake_executor_factory):
        """Test that failed operations produce no paths and raise nothing."""
        executor = fake_executor_factory(fail={OperationKind.RESIZE})
        produced = await create_responsive_images(
            executor, tmp_path / "a.png", tmp_path / "a.png", FileInfo("png", 10, 10)
        )

        assert produced == []
        assert len(executor.requests) == 3
