"""Tests for report rendering helpers."""

from rich.console import Console

from webprep.cli.shared.summary import display_report, simplify_error
from webprep.core.models import ConversionReport, UnitFailure


class TestSimplifyError:
    """Tests for simplify_error."""

    def test_strips_conversion_prefix(self):
        """Test removal of the per-file prefix."""
        error = "Conversion failed for /src/a.jpg: empty identify report"
        assert simplify_error(error) == "empty identify report"

    def test_first_line_only(self):
        """Test multi-line errors."""
        assert simplify_error("first\nsecond") == "first"

    def test_truncates(self):
        """Test long messages."""
        result = simplify_error("x" * 300)
        assert len(result) == 120
        assert result.endswith("...")

    def test_empty(self):
        """Test an empty message."""
        assert simplify_error("") == "Unknown error"


class TestDisplayReport:
    """Tests for display_report."""

    def test_lists_failures(self, tmp_path):
        """Test that failed units appear in the output."""
        console = Console(record=True, width=200)
        report = ConversionReport(
            source_dir=tmp_path / "src",
            output_dir=tmp_path / "src-converted",
            manifest_path=tmp_path / "src-converted" / "data.json",
            failures=[UnitFailure("broken.jpg", "Conversion failed for x: empty identify report")],
            skipped=2,
        )

        display_report(console, report)
        text = console.export_text()

        assert "Conversion Summary" in text
        assert "broken.jpg" in text
        assert "empty identify report" in text
