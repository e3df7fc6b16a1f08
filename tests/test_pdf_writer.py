"""
Unit tests for PdfWriter and its helpers.
"""

import pytest
import tempfile
from datetime import date
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.entities import MonthStatistics
import infrastructure.pdf_writer as pdf_writer
from infrastructure.pdf_writer import (
    PdfFontUnavailableError, PdfWriter, find_chinese_font, format_filename
)
from infrastructure.report_formatter import ReportFormatter


class TestFormatFilename:
    """Tests for format_filename utility function."""

    def test_basic_formatting(self):
        result = format_filename("Report_{year}_{month}.pdf", 2025, 12)
        assert result == "Report_2025_12.pdf"

    def test_month_padding(self):
        result = format_filename("Report_{year}_{month}.pdf", 2025, 1)
        assert result == "Report_2025_01.pdf"

    def test_chinese_pattern(self):
        result = format_filename("工時統計報告_{year}_{month}.pdf", 2025, 6)
        assert result == "工時統計報告_2025_06.pdf"


class TestFindChineseFont:
    """Tests for font lookup."""

    def test_custom_font_path_is_preferred(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            font_path = Path(tmpdir) / "custom.ttf"
            font_path.write_bytes(b"")
            assert find_chinese_font(str(font_path)) == font_path

    def test_missing_custom_font_falls_through(self):
        result = find_chinese_font("/nonexistent/font.ttf")
        assert result is None or result.exists()


def make_stats():
    return MonthStatistics(
        year_month="2025-10",
        reference_date=date(2025, 10, 27),
        total_worked_hours=31.5,
        attendance_days=3,
        expected_total_hours=220.0,
        remaining_hours_to_target=188.5,
        remaining_workdays=5,
    )


class TestPdfWriter:
    """Tests for PdfWriter.create_report."""

    def test_without_chinese_font_refuses(self, monkeypatch):
        """Test that a missing CJK font raises a clear error and writes nothing."""
        monkeypatch.setattr(pdf_writer, "find_chinese_font", lambda custom_font_path=None: None)
        stats = make_stats()
        lines = ReportFormatter().format_lines(stats)

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "report.pdf"
            with pytest.raises(PdfFontUnavailableError):
                PdfWriter().create_report(stats, lines, output_path)
            assert not output_path.exists()

    @pytest.mark.skipif(find_chinese_font() is None, reason="no CJK font available")
    def test_create_report(self):
        stats = make_stats()
        lines = ReportFormatter().format_lines(stats)

        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "out" / "report.pdf"
            result = PdfWriter().create_report(stats, lines, output_path)

            assert result == output_path
            assert output_path.exists()
            assert output_path.read_bytes().startswith(b"%PDF")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
