"""
Filename Parser Module

Builds month workbook filenames (attendance_YYYY-MM.xlsx).
"""

from pathlib import Path
from typing import Optional


class FilenameParser:
    """
    Month workbook naming.

    Default format: attendance_{year_month}.xlsx (e.g., attendance_2025-10.xlsx)
    """

    DEFAULT_PATTERN = "attendance_{year_month}.xlsx"

    @classmethod
    def format_name(cls, year_month: str, pattern: Optional[str] = None) -> str:
        """Format the workbook filename for a year-month."""
        year, month = year_month.split('-', 1)
        return (pattern or cls.DEFAULT_PATTERN).format(
            year_month=year_month,
            year=year,
            month=month
        )

    @classmethod
    def month_file(
        cls,
        data_directory: str,
        year_month: str,
        pattern: Optional[str] = None
    ) -> Path:
        """Full path of a month's workbook."""
        return Path(data_directory) / cls.format_name(year_month, pattern)

