"""
Excel Parser Module

Reads a month's attendance workbook into RawDayInput rows.
All cell-type sniffing (date cells, time cells, numbers) happens here so the
domain layer only ever sees text.
"""

import zipfile
from datetime import datetime, time, date, timedelta
from pathlib import Path
from typing import Dict, List, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from domain.entities import RawDayInput
from infrastructure.logger import get_logger

logger = get_logger("ExcelParser")


# ==============================================================================
# Custom Exceptions
# ==============================================================================
class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass


class SourceUnavailableError(AttendanceError):
    """Raised when a month's attendance workbook cannot be located or read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"考勤檔案不存在或無法讀取: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


# ==============================================================================
# Column Layout
# ==============================================================================
# 欄位鍵 -> 表頭關鍵字 (繁體/簡體)
HEADER_KEYWORDS: Dict[str, List[str]] = {
    "date": ["日期", "date"],
    "clock_in": ["上班"],
    "clock_out": ["下班"],
    "leave_type": ["請假類型", "请假类型", "假別", "leave"],
    "leave_start": ["請假開始", "请假开始"],
    "leave_end": ["請假結束", "请假结束"],
    "remark": ["備註", "备注", "remark"],
}

# 找不到表頭時的預設欄位 (1-based)；找到表頭時只使用表頭中出現的欄位
DEFAULT_COLUMNS: Dict[str, int] = {
    "date": 1,
    "clock_in": 3,
    "clock_out": 4,
    "leave_type": 5,
    "leave_start": 6,
    "leave_end": 7,
    "remark": 8,
}


# ==============================================================================
# ExcelParser Class
# ==============================================================================
class ExcelParser:
    """
    Parses month attendance workbooks.

    Handles:
    - Header detection by keyword, falling back to the default layout
    - Date cells, time cells, [h]:mm durations and plain strings
    - Skipping blank rows
    """

    MAX_HEADER_SEARCH_ROWS = 5

    def parse_file(self, file_path: Path) -> List[RawDayInput]:
        """
        Parse the first worksheet of a month workbook.

        Args:
            file_path: Path to the .xlsx file

        Returns:
            List of RawDayInput rows in sheet order

        Raises:
            SourceUnavailableError: If the file is missing or not a readable workbook
        """
        if not file_path.exists():
            logger.warning(f"來源檔案不存在: {file_path}")
            raise SourceUnavailableError(file_path, "檔案不存在")

        logger.info(f"開始解析 Excel 檔案: {file_path.name}")

        try:
            wb = load_workbook(file_path, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError) as e:
            logger.error(f"無法開啟 Excel 檔案 {file_path}: {e}")
            raise SourceUnavailableError(file_path, str(e)) from e

        try:
            rows = self._parse_worksheet(wb.worksheets[0])
        finally:
            wb.close()

        logger.info(f"解析完成: 共 {len(rows)} 筆記錄")
        return rows

    def _parse_worksheet(self, ws: Worksheet) -> List[RawDayInput]:
        """Parse a worksheet into rows."""
        header_row, columns = self._detect_columns(ws)

        logger.debug(
            f"工作表 '{ws.title}': 表頭列={header_row}, 欄位配置={columns}"
        )

        rows = []
        for row_idx in range(header_row + 1, ws.max_row + 1):
            date_text = self._cell_to_date_text(ws.cell(row_idx, columns["date"]).value)
            if not date_text:
                continue

            values = {key: self._cell_value(ws, row_idx, columns, key) for key in DEFAULT_COLUMNS}
            rows.append(RawDayInput(
                date_text=date_text,
                clock_in_text=self._cell_to_time_text(values["clock_in"]),
                clock_out_text=self._cell_to_time_text(values["clock_out"]),
                leave_text=self._cell_to_text(values["leave_type"]),
                leave_start_text=self._cell_to_time_text(values["leave_start"]),
                leave_end_text=self._cell_to_time_text(values["leave_end"]),
                remark=self._cell_to_text(values["remark"]),
            ))

        return rows

    def _detect_columns(self, ws: Worksheet) -> tuple:
        """
        Locate the header row and map column keys to positions.

        With a header row only the columns it names are read; without one
        the default layout applies.

        Returns:
            (header_row, {key: column_index})
        """
        max_search_rows = min(self.MAX_HEADER_SEARCH_ROWS, ws.max_row)
        max_search_cols = min(15, ws.max_column)

        for row_idx in range(1, max_search_rows + 1):
            found: Dict[str, int] = {}
            for col_idx in range(1, max_search_cols + 1):
                cell_value = str(ws.cell(row_idx, col_idx).value or '').strip().lower()
                if not cell_value:
                    continue
                for key, keywords in HEADER_KEYWORDS.items():
                    if key in found:
                        continue
                    if any(keyword.lower() in cell_value for keyword in keywords):
                        found[key] = col_idx
                        break

            if "date" in found and "clock_in" in found and "clock_out" in found:
                return row_idx, found

        logger.debug(f"工作表 '{ws.title}': 未找到標準表頭，使用預設欄位配置")
        return 1, dict(DEFAULT_COLUMNS)

    @staticmethod
    def _cell_value(ws: Worksheet, row_idx: int, columns: Dict[str, int], key: str):
        """Raw cell value of a column key; None for a column the sheet lacks."""
        col_idx = columns.get(key)
        if col_idx is None:
            return None
        return ws.cell(row_idx, col_idx).value

    @staticmethod
    def _cell_to_text(value) -> str:
        if value is None:
            return ""
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    @staticmethod
    def _cell_to_date_text(value) -> str:
        """Render a date cell as yyyy-MM-dd; strings pass through."""
        if value is None:
            return ""
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        return str(value).strip()

    @staticmethod
    def _cell_to_time_text(value) -> str:
        """Render a time cell as H:MM; strings pass through for the domain parser."""
        if value is None:
            return ""
        if isinstance(value, datetime):
            return f"{value.hour}:{value.minute:02d}"
        if isinstance(value, time):
            return f"{value.hour}:{value.minute:02d}"
        if isinstance(value, timedelta):
            total_minutes = int(value.total_seconds() // 60)
            days, minutes = divmod(total_minutes, 24 * 60)
            text = f"{minutes // 60}:{minutes % 60:02d}"
            return f"{text}+1" if days >= 1 else text
        if isinstance(value, float) and 0 <= value < 1:
            # Excel day fraction
            total_minutes = min(int(round(value * 24 * 60)), 24 * 60 - 1)
            return f"{total_minutes // 60}:{total_minutes % 60:02d}"
        return str(value).strip()
