"""
Excel Writer Module

Generates the month attendance template and writes submitted punches or
leave into it. Existing cell contents are never cleared.
"""

import zipfile
from calendar import monthrange
from datetime import date
from pathlib import Path
from typing import Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils.exceptions import InvalidFileException

from domain.entities import AttendanceEntry, LeaveType, weekday_name
from domain.month_aggregator import parse_year_month
from infrastructure.excel_parser import SourceUnavailableError
from infrastructure.logger import get_logger

logger = get_logger("ExcelWriter")


class ExcelWriter:
    """
    Month attendance workbook writer.

    Output format:
    - Row 1: 日期 | 星期 | 上班時間 | 下班時間 | 請假類型 | 請假開始 | 請假結束 | 備註
    - Row 2..: one row per calendar date, punch cells left blank

    Styling:
    - Bold header on a gray background
    - Weekend rows tinted so the sheet is easier to fill in
    """

    SHEET_TITLE = "考勤記錄"

    HEADERS = ["日期", "星期", "上班時間", "下班時間", "請假類型", "請假開始", "請假結束", "備註"]

    # 欄寬 (字元)
    COLUMN_WIDTHS = [12, 8, 10, 10, 12, 10, 10, 24]

    # 欄位位置 (1-based)
    COL_DATE = 1
    COL_WEEKDAY = 2
    COL_CLOCK_IN = 3
    COL_CLOCK_OUT = 4
    COL_LEAVE_TYPE = 5
    COL_LEAVE_START = 6
    COL_LEAVE_END = 7
    COL_REMARK = 8

    HEADER_FILL = PatternFill(start_color='D9D9D9', end_color='D9D9D9', fill_type='solid')
    WEEKEND_FILL = PatternFill(start_color='F2F2F2', end_color='F2F2F2', fill_type='solid')

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    CENTER = Alignment(horizontal='center', vertical='center')

    def create_template(self, output_path: Path, year_month: str) -> Path:
        """
        Create the month template, or fill in missing dates of an existing one.

        Args:
            output_path: Workbook path
            year_month: "YYYY-MM"

        Returns:
            Path to the workbook
        """
        year, month = parse_year_month(year_month)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if output_path.exists():
            logger.info(f"檔案已存在，將保留已填寫的資料: {output_path}")
            wb = load_workbook(output_path)
            ws = wb.worksheets[0]
            added = self._append_missing_dates(ws, year, month)
            if added:
                logger.info(f"補上 {added} 個缺少的日期列")
        else:
            wb = Workbook()
            ws = wb.active
            ws.title = self.SHEET_TITLE
            self._write_header(ws)
            _, num_days = monthrange(year, month)
            for day in range(1, num_days + 1):
                self._write_date_row(ws, day + 1, date(year, month, day))

        wb.save(output_path)
        wb.close()
        logger.info(f"模板檔案已產生/更新: {output_path}")
        return output_path

    def submit_attendance(self, file_path: Path, entry: AttendanceEntry) -> None:
        """
        Write one day's punches/leave into the month workbook.

        Only non-empty fields are written.

        Raises:
            SourceUnavailableError: If the workbook does not exist or cannot be opened
            ValueError: If the sheet has no row for the entry's date
        """
        if not file_path.exists():
            raise SourceUnavailableError(file_path, "請先產生模板")

        try:
            wb = load_workbook(file_path)
        except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            logger.error(f"無法開啟 Excel 檔案 {file_path}: {e}")
            raise SourceUnavailableError(file_path, str(e)) from e

        try:
            ws = wb.worksheets[0]
            row_idx = self._find_date_row(ws, entry.date)
            if row_idx is None:
                raise ValueError(f"找不到日期為 {entry.date.isoformat()} 的記錄")

            values = {
                self.COL_CLOCK_IN: entry.clock_in,
                self.COL_CLOCK_OUT: entry.clock_out,
                self.COL_LEAVE_START: entry.leave_start,
                self.COL_LEAVE_END: entry.leave_end,
                self.COL_REMARK: entry.remark,
            }
            if entry.leave_type != LeaveType.NONE:
                values[self.COL_LEAVE_TYPE] = entry.leave_type.description

            for col_idx, value in values.items():
                if value and str(value).strip():
                    ws.cell(row_idx, col_idx).value = str(value).strip()

            wb.save(file_path)
        finally:
            wb.close()

        logger.info(f"考勤記錄提交成功: {entry.date.isoformat()}")

    def _write_header(self, ws) -> None:
        for col_idx, header in enumerate(self.HEADERS, start=1):
            cell = ws.cell(1, col_idx, header)
            cell.font = Font(bold=True, size=12)
            cell.fill = self.HEADER_FILL
            cell.alignment = self.CENTER
            cell.border = self.BORDER
            ws.column_dimensions[cell.column_letter].width = self.COLUMN_WIDTHS[col_idx - 1]
        ws.freeze_panes = "A2"

    def _write_date_row(self, ws, row_idx: int, day: date) -> None:
        ws.cell(row_idx, self.COL_DATE, day.isoformat())
        ws.cell(row_idx, self.COL_WEEKDAY, weekday_name(day))
        for col_idx in range(1, len(self.HEADERS) + 1):
            cell = ws.cell(row_idx, col_idx)
            cell.alignment = self.CENTER
            cell.border = self.BORDER
            if day.weekday() >= 5:
                cell.fill = self.WEEKEND_FILL

    def _append_missing_dates(self, ws, year: int, month: int) -> int:
        existing = set()
        for row_idx in range(2, ws.max_row + 1):
            value = ws.cell(row_idx, self.COL_DATE).value
            if value is not None:
                existing.add(self._date_key(value))

        added = 0
        _, num_days = monthrange(year, month)
        for day in range(1, num_days + 1):
            d = date(year, month, day)
            if d.isoformat() not in existing:
                self._write_date_row(ws, ws.max_row + 1, d)
                added += 1
        return added

    def _find_date_row(self, ws, day: date) -> Optional[int]:
        target = day.isoformat()
        for row_idx in range(2, ws.max_row + 1):
            value = ws.cell(row_idx, self.COL_DATE).value
            if value is not None and self._date_key(value) == target:
                return row_idx
        return None

    @staticmethod
    def _date_key(value) -> str:
        if isinstance(value, date):
            # datetime is a date subclass
            return value.isoformat()[:10]
        return str(value).strip()
