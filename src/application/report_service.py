"""
Work Hours Service Module

Application layer service that orchestrates one month's work-hours workflow:
read workbook → build daily records → aggregate → report.
Separates business logic from UI concerns (PyQt).
"""

from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Tuple

from config.config_manager import AppConfig, OutputSettings
from domain.daily_record_builder import DailyRecordBuilder, parse_date
from domain.entities import AttendanceEntry, CalculationResult, MonthStatistics, RawDayInput
from domain.holiday_calendar import HolidayCalendar
from domain.leave_parser import LeaveLabelParser
from domain.month_aggregator import MonthAggregator, parse_year_month
from domain.work_hours_calculator import WorkHoursCalculator
from infrastructure.excel_parser import ExcelParser, SourceUnavailableError
from infrastructure.excel_writer import ExcelWriter
from infrastructure.filename_parser import FilenameParser
from infrastructure.logger import get_logger
from infrastructure.pdf_writer import PdfWriter, format_filename
from infrastructure.report_formatter import ReportFormatter

logger = get_logger("WorkHoursService")


def build_calendar(config: AppConfig) -> HolidayCalendar:
    """
    Calendar from the built-in schedule plus the configured adjustments.

    Unparseable dates in the config are logged and ignored.
    """
    calendar = HolidayCalendar.default()

    for date_str in config.holidays.custom_dates:
        day = parse_date(date_str)
        if day is None:
            logger.warning(f"設定中的節假日格式錯誤，已忽略: {date_str}")
            continue
        calendar.add_holiday(day)

    for date_str in config.holidays.removed_dates:
        day = parse_date(date_str)
        if day is None:
            logger.warning(f"設定中的移除節假日格式錯誤，已忽略: {date_str}")
            continue
        calendar.remove_holiday(day)

    for date_str in config.holidays.makeup_workdays:
        day = parse_date(date_str)
        if day is None:
            logger.warning(f"設定中的調休工作日格式錯誤，已忽略: {date_str}")
            continue
        calendar.add_makeup_workday(day)

    return calendar


class WorkHoursService:
    """
    Application service for monthly work-hours statistics.

    This service:
    - Reads the month workbook and turns source failures into failure results
    - Builds per-day records and month statistics with the current settings
    - Renders text/PDF reports, generates templates and records submissions
    - Depends only on domain entities and infrastructure, not on PyQt
    """

    def __init__(
        self,
        config: AppConfig,
        calendar: Optional[HolidayCalendar] = None,
        parser: Optional[ExcelParser] = None,
        writer: Optional[ExcelWriter] = None
    ):
        self.config = config
        self.calendar = calendar or build_calendar(config)
        self.parser = parser or ExcelParser()
        self.writer = writer or ExcelWriter()

    def month_file(self, year_month: str) -> Path:
        """Path of the workbook holding a month's attendance."""
        return FilenameParser.month_file(
            self.config.paths.data_directory,
            year_month,
            self.config.paths.file_name_pattern
        )

    def compute_statistics(
        self,
        year_month: str,
        rows: Iterable[RawDayInput],
        reference_date: date
    ) -> MonthStatistics:
        """
        Pure computation from already-read rows.

        Rows dated outside the requested month are dropped.
        """
        year, month = parse_year_month(year_month)
        settings = self.config.work_hours

        builder = DailyRecordBuilder(
            self.calendar,
            WorkHoursCalculator(settings),
            LeaveLabelParser.from_config(self.config.leave_labels)
        )
        records = builder.build_month(rows, reference_date)

        in_month = [r for r in records if r.date.year == year and r.date.month == month]
        if len(in_month) != len(records):
            logger.warning(f"略過 {len(records) - len(in_month)} 筆非 {year_month} 的記錄")

        return MonthAggregator(self.calendar, settings).aggregate(year_month, in_month, reference_date)

    def calculate_month(
        self,
        year_month: str,
        reference_date: Optional[date] = None
    ) -> CalculationResult:
        """
        Calculate a month's statistics from its workbook.

        Args:
            year_month: "YYYY-MM"
            reference_date: "Today" for remaining-day projection; defaults to date.today()

        Returns:
            CalculationResult; success=False with a readable reason when the
            month cannot be calculated
        """
        try:
            year, month = parse_year_month(year_month)
        except ValueError:
            logger.warning(f"年月格式錯誤: {year_month}")
            return CalculationResult(
                success=False,
                year_month=year_month,
                error_message=f"年月格式錯誤，應為 YYYY-MM: {year_month}"
            )

        normalized = f"{year:04d}-{month:02d}"
        reference_date = reference_date or date.today()
        file_path = self.month_file(normalized)

        logger.info(f"開始計算 {normalized} 工時: {file_path}")
        try:
            rows = self.parser.parse_file(file_path)
        except SourceUnavailableError as e:
            logger.error(f"計算工時失敗: {e}")
            return CalculationResult(success=False, year_month=normalized, error_message=str(e))

        statistics = self.compute_statistics(normalized, rows, reference_date)
        return CalculationResult(success=True, year_month=normalized, statistics=statistics)

    def generate_report(
        self,
        year_month: str,
        reference_date: Optional[date] = None
    ) -> Tuple[CalculationResult, str]:
        """
        Calculate and render the text report.

        Returns:
            (result, report_text); report_text carries the failure reason when
            the calculation failed
        """
        result = self.calculate_month(year_month, reference_date)
        if not result.success:
            return result, f"產生報告失敗: {result.error_message}"

        text = ReportFormatter(self.config.work_hours).format(result.statistics)
        logger.info(f"產生工時報告: {result.year_month}")
        return result, text

    def export_pdf(self, statistics: MonthStatistics, output_dir: Optional[Path] = None) -> Path:
        """
        Write the month report as a PDF into the output directory.

        An unusable filename pattern falls back to the default one.

        Raises:
            PdfFontUnavailableError: If no CJK font is available
        """
        year, month = parse_year_month(statistics.year_month)
        if output_dir is None:
            configured = self.config.output_settings.output_dir
            output_dir = Path(configured) if configured else Path(self.config.paths.data_directory)

        pattern = self.config.output_settings.pdf_filename_pattern
        try:
            filename = format_filename(pattern, year, month)
        except (KeyError, IndexError, ValueError) as e:
            logger.warning(f"PDF 檔名格式錯誤 '{pattern}': {e}，改用預設檔名")
            filename = format_filename(OutputSettings.pdf_filename_pattern, year, month)

        output_path = output_dir / filename
        lines = ReportFormatter(self.config.work_hours).format_lines(statistics)
        writer = PdfWriter(custom_font_path=self.config.paths.custom_font_path or None)
        return writer.create_report(statistics, lines, output_path)

    def generate_template(self, year_month: str) -> Path:
        """
        Create or complete the month workbook.

        Raises:
            ValueError: If year_month is not YYYY-MM
        """
        year, month = parse_year_month(year_month)
        normalized = f"{year:04d}-{month:02d}"
        return self.writer.create_template(self.month_file(normalized), normalized)

    def submit_attendance(self, entry: AttendanceEntry) -> None:
        """
        Record one day's punches/leave in its month workbook.

        Raises:
            SourceUnavailableError: If the month workbook has not been generated
            ValueError: If the workbook has no row for that date
        """
        year_month = f"{entry.date.year:04d}-{entry.date.month:02d}"
        self.writer.submit_attendance(self.month_file(year_month), entry)

    def add_holiday(self, day: date) -> None:
        """Add a holiday to the calendar and the persisted adjustments."""
        self.calendar.add_holiday(day)
        text = day.isoformat()
        if text in self.config.holidays.removed_dates:
            self.config.holidays.removed_dates.remove(text)
        if text not in self.config.holidays.custom_dates:
            self.config.holidays.custom_dates.append(text)

    def remove_holiday(self, day: date) -> None:
        """Remove a holiday from the calendar and the persisted adjustments."""
        self.calendar.remove_holiday(day)
        text = day.isoformat()
        if text in self.config.holidays.custom_dates:
            self.config.holidays.custom_dates.remove(text)
        if text not in self.config.holidays.removed_dates:
            self.config.holidays.removed_dates.append(text)
