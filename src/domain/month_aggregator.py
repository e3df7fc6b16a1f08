"""
Month Aggregator Module

Folds a month of DailyRecord entries into MonthStatistics.
"""

from calendar import monthrange
from datetime import date, datetime
from typing import Optional, Sequence, Tuple

from .entities import DailyRecord, LeaveType, MonthStatistics
from .holiday_calendar import HolidayCalendar, workdays_between
from config.config_manager import WorkHoursSettings
from infrastructure.logger import get_logger

logger = get_logger("MonthAggregator")


def parse_year_month(year_month: str) -> Tuple[int, int]:
    """
    Parse a "YYYY-MM" string.

    Raises:
        ValueError: If the text is not a valid year-month
    """
    parsed = datetime.strptime(year_month.strip(), "%Y-%m")
    return parsed.year, parsed.month


def round_hours(value: float) -> float:
    return round(value, 2)


class MonthAggregator:
    """
    Computes month-level statistics.

    Policies:
    - Remaining workdays count from the reference date inclusive through month
      end (clamped to the month; 0 once the month is over).
    - A day is late when it is a workday, not a leave day, and
      standard_start < clock_in < late_cutoff (both exclusive).
    - A late-night punch is a clock-out strictly after late_night_hour; a
      next-day clock-out always qualifies.
    """

    def __init__(
        self,
        calendar: HolidayCalendar,
        settings: Optional[WorkHoursSettings] = None
    ):
        self.calendar = calendar
        self.settings = settings or WorkHoursSettings()

    def remaining_workdays(self, year: int, month: int, reference_date: date) -> int:
        """Workdays from the reference date (inclusive) through month end."""
        first_day = date(year, month, 1)
        last_day = date(year, month, monthrange(year, month)[1])
        if reference_date > last_day:
            return 0
        start = max(reference_date, first_day)
        return workdays_between(start, last_day, self.calendar)

    def is_late(self, record: DailyRecord) -> bool:
        if not record.is_workday or record.clock_in is None:
            return False
        if record.leave_type != LeaveType.NONE or record.is_leave:
            return False
        start = self.settings.standard_start_hour * 60
        cutoff = self.settings.late_cutoff_hour * 60
        return start < record.clock_in.minutes < cutoff

    def is_late_night(self, record: DailyRecord) -> bool:
        if record.clock_out is None:
            return False
        return record.clock_out.minutes > self.settings.late_night_hour * 60

    def aggregate(
        self,
        year_month: str,
        records: Sequence[DailyRecord],
        reference_date: date
    ) -> MonthStatistics:
        """
        Fold the month's records into statistics.

        Args:
            year_month: "YYYY-MM"
            records: Ordered daily records of the month
            reference_date: "Today" for the remaining-workday projection

        Returns:
            Immutable MonthStatistics with hour values rounded to 2 decimals
        """
        year, month = parse_year_month(year_month)

        total_worked = 0.0
        attendance_days = 0
        total_leave = 0.0
        leave_records = []
        late_records = []
        late_night_count = 0
        actual_attendance_days = 0

        for record in records:
            if record.worked_hours > 0:
                total_worked += record.worked_hours
                attendance_days += 1

            if record.is_leave:
                total_leave += record.leave_hours
                leave_records.append(record)

            if self.is_late_night(record):
                late_night_count += 1

            if record.is_workday and record.has_clock_event:
                actual_attendance_days += 1

            if self.is_late(record):
                late_records.append(record)

        average = total_worked / attendance_days if attendance_days > 0 else 0.0
        expected = self.settings.expected_total_hours
        remaining_hours = expected - total_worked
        remaining_days = self.remaining_workdays(year, month, reference_date)
        required_average = remaining_hours / remaining_days if remaining_days > 0 else 0.0

        logger.info(
            f"{year_month} 統計完成: 總工時 {total_worked:.2f}h, 出勤 {attendance_days} 天, "
            f"剩餘工作日 {remaining_days} 天"
        )

        return MonthStatistics(
            year_month=f"{year:04d}-{month:02d}",
            reference_date=reference_date,
            total_worked_hours=round_hours(total_worked),
            attendance_days=attendance_days,
            average_worked_hours_per_attendance_day=round_hours(average),
            expected_total_hours=round_hours(expected),
            remaining_hours_to_target=round_hours(remaining_hours),
            remaining_workdays=remaining_days,
            required_average_hours_for_remaining_days=round_hours(required_average),
            total_leave_hours=round_hours(total_leave),
            leave_days=len(leave_records),
            late_night_checkin_count=late_night_count,
            actual_attendance_days=actual_attendance_days,
            late_days=len(late_records),
            daily_records=tuple(records),
            leave_records=tuple(leave_records),
            late_records=tuple(late_records),
        )
