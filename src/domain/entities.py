"""
Domain Entities Module

Core domain entities using dataclasses for the work-hours system.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Optional, Tuple


WEEKDAY_NAMES = ("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日")

MINUTES_PER_DAY = 24 * 60


def weekday_name(day: date) -> str:
    """Chinese weekday name for a date."""
    return WEEKDAY_NAMES[day.weekday()]


class LeaveType(Enum):
    """Classification of a recorded absence for one day."""
    NONE = "正常"
    MORNING = "上午請假"
    AFTERNOON = "下午請假"
    FULL_DAY = "全天請假"
    CUSTOM = "自訂時段"

    @property
    def description(self) -> str:
        return self.value


@dataclass(frozen=True)
class ClockTime:
    """
    A punch time for one record.

    Attributes:
        value: Time of day
        next_day: True if the punch happened after midnight of the following day
    """
    value: time
    next_day: bool = False

    @property
    def minutes(self) -> int:
        """Minutes after midnight of the record's own date."""
        offset = MINUTES_PER_DAY if self.next_day else 0
        return self.value.hour * 60 + self.value.minute + offset

    def __str__(self) -> str:
        text = f"{self.value.hour}:{self.value.minute:02d}"
        return f"{text}+1" if self.next_day else text


@dataclass(frozen=True)
class RawDayInput:
    """
    One already-normalized row of the month's source, all fields as text.

    Column sniffing (date cells, time cells, numbers) belongs to the reader;
    the core only sees strings.
    """
    date_text: str
    clock_in_text: str = ""
    clock_out_text: str = ""
    leave_text: str = ""
    leave_start_text: str = ""
    leave_end_text: str = ""
    remark: str = ""


@dataclass(frozen=True)
class DailyRecord:
    """
    Normalized attendance for a single date.

    Attributes:
        date: The calendar date
        weekday_name: Chinese weekday name
        clock_in: Check-in punch (None if absent or unparseable)
        clock_out: Check-out punch (None if absent or unparseable)
        is_workday: Attendance is expected on this date
        is_holiday: Date is a statutory holiday
        is_makeup_workday: Weekend/holiday designated as a workday
        leave_type: Classified leave annotation
        leave_start: Custom leave start (CUSTOM only)
        leave_end: Custom leave end (CUSTOM only)
        leave_hours: Derived leave hours (>= 0)
        worked_hours: Derived worked hours (>= 0), unrounded
        remark: Free text
        implicit_absence: Workday without punches counted as full-day leave
        anomalies: Degradation notes (unparseable fields, degenerate ranges)
    """
    date: date
    weekday_name: str
    clock_in: Optional[ClockTime] = None
    clock_out: Optional[ClockTime] = None
    is_workday: bool = False
    is_holiday: bool = False
    is_makeup_workday: bool = False
    leave_type: LeaveType = LeaveType.NONE
    leave_start: Optional[time] = None
    leave_end: Optional[time] = None
    leave_hours: float = 0.0
    worked_hours: float = 0.0
    remark: str = ""
    implicit_absence: bool = False
    anomalies: Tuple[str, ...] = ()

    @property
    def is_leave(self) -> bool:
        return self.leave_hours > 0

    @property
    def has_clock_event(self) -> bool:
        return self.clock_in is not None or self.clock_out is not None

    def to_dict(self) -> dict:
        """Structured form with times rendered as text."""
        return {
            "date": self.date.isoformat(),
            "weekday_name": self.weekday_name,
            "clock_in": str(self.clock_in) if self.clock_in else None,
            "clock_out": str(self.clock_out) if self.clock_out else None,
            "is_workday": self.is_workday,
            "is_holiday": self.is_holiday,
            "is_makeup_workday": self.is_makeup_workday,
            "leave_type": self.leave_type.name,
            "leave_start": self.leave_start.strftime("%H:%M") if self.leave_start else None,
            "leave_end": self.leave_end.strftime("%H:%M") if self.leave_end else None,
            "leave_hours": self.leave_hours,
            "worked_hours": self.worked_hours,
            "remark": self.remark,
            "implicit_absence": self.implicit_absence,
            "anomalies": list(self.anomalies),
        }


@dataclass(frozen=True)
class MonthStatistics:
    """
    Month-level statistics folded from the month's daily records.

    All hour values are rounded to two decimals.
    """
    year_month: str
    reference_date: date
    total_worked_hours: float = 0.0
    attendance_days: int = 0
    average_worked_hours_per_attendance_day: float = 0.0
    expected_total_hours: float = 0.0
    remaining_hours_to_target: float = 0.0
    remaining_workdays: int = 0
    required_average_hours_for_remaining_days: float = 0.0
    total_leave_hours: float = 0.0
    leave_days: int = 0
    late_night_checkin_count: int = 0
    actual_attendance_days: int = 0
    late_days: int = 0
    daily_records: Tuple[DailyRecord, ...] = ()
    leave_records: Tuple[DailyRecord, ...] = ()
    late_records: Tuple[DailyRecord, ...] = ()

    def to_dict(self) -> dict:
        """Structured form, field for field."""
        return {
            "year_month": self.year_month,
            "reference_date": self.reference_date.isoformat(),
            "total_worked_hours": self.total_worked_hours,
            "attendance_days": self.attendance_days,
            "average_worked_hours_per_attendance_day": self.average_worked_hours_per_attendance_day,
            "expected_total_hours": self.expected_total_hours,
            "remaining_hours_to_target": self.remaining_hours_to_target,
            "remaining_workdays": self.remaining_workdays,
            "required_average_hours_for_remaining_days": self.required_average_hours_for_remaining_days,
            "total_leave_hours": self.total_leave_hours,
            "leave_days": self.leave_days,
            "late_night_checkin_count": self.late_night_checkin_count,
            "actual_attendance_days": self.actual_attendance_days,
            "late_days": self.late_days,
            "daily_records": [r.to_dict() for r in self.daily_records],
            "leave_records": [r.to_dict() for r in self.leave_records],
            "late_records": [r.to_dict() for r in self.late_records],
        }


@dataclass
class CalculationResult:
    """Result of one month's calculation request."""
    success: bool
    year_month: str
    statistics: Optional[MonthStatistics] = None
    error_message: str = ""


@dataclass
class AttendanceEntry:
    """
    One day's punches or leave to be written into the month workbook.

    Empty fields leave the corresponding cell untouched.
    """
    date: date
    clock_in: str = ""
    clock_out: str = ""
    leave_type: LeaveType = LeaveType.NONE
    leave_start: str = ""
    leave_end: str = ""
    remark: str = ""
