"""
Daily Record Builder Module

Builds normalized DailyRecord entries from one month's RawDayInput rows.
A bad cell degrades to "absent" for that field; only an unparseable date
drops the row.
"""

import re
from datetime import date, datetime, time
from typing import Iterable, List, Optional

from .entities import ClockTime, DailyRecord, LeaveType, RawDayInput, weekday_name
from .holiday_calendar import HolidayCalendar, is_workday
from .leave_parser import LeaveLabelParser
from .work_hours_calculator import WorkHoursCalculator
from infrastructure.logger import get_logger

logger = get_logger("DailyRecordBuilder")


DATE_FORMATS = ('%Y-%m-%d', '%Y/%m/%d')

# "22:30", "1:05+1", "1:05(+1)", "次日1:05", "9:00:00"
CLOCK_PATTERN = re.compile(
    r'^(?P<prefix>次日)?\s*(?P<hour>\d{1,2})[:：](?P<minute>\d{2})(?::\d{2})?\s*(?P<suffix>\(?\+1\)?)?$'
)


def parse_date(text: str) -> Optional[date]:
    """Parse a yyyy-MM-dd date; None if it cannot be parsed."""
    if not text:
        return None
    value = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_clock_time(text: str) -> Optional[ClockTime]:
    """
    Parse a punch string.

    Returns:
        ClockTime, or None for empty text

    Raises:
        ValueError: If the text is not a recognizable time
    """
    if text is None or not str(text).strip():
        return None

    match = CLOCK_PATTERN.match(str(text).strip())
    if not match:
        raise ValueError(f"無法解析時間格式: '{text}'")

    hour = int(match.group('hour'))
    minute = int(match.group('minute'))
    if hour > 23 or minute > 59:
        raise ValueError(f"時間超出範圍: '{text}'")

    next_day = bool(match.group('prefix') or match.group('suffix'))
    return ClockTime(time(hour, minute), next_day=next_day)


class DailyRecordBuilder:
    """
    Builds one DailyRecord per source row.

    Steps per row:
    1. Parse date (row dropped if unparseable)
    2. Parse punches (unparseable → absent, noted in anomalies)
    3. Classify leave, derive leave hours
    4. Classify holiday/workday against the calendar
    5. Compute worked hours when both punches exist
    """

    def __init__(
        self,
        calendar: HolidayCalendar,
        calculator: Optional[WorkHoursCalculator] = None,
        leave_parser: Optional[LeaveLabelParser] = None
    ):
        self.calendar = calendar
        self.calculator = calculator or WorkHoursCalculator()
        self.leave_parser = leave_parser or LeaveLabelParser()

    def build_month(
        self,
        rows: Iterable[RawDayInput],
        reference_date: Optional[date] = None
    ) -> List[DailyRecord]:
        """
        Build records for all rows, ordered by date.

        Rows with an unparseable date are skipped; for duplicate dates the
        first row wins.
        """
        records: dict = {}
        skipped = 0

        for raw in rows:
            record = self.build(raw, reference_date)
            if record is None:
                skipped += 1
                continue
            if record.date in records:
                logger.warning(f"日期 {record.date} 重複出現，已略過後續資料")
                continue
            records[record.date] = record

        if skipped:
            logger.info(f"共略過 {skipped} 列日期無法解析的資料")

        return [records[d] for d in sorted(records)]

    def build(
        self,
        raw: RawDayInput,
        reference_date: Optional[date] = None
    ) -> Optional[DailyRecord]:
        """Build a single record; None when the date cannot be parsed."""
        day = parse_date(raw.date_text)
        if day is None:
            if raw.date_text and raw.date_text.strip():
                logger.warning(f"日期無法解析，略過此列: '{raw.date_text}'")
            return None

        anomalies: List[str] = []

        clock_in = self._parse_clock(raw.clock_in_text, "上班", day, anomalies)
        clock_out = self._parse_clock(raw.clock_out_text, "下班", day, anomalies)

        leave_type, leave_start, leave_end = self._classify_leave(raw, day, anomalies)
        leave_hours = self.calculator.leave_hours(leave_type, leave_start, leave_end)
        if leave_type == LeaveType.CUSTOM and leave_hours == 0:
            anomalies.append("請假結束時間早於或等於開始時間")
            logger.warning(f"日期 {day} 自訂請假時段無效: {leave_start} ~ {leave_end}")

        holiday = self.calendar.is_holiday(day)
        makeup = self.calendar.is_makeup_workday(day)
        workday = is_workday(day, self.calendar)

        implicit_absence = False
        if (
            self.calculator.settings.implicit_absence_as_leave
            and reference_date is not None
            and workday
            and day < reference_date
            and clock_in is None
            and clock_out is None
            and leave_type == LeaveType.NONE
        ):
            implicit_absence = True
            leave_hours = self.calculator.settings.full_day_leave_hours
            logger.debug(f"日期 {day} 工作日無打卡且未請假，視為全天缺勤")

        worked_hours = 0.0
        if clock_in is not None and clock_out is not None:
            if self.calculator.is_degenerate(clock_in, clock_out):
                anomalies.append("下班時間早於上班時間")
                logger.warning(f"日期 {day} 下班時間 {clock_out} 早於上班時間 {clock_in}，工時以 0 計")
            else:
                worked_hours = self.calculator.worked_hours(clock_in, clock_out, leave_type)
        else:
            logger.debug(f"日期 {day} 上下班打卡不完整，跳過工時計算")

        return DailyRecord(
            date=day,
            weekday_name=weekday_name(day),
            clock_in=clock_in,
            clock_out=clock_out,
            is_workday=workday,
            is_holiday=holiday,
            is_makeup_workday=makeup,
            leave_type=leave_type,
            leave_start=leave_start,
            leave_end=leave_end,
            leave_hours=leave_hours,
            worked_hours=worked_hours,
            remark=(raw.remark or "").strip(),
            implicit_absence=implicit_absence,
            anomalies=tuple(anomalies),
        )

    def _parse_clock(
        self,
        text: str,
        label: str,
        day: date,
        anomalies: List[str]
    ) -> Optional[ClockTime]:
        try:
            return parse_clock_time(text)
        except ValueError as e:
            anomalies.append(f"{label}時間無法解析: '{text}'")
            logger.warning(f"日期 {day} {label}時間解析失敗，視為未打卡: {e}")
            return None

    def _classify_leave(
        self,
        raw: RawDayInput,
        day: date,
        anomalies: List[str]
    ) -> tuple:
        """Returns (leave_type, leave_start, leave_end)."""
        leave_type = self.leave_parser.parse(raw.leave_text)
        if leave_type != LeaveType.NONE:
            return (leave_type, None, None)

        start = self._parse_clock(raw.leave_start_text, "請假開始", day, anomalies)
        end = self._parse_clock(raw.leave_end_text, "請假結束", day, anomalies)

        if (start is not None and start.next_day) or (end is not None and end.next_day):
            anomalies.append("請假時段不支援跨日標記")
            logger.warning(f"日期 {day} 自訂請假時段含跨日標記，視為未請假")
            return (LeaveType.NONE, None, None)

        if start is not None and end is not None:
            return (LeaveType.CUSTOM, start.value, end.value)

        if start is not None or end is not None or self.leave_parser.mentions_custom(raw.leave_text):
            anomalies.append("自訂請假時段不完整")
            logger.warning(f"日期 {day} 自訂請假缺少開始或結束時間，視為未請假")

        return (LeaveType.NONE, None, None)
