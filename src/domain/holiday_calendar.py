"""
Holiday Calendar Module

Statutory holidays and makeup workdays, plus the workday predicate that is
evaluated against them.
"""

import threading
from datetime import date, timedelta
from typing import Iterable, Optional, Set

from infrastructure.logger import get_logger

logger = get_logger("HolidayCalendar")


def _date_range(start: date, end: date) -> Set[date]:
    return {start + timedelta(days=i) for i in range((end - start).days + 1)}


# 2025 年法定節假日 (含 2024 年底元旦連休)
DEFAULT_HOLIDAYS: Set[date] = (
    _date_range(date(2024, 12, 30), date(2025, 1, 1))   # 元旦
    | _date_range(date(2025, 1, 28), date(2025, 2, 4))  # 春節
    | _date_range(date(2025, 4, 4), date(2025, 4, 6))   # 清明節
    | _date_range(date(2025, 5, 1), date(2025, 5, 5))   # 勞動節
    | _date_range(date(2025, 5, 31), date(2025, 6, 2))  # 端午節
    | _date_range(date(2025, 10, 1), date(2025, 10, 8))  # 國慶節 + 中秋節
)

# 2025 年調休工作日 (週末需上班)
DEFAULT_MAKEUP_WORKDAYS: Set[date] = {
    date(2025, 1, 26),
    date(2025, 4, 27),
    date(2025, 9, 28),
    date(2025, 10, 11),
}


class HolidayCalendar:
    """
    Holiday and makeup-workday sets.

    The calendar is constructed by the caller and passed to whoever needs it.
    Reads and writes are serialized by a lock, so a settings edit may add or
    remove holidays while a month calculation is reading the sets.
    """

    def __init__(
        self,
        holidays: Optional[Iterable[date]] = None,
        makeup_workdays: Optional[Iterable[date]] = None
    ):
        self._lock = threading.RLock()
        self._holidays: Set[date] = set(holidays or ())
        self._makeup_workdays: Set[date] = set(makeup_workdays or ())

    @classmethod
    def default(cls) -> "HolidayCalendar":
        """Calendar initialized from the built-in yearly schedule."""
        calendar = cls(DEFAULT_HOLIDAYS, DEFAULT_MAKEUP_WORKDAYS)
        logger.info(
            f"已載入 {len(DEFAULT_HOLIDAYS)} 個法定節假日, "
            f"{len(DEFAULT_MAKEUP_WORKDAYS)} 個調休工作日"
        )
        return calendar

    def is_holiday(self, day: date) -> bool:
        with self._lock:
            return day in self._holidays

    def is_makeup_workday(self, day: date) -> bool:
        with self._lock:
            return day in self._makeup_workdays

    def add_holiday(self, day: date) -> None:
        with self._lock:
            self._holidays.add(day)
        logger.info(f"新增自訂節假日: {day}")

    def remove_holiday(self, day: date) -> None:
        with self._lock:
            self._holidays.discard(day)
        logger.info(f"移除節假日: {day}")

    def add_makeup_workday(self, day: date) -> None:
        with self._lock:
            self._makeup_workdays.add(day)
        logger.info(f"新增調休工作日: {day}")

    def remove_makeup_workday(self, day: date) -> None:
        with self._lock:
            self._makeup_workdays.discard(day)
        logger.info(f"移除調休工作日: {day}")

    def all_holidays(self) -> Set[date]:
        """Copy of the holiday set."""
        with self._lock:
            return set(self._holidays)


def is_workday(day: date, calendar: HolidayCalendar) -> bool:
    """
    Decide whether attendance is expected on a date.

    Mon-Fri minus holidays, plus makeup workdays. A makeup workday wins over a
    holiday entry for the same date.
    """
    if calendar.is_makeup_workday(day):
        return True
    return day.weekday() < 5 and not calendar.is_holiday(day)


def workdays_between(start: date, end: date, calendar: HolidayCalendar) -> int:
    """Count workdays in the inclusive range [start, end]."""
    count = 0
    current = start
    while current <= end:
        if is_workday(current, calendar):
            count += 1
        current += timedelta(days=1)
    return count
