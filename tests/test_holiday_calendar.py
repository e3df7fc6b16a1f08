"""
Unit tests for HolidayCalendar and the workday predicate.
"""

import pytest
import threading
from datetime import date
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.holiday_calendar import (
    HolidayCalendar, DEFAULT_HOLIDAYS, DEFAULT_MAKEUP_WORKDAYS,
    is_workday, workdays_between
)


class TestDefaultCalendar:
    """Tests for the built-in schedule."""

    def test_national_day_is_holiday(self):
        calendar = HolidayCalendar.default()
        assert calendar.is_holiday(date(2025, 10, 1))
        assert not is_workday(date(2025, 10, 1), calendar)

    def test_makeup_saturday_is_workday(self):
        """2025-10-11 is a Saturday designated as a workday."""
        calendar = HolidayCalendar.default()
        assert calendar.is_makeup_workday(date(2025, 10, 11))
        assert is_workday(date(2025, 10, 11), calendar)

    def test_ordinary_days(self):
        calendar = HolidayCalendar.default()
        assert is_workday(date(2025, 10, 13), calendar)      # Monday
        assert not is_workday(date(2025, 10, 12), calendar)  # Sunday

    def test_holiday_tuesday_is_not_workday(self):
        calendar = HolidayCalendar([date(2025, 10, 14)])
        assert not is_workday(date(2025, 10, 14), calendar)

    def test_default_sets_are_not_shared(self):
        """Test that editing a calendar never touches the built-in schedule."""
        calendar = HolidayCalendar.default()
        calendar.remove_holiday(date(2025, 10, 1))
        assert date(2025, 10, 1) in DEFAULT_HOLIDAYS
        assert date(2025, 10, 11) in DEFAULT_MAKEUP_WORKDAYS


class TestCalendarEdits:
    """Tests for adding and removing dates."""

    def test_add_and_remove_holiday(self):
        calendar = HolidayCalendar()
        monday = date(2025, 10, 13)

        calendar.add_holiday(monday)
        assert not is_workday(monday, calendar)

        calendar.remove_holiday(monday)
        assert is_workday(monday, calendar)

    def test_remove_unknown_holiday_is_noop(self):
        calendar = HolidayCalendar()
        calendar.remove_holiday(date(2025, 10, 13))
        assert calendar.all_holidays() == set()

    def test_makeup_wins_over_holiday(self):
        calendar = HolidayCalendar()
        saturday = date(2025, 10, 18)
        calendar.add_holiday(saturday)
        calendar.add_makeup_workday(saturday)
        assert is_workday(saturday, calendar)

        calendar.remove_makeup_workday(saturday)
        assert not is_workday(saturday, calendar)

    def test_all_holidays_returns_copy(self):
        calendar = HolidayCalendar([date(2025, 10, 1)])
        snapshot = calendar.all_holidays()
        snapshot.add(date(2025, 10, 2))
        assert calendar.all_holidays() == {date(2025, 10, 1)}

    def test_concurrent_edits(self):
        """Test that concurrent writers leave the calendar consistent."""
        calendar = HolidayCalendar()
        days = [date(2025, 1, 1).replace(day=d) for d in range(1, 29)]

        threads = [
            threading.Thread(target=lambda d=d: calendar.add_holiday(d))
            for d in days
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert calendar.all_holidays() == set(days)


class TestWorkdaysBetween:
    """Tests for workdays_between."""

    def test_plain_month(self):
        """October 2025 has 23 weekdays."""
        calendar = HolidayCalendar()
        assert workdays_between(date(2025, 10, 1), date(2025, 10, 31), calendar) == 23

    def test_month_with_holidays_and_makeup(self):
        """23 weekdays, minus 6 holiday weekdays, plus the 10-11 makeup Saturday."""
        calendar = HolidayCalendar.default()
        assert workdays_between(date(2025, 10, 1), date(2025, 10, 31), calendar) == 18

    def test_single_day_and_empty_range(self):
        calendar = HolidayCalendar()
        assert workdays_between(date(2025, 10, 31), date(2025, 10, 31), calendar) == 1
        assert workdays_between(date(2025, 10, 31), date(2025, 10, 30), calendar) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
