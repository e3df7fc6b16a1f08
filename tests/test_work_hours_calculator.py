"""
Unit tests for WorkHoursCalculator meal deductions and leave hours.
"""

import pytest
from datetime import time
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.config_manager import WorkHoursSettings
from domain.entities import ClockTime, LeaveType
from domain.work_hours_calculator import WorkHoursCalculator


def ct(hour: int, minute: int = 0, next_day: bool = False) -> ClockTime:
    return ClockTime(time(hour, minute), next_day=next_day)


class TestClockTime:
    """Tests for ClockTime."""

    def test_minutes(self):
        assert ct(9, 30).minutes == 570
        assert ct(1, 30, next_day=True).minutes == 24 * 60 + 90

    def test_str(self):
        assert str(ct(9, 5)) == "9:05"
        assert str(ct(1, 30, next_day=True)) == "1:30+1"


class TestWorkedHours:
    """Tests for worked_hours."""

    calc = WorkHoursCalculator()

    def test_morning_only_no_deduction(self):
        assert self.calc.worked_hours(ct(9), ct(11, 30)) == pytest.approx(2.5)

    def test_leaving_after_noon_deducts_lunch(self):
        assert self.calc.worked_hours(ct(9), ct(12, 30)) == pytest.approx(2.5)

    def test_standard_day(self):
        assert self.calc.worked_hours(ct(9), ct(18)) == pytest.approx(8.0)

    def test_evening_deducts_lunch_and_dinner(self):
        assert self.calc.worked_hours(ct(9), ct(20)) == pytest.approx(9.5)

    def test_dinner_threshold_is_inclusive(self):
        assert self.calc.worked_hours(ct(9), ct(19)) == pytest.approx(8.5)
        assert self.calc.worked_hours(ct(9), ct(18, 59)) == pytest.approx(8.0 + 59 / 60)

    def test_afternoon_leave_no_deduction(self):
        assert self.calc.worked_hours(ct(9), ct(20), LeaveType.AFTERNOON) == pytest.approx(11.0)

    def test_full_day_leave_no_deduction(self):
        assert self.calc.worked_hours(ct(9), ct(18), LeaveType.FULL_DAY) == pytest.approx(9.0)

    def test_morning_leave_dinner_only(self):
        assert self.calc.worked_hours(ct(13), ct(18), LeaveType.MORNING) == pytest.approx(5.0)
        assert self.calc.worked_hours(ct(13), ct(20), LeaveType.MORNING) == pytest.approx(6.5)

    def test_custom_leave_deducts_like_normal_day(self):
        assert self.calc.worked_hours(ct(9), ct(20), LeaveType.CUSTOM) == pytest.approx(9.5)

    def test_next_day_clock_out(self):
        """9:00 to 1:30 next day is 16.5h raw, minus lunch and dinner."""
        assert self.calc.worked_hours(ct(9), ct(1, 30, next_day=True)) == pytest.approx(15.0)

    def test_zero_span(self):
        assert self.calc.worked_hours(ct(9), ct(9)) == 0.0

    def test_never_negative(self):
        """A 12:00-12:30 stint minus the lunch deduction floors at zero."""
        assert self.calc.worked_hours(ct(12), ct(12, 30)) == 0.0

    def test_custom_settings(self):
        settings = WorkHoursSettings(lunch_break_hours=0.5, dinner_break_threshold_hour=20)
        calc = WorkHoursCalculator(settings)
        assert calc.worked_hours(ct(9), ct(19, 30)) == pytest.approx(10.0)


class TestDegenerate:
    """Tests for span and degenerate detection."""

    def test_degenerate_range(self):
        assert WorkHoursCalculator.is_degenerate(ct(18), ct(9))
        assert not WorkHoursCalculator.is_degenerate(ct(18), ct(1, next_day=True))

    def test_span_hours(self):
        assert WorkHoursCalculator.span_hours(ct(9), ct(18)) == pytest.approx(9.0)


class TestLeaveHours:
    """Tests for leave_hours."""

    calc = WorkHoursCalculator()

    def test_fixed_leave_types(self):
        assert self.calc.leave_hours(LeaveType.NONE) == 0.0
        assert self.calc.leave_hours(LeaveType.MORNING) == 4.0
        assert self.calc.leave_hours(LeaveType.AFTERNOON) == 4.0
        assert self.calc.leave_hours(LeaveType.FULL_DAY) == 8.0

    def test_custom_range(self):
        hours = self.calc.leave_hours(LeaveType.CUSTOM, time(14, 0), time(16, 30))
        assert hours == pytest.approx(2.5)

    def test_custom_reversed_range_is_zero(self):
        assert self.calc.leave_hours(LeaveType.CUSTOM, time(16, 0), time(14, 0)) == 0.0

    def test_custom_without_range_is_zero(self):
        assert self.calc.leave_hours(LeaveType.CUSTOM) == 0.0

    def test_configured_hours(self):
        calc = WorkHoursCalculator(WorkHoursSettings(full_day_leave_hours=7.5))
        assert calc.leave_hours(LeaveType.FULL_DAY) == 7.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
