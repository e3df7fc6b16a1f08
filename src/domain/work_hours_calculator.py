"""
Work Hours Calculator Module

Turns a day's punches and leave type into worked hours and leave hours.

Meal deduction rules (clock-out compared against the noon and dinner
thresholds):

    leave type       out < noon   noon <= out < dinner   out >= dinner
    FULL_DAY         0            0                      0
    AFTERNOON        0            0                      0
    MORNING          0            0                      dinner
    NONE / CUSTOM    0            lunch                  lunch + dinner

A meal is only deducted when the employee was present through it; leave
covering the lunch or dinner window waives that deduction.
"""

from datetime import time
from typing import Optional

from .entities import ClockTime, LeaveType
from config.config_manager import WorkHoursSettings
from infrastructure.logger import get_logger

logger = get_logger("WorkHoursCalculator")


class WorkHoursCalculator:
    """Applies meal-deduction and leave-hour rules for one day."""

    def __init__(self, settings: Optional[WorkHoursSettings] = None):
        self.settings = settings or WorkHoursSettings()

    @property
    def noon_minutes(self) -> int:
        return self.settings.lunch_threshold_hour * 60

    @property
    def dinner_threshold_minutes(self) -> int:
        return self.settings.dinner_break_threshold_hour * 60

    @staticmethod
    def span_hours(clock_in: ClockTime, clock_out: ClockTime) -> float:
        """Raw clocked span in hours; negative for a degenerate range."""
        return (clock_out.minutes - clock_in.minutes) / 60.0

    @staticmethod
    def is_degenerate(clock_in: ClockTime, clock_out: ClockTime) -> bool:
        """Clock-out precedes clock-in (and no next-day marker made up for it)."""
        return clock_out.minutes < clock_in.minutes

    def meal_deduction(self, clock_out: ClockTime, leave_type: LeaveType) -> float:
        """Hours to subtract for lunch/dinner given the clock-out and leave type."""
        lunch = self.settings.lunch_break_hours
        dinner = self.settings.dinner_break_hours
        out = clock_out.minutes

        if leave_type in (LeaveType.FULL_DAY, LeaveType.AFTERNOON):
            return 0.0

        if leave_type == LeaveType.MORNING:
            return dinner if out >= self.dinner_threshold_minutes else 0.0

        # NONE / CUSTOM
        if out < self.noon_minutes:
            return 0.0
        if out < self.dinner_threshold_minutes:
            return lunch
        return lunch + dinner

    def worked_hours(
        self,
        clock_in: ClockTime,
        clock_out: ClockTime,
        leave_type: LeaveType = LeaveType.NONE
    ) -> float:
        """
        Worked hours for one day.

        Args:
            clock_in: Check-in punch
            clock_out: Check-out punch, possibly flagged next-day
            leave_type: Leave classification of the day

        Returns:
            max(0, raw span - meal deduction), unrounded
        """
        raw = self.span_hours(clock_in, clock_out)
        deduction = self.meal_deduction(clock_out, leave_type)
        worked = max(0.0, raw - deduction)

        logger.debug(
            f"  {clock_in} ~ {clock_out} ({leave_type.name}): "
            f"原始時長 {raw:.2f}h, 用餐扣除 {deduction:.2f}h, 工時 {worked:.2f}h"
        )
        return worked

    def leave_hours(
        self,
        leave_type: LeaveType,
        leave_start: Optional[time] = None,
        leave_end: Optional[time] = None
    ) -> float:
        """
        Leave hours for a leave type.

        CUSTOM uses the explicit range; an end before the start yields 0.
        """
        if leave_type == LeaveType.MORNING:
            return self.settings.morning_leave_hours
        if leave_type == LeaveType.AFTERNOON:
            return self.settings.afternoon_leave_hours
        if leave_type == LeaveType.FULL_DAY:
            return self.settings.full_day_leave_hours
        if leave_type == LeaveType.CUSTOM:
            if leave_start is None or leave_end is None:
                return 0.0
            minutes = (leave_end.hour * 60 + leave_end.minute) - (leave_start.hour * 60 + leave_start.minute)
            return max(0, minutes) / 60.0
        return 0.0
