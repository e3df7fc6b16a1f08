"""
Unit tests for DailyRecordBuilder, the clock/date parsers and LeaveLabelParser.
"""

import pytest
from datetime import date, time
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from config.config_manager import WorkHoursSettings
from domain.daily_record_builder import DailyRecordBuilder, parse_clock_time, parse_date
from domain.entities import ClockTime, LeaveType, RawDayInput
from domain.holiday_calendar import HolidayCalendar
from domain.leave_parser import LeaveLabelParser
from domain.work_hours_calculator import WorkHoursCalculator


def make_builder(**settings) -> DailyRecordBuilder:
    calculator = WorkHoursCalculator(WorkHoursSettings(**settings))
    return DailyRecordBuilder(HolidayCalendar(), calculator)


class TestParseClockTime:
    """Tests for parse_clock_time."""

    def test_plain_time(self):
        assert parse_clock_time("09:00") == ClockTime(time(9, 0))
        assert parse_clock_time("9:05") == ClockTime(time(9, 5))

    def test_seconds_are_ignored(self):
        assert parse_clock_time("18:30:45") == ClockTime(time(18, 30))

    def test_next_day_markers(self):
        expected = ClockTime(time(1, 30), next_day=True)
        assert parse_clock_time("01:30+1") == expected
        assert parse_clock_time("1:30(+1)") == expected
        assert parse_clock_time("次日1:30") == expected

    def test_empty_is_none(self):
        assert parse_clock_time("") is None
        assert parse_clock_time("   ") is None

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_clock_time("早上九點")
        with pytest.raises(ValueError):
            parse_clock_time("25:00")


class TestParseDate:
    """Tests for parse_date."""

    def test_formats(self):
        assert parse_date("2025-10-13") == date(2025, 10, 13)
        assert parse_date("2025/10/13") == date(2025, 10, 13)

    def test_invalid(self):
        assert parse_date("") is None
        assert parse_date("2025-13-01") is None
        assert parse_date("十月十三日") is None


class TestLeaveLabelParser:
    """Tests for LeaveLabelParser."""

    parser = LeaveLabelParser()

    def test_descriptions(self):
        assert self.parser.parse("上午請假") == LeaveType.MORNING
        assert self.parser.parse("下午請假") == LeaveType.AFTERNOON
        assert self.parser.parse("全天請假") == LeaveType.FULL_DAY

    def test_labels_contained_in_text(self):
        assert self.parser.parse("事假(下午)") == LeaveType.AFTERNOON
        assert self.parser.parse("Morning") == LeaveType.MORNING
        assert self.parser.parse("FULL_DAY") == LeaveType.FULL_DAY

    def test_unknown_and_empty(self):
        assert self.parser.parse("") == LeaveType.NONE
        assert self.parser.parse("正常") == LeaveType.NONE
        assert self.parser.parse("出差") == LeaveType.NONE

    def test_custom_text_alone_is_not_custom(self):
        assert self.parser.parse("自訂時段") == LeaveType.NONE
        assert self.parser.mentions_custom("自訂時段")
        assert not self.parser.mentions_custom("上午")

    def test_from_config(self):
        parser = LeaveLabelParser.from_config({"病假": "FULL_DAY", "調休": "BOGUS", "自訂": "CUSTOM"})
        assert parser.parse("病假") == LeaveType.FULL_DAY
        assert parser.parse("調休") == LeaveType.NONE
        assert parser.mentions_custom("自訂")


class TestBuildRecord:
    """Tests for building single records."""

    def test_normal_day(self):
        record = make_builder().build(RawDayInput("2025-10-13", "09:00", "18:00", remark=" 加班 "))

        assert record.date == date(2025, 10, 13)
        assert record.weekday_name == "星期一"
        assert record.is_workday
        assert not record.is_holiday
        assert record.worked_hours == pytest.approx(8.0)
        assert record.leave_type == LeaveType.NONE
        assert record.leave_hours == 0.0
        assert record.remark == "加班"
        assert record.anomalies == ()

    def test_unparseable_date_is_dropped(self):
        assert make_builder().build(RawDayInput("not a date", "09:00", "18:00")) is None

    def test_unparseable_clock_in_degrades_to_absent(self):
        record = make_builder().build(RawDayInput("2025-10-13", "九點", "18:00"))

        assert record is not None
        assert record.clock_in is None
        assert record.clock_out == ClockTime(time(18, 0))
        assert record.worked_hours == 0.0
        assert record.has_clock_event
        assert len(record.anomalies) == 1

    def test_full_day_leave(self):
        record = make_builder().build(RawDayInput("2025-10-15", leave_text="全天請假"))

        assert record.leave_type == LeaveType.FULL_DAY
        assert record.leave_hours == 8.0
        assert record.is_leave
        assert record.worked_hours == 0.0

    def test_custom_leave_from_times(self):
        record = make_builder().build(RawDayInput(
            "2025-10-13", "09:00", "14:00",
            leave_text="自訂時段", leave_start_text="14:00", leave_end_text="16:30"
        ))

        assert record.leave_type == LeaveType.CUSTOM
        assert record.leave_start == time(14, 0)
        assert record.leave_end == time(16, 30)
        assert record.leave_hours == pytest.approx(2.5)
        assert record.worked_hours == pytest.approx(4.0)

    def test_custom_leave_reversed_range(self):
        record = make_builder().build(RawDayInput(
            "2025-10-13", leave_start_text="16:00", leave_end_text="14:00"
        ))

        assert record.leave_type == LeaveType.CUSTOM
        assert record.leave_hours == 0.0
        assert not record.is_leave
        assert "請假結束時間早於或等於開始時間" in record.anomalies

    def test_custom_leave_next_day_marker(self):
        record = make_builder().build(RawDayInput(
            "2025-10-13", leave_start_text="22:00", leave_end_text="1:00+1"
        ))

        assert record.leave_type == LeaveType.NONE
        assert record.leave_hours == 0.0
        assert record.anomalies == ("請假時段不支援跨日標記",)

    def test_custom_leave_missing_end(self):
        record = make_builder().build(RawDayInput("2025-10-13", leave_text="自訂", leave_start_text="14:00"))

        assert record.leave_type == LeaveType.NONE
        assert record.leave_hours == 0.0
        assert "自訂請假時段不完整" in record.anomalies

    def test_label_wins_over_times(self):
        record = make_builder().build(RawDayInput(
            "2025-10-13", leave_text="上午", leave_start_text="09:00", leave_end_text="10:00"
        ))

        assert record.leave_type == LeaveType.MORNING
        assert record.leave_hours == 4.0
        assert record.leave_start is None

    def test_clock_out_before_clock_in(self):
        record = make_builder().build(RawDayInput("2025-10-13", "18:00", "09:00"))

        assert record.worked_hours == 0.0
        assert "下班時間早於上班時間" in record.anomalies

    def test_next_day_clock_out(self):
        record = make_builder().build(RawDayInput("2025-10-13", "09:00", "01:00+1"))
        assert record.worked_hours == pytest.approx(14.5)

    def test_holiday_and_makeup_flags(self):
        calendar = HolidayCalendar([date(2025, 10, 1)], [date(2025, 10, 11)])
        builder = DailyRecordBuilder(calendar)

        holiday = builder.build(RawDayInput("2025-10-01"))
        makeup = builder.build(RawDayInput("2025-10-11"))

        assert holiday.is_holiday and not holiday.is_workday
        assert makeup.is_makeup_workday and makeup.is_workday

    def test_to_dict(self):
        record = make_builder().build(RawDayInput("2025-10-13", "09:00", "01:00+1"))
        data = record.to_dict()

        assert data["date"] == "2025-10-13"
        assert data["clock_in"] == "9:00"
        assert data["clock_out"] == "1:00+1"
        assert data["leave_type"] == "NONE"
        assert data["anomalies"] == []


class TestImplicitAbsence:
    """Tests for treating punch-less workdays as full-day leave."""

    reference = date(2025, 10, 20)

    def test_disabled_by_default(self):
        record = make_builder().build(RawDayInput("2025-10-14"), self.reference)

        assert not record.implicit_absence
        assert record.leave_hours == 0.0

    def test_past_workday_without_punches(self):
        record = make_builder(implicit_absence_as_leave=True).build(RawDayInput("2025-10-14"), self.reference)

        assert record.implicit_absence
        assert record.leave_hours == 8.0
        assert record.leave_type == LeaveType.NONE

    def test_explicit_leave_is_not_doubled(self):
        builder = make_builder(implicit_absence_as_leave=True)
        record = builder.build(RawDayInput("2025-10-14", leave_text="全天請假"), self.reference)

        assert not record.implicit_absence
        assert record.leave_hours == 8.0

    def test_custom_leave_suppresses_absence(self):
        builder = make_builder(implicit_absence_as_leave=True)
        record = builder.build(
            RawDayInput("2025-10-14", leave_start_text="10:00", leave_end_text="11:00"),
            self.reference
        )

        assert not record.implicit_absence
        assert record.leave_hours == pytest.approx(1.0)

    def test_weekend_and_future_days_are_not_absent(self):
        builder = make_builder(implicit_absence_as_leave=True)

        weekend = builder.build(RawDayInput("2025-10-18"), self.reference)
        today = builder.build(RawDayInput("2025-10-20"), self.reference)

        assert not weekend.implicit_absence
        assert not today.implicit_absence


class TestBuildMonth:
    """Tests for build_month."""

    def test_skips_bad_dates_and_sorts(self):
        rows = [
            RawDayInput("2025-10-14", "09:00", "18:00"),
            RawDayInput("garbage", "09:00", "18:00"),
            RawDayInput("2025-10-13", "09:00", "18:00"),
        ]
        records = make_builder().build_month(rows)

        assert [r.date for r in records] == [date(2025, 10, 13), date(2025, 10, 14)]

    def test_first_duplicate_wins(self):
        rows = [
            RawDayInput("2025-10-13", "09:00", "18:00"),
            RawDayInput("2025/10/13", "10:00", "12:00"),
        ]
        records = make_builder().build_month(rows)

        assert len(records) == 1
        assert records[0].clock_in == ClockTime(time(9, 0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
