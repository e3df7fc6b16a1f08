"""
Report Formatter Module

Renders MonthStatistics as the plain-text work-hours report.
"""

from typing import List, Optional

from config.config_manager import WorkHoursSettings
from domain.entities import DailyRecord, MonthStatistics

SEPARATOR = "=" * 60
NOT_PUNCHED = "未打卡"


class ReportFormatter:
    """
    Formats a month's statistics into report lines.

    Sections:
    - 【出勤統計】 attendance summary
    - 【目標追蹤】 target tracking
    - 【剩餘規劃】 remaining-day planning
    - 【請假統計】 leave detail (only with leave days)
    - 【遲到統計】 lateness detail (only with late days)
    """

    def __init__(self, settings: Optional[WorkHoursSettings] = None):
        self.settings = settings or WorkHoursSettings()

    def format(self, stats: MonthStatistics) -> str:
        """Full report as a single string."""
        return "\n".join(self.format_lines(stats)) + "\n"

    def format_lines(self, stats: MonthStatistics) -> List[str]:
        lines = [
            SEPARATOR,
            f"           {stats.year_month} 工時統計報告",
            SEPARATOR,
            "",
            "【出勤統計】",
            f"  當月總工時：{stats.total_worked_hours:.2f} 小時",
            f"  出勤天數：{stats.attendance_days} 天",
            f"  實際出勤工作日：{stats.actual_attendance_days} 天",
            f"  出勤日平均工時：{stats.average_worked_hours_per_attendance_day:.2f} 小時/天",
            f"  21 點後下班打卡：{stats.late_night_checkin_count} 次",
            "",
            "【目標追蹤】",
            f"  期望總工時：{stats.expected_total_hours:.2f} 小時",
            f"  距離目標還需：{stats.remaining_hours_to_target:.2f} 小時",
            "",
            "【剩餘規劃】",
            f"  剩餘工作日：{stats.remaining_workdays} 天",
        ]

        if stats.remaining_workdays > 0:
            lines.append(
                f"  需要日均工時：{stats.required_average_hours_for_remaining_days:.2f} 小時/天"
            )
        else:
            lines.append("  本月已結束")
        lines.append("")

        if stats.leave_days > 0:
            lines.extend(self._leave_section(stats))

        if stats.late_days > 0:
            lines.extend(self._late_section(stats))

        lines.append(SEPARATOR)
        return lines

    def _leave_section(self, stats: MonthStatistics) -> List[str]:
        lines = [
            "【請假統計】",
            f"  請假天數：{stats.leave_days} 天",
            f"  請假總時長：{stats.total_leave_hours:.2f} 小時",
            "",
            "  請假明細：",
        ]
        for record in stats.leave_records:
            lines.append(f"    - {self._leave_line(record)}")
        lines.append("")
        return lines

    def _leave_line(self, record: DailyRecord) -> str:
        label = "未打卡缺勤" if record.implicit_absence else record.leave_type.description
        period = ""
        if record.leave_start is not None and record.leave_end is not None:
            period = f" [{record.leave_start:%H:%M}~{record.leave_end:%H:%M}]"

        punches = ""
        if record.has_clock_event:
            start = str(record.clock_in) if record.clock_in else NOT_PUNCHED
            end = str(record.clock_out) if record.clock_out else NOT_PUNCHED
            punches = f" (打卡: {start}~{end})"

        return f"{record.date.isoformat()} {label}{period}{punches}: {record.leave_hours:.2f} 小時"

    def _late_section(self, stats: MonthStatistics) -> List[str]:
        start_hour = self.settings.standard_start_hour
        rate = stats.late_days * 100.0 / stats.actual_attendance_days if stats.actual_attendance_days > 0 else 0.0
        lines = [
            "【遲到統計】",
            f"  遲到天數：{stats.late_days} 天",
            f"  遲到率：{rate:.1f}%",
            f"  標準上班時間：{start_hour:02d}:00",
            "",
            "  遲到明細：",
        ]
        for record in stats.late_records:
            late_minutes = record.clock_in.minutes - start_hour * 60
            end = str(record.clock_out) if record.clock_out else NOT_PUNCHED
            lines.append(
                f"    - {record.date.isoformat()} {record.weekday_name}：上班 {record.clock_in} "
                f"(遲到 {late_minutes} 分鐘), 下班 {end}, 工時 {record.worked_hours:.2f}h"
            )
        lines.append("")
        return lines
