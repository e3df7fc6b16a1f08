"""
Configuration Manager Module

Handles loading, saving, and managing the work-hours configuration.
Provides bi-directional mapping between the dataclasses and JSON persistence.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from infrastructure.logger import get_logger

logger = get_logger("ConfigManager")


def default_leave_labels() -> Dict[str, str]:
    """Default free-text label -> leave type name table."""
    return {
        "正常": "NONE",
        "上午": "MORNING",
        "下午": "AFTERNOON",
        "全天": "FULL_DAY",
        "自訂": "CUSTOM",
        "自定义": "CUSTOM",
    }


@dataclass
class WorkHoursSettings:
    """Tunable parameters of the work-hours calculation."""
    expected_total_hours: float = 220.0
    standard_start_hour: int = 9
    standard_end_hour: int = 18

    # 用餐扣除
    lunch_break_hours: float = 1.0
    dinner_break_hours: float = 0.5
    lunch_threshold_hour: int = 12
    dinner_break_threshold_hour: int = 19

    # 遲到與晚間打卡
    late_cutoff_hour: int = 12
    late_night_hour: int = 21

    # 請假時數
    morning_leave_hours: float = 4.0
    afternoon_leave_hours: float = 4.0
    full_day_leave_hours: float = 8.0

    # 工作日未打卡且未請假時視為全天請假
    implicit_absence_as_leave: bool = False


@dataclass
class Paths:
    """File paths configuration."""
    data_directory: str = "data"
    file_name_pattern: str = "attendance_{year_month}.xlsx"
    custom_font_path: str = ""


@dataclass
class Holidays:
    """Holiday adjustments applied on top of the built-in yearly schedule."""
    custom_dates: List[str] = field(default_factory=list)
    removed_dates: List[str] = field(default_factory=list)
    makeup_workdays: List[str] = field(default_factory=list)


@dataclass
class UIPrefs:
    """UI preferences."""
    theme_name: str = "Dark Mode"


@dataclass
class OutputSettings:
    """Output settings for exported reports."""
    output_dir: str = ""
    pdf_filename_pattern: str = "工時統計報告_{year}_{month}.pdf"


@dataclass
class AppConfig:
    """Main application configuration container."""
    work_hours: WorkHoursSettings = field(default_factory=WorkHoursSettings)
    paths: Paths = field(default_factory=Paths)
    holidays: Holidays = field(default_factory=Holidays)
    leave_labels: Dict[str, str] = field(default_factory=default_leave_labels)
    ui_prefs: UIPrefs = field(default_factory=UIPrefs)
    output_settings: OutputSettings = field(default_factory=OutputSettings)


class ConfigManager:
    """
    Manages application configuration with JSON persistence.

    Responsibilities:
    - Load configuration from JSON file
    - Save configuration to JSON file
    - Provide default configuration
    - Convert between dataclass and dict representations
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config: AppConfig = AppConfig()

    @property
    def config(self) -> AppConfig:
        """Get current configuration."""
        return self._config

    def load(self) -> AppConfig:
        """Load configuration from JSON file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                self._config = self._dict_to_config(data)
            except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"設定檔讀取失敗，改用預設值: {e}")
                self._config = AppConfig()
        else:
            self._config = AppConfig()
        return self._config

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = self._config_to_dict(self._config)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"設定已儲存: {self.config_path}")

    def _config_to_dict(self, config: AppConfig) -> dict:
        """Convert AppConfig dataclass to dictionary."""
        wh = config.work_hours
        return {
            "work_hours": {
                "expected_total_hours": wh.expected_total_hours,
                "standard_start_hour": wh.standard_start_hour,
                "standard_end_hour": wh.standard_end_hour,
                "lunch_break_hours": wh.lunch_break_hours,
                "dinner_break_hours": wh.dinner_break_hours,
                "lunch_threshold_hour": wh.lunch_threshold_hour,
                "dinner_break_threshold_hour": wh.dinner_break_threshold_hour,
                "late_cutoff_hour": wh.late_cutoff_hour,
                "late_night_hour": wh.late_night_hour,
                "morning_leave_hours": wh.morning_leave_hours,
                "afternoon_leave_hours": wh.afternoon_leave_hours,
                "full_day_leave_hours": wh.full_day_leave_hours,
                "implicit_absence_as_leave": wh.implicit_absence_as_leave
            },
            "paths": {
                "data_directory": config.paths.data_directory,
                "file_name_pattern": config.paths.file_name_pattern,
                "custom_font_path": config.paths.custom_font_path
            },
            "holidays": {
                "custom_dates": list(config.holidays.custom_dates),
                "removed_dates": list(config.holidays.removed_dates),
                "makeup_workdays": list(config.holidays.makeup_workdays)
            },
            "leave_labels": dict(config.leave_labels),
            "ui_prefs": {
                "theme_name": config.ui_prefs.theme_name
            },
            "output_settings": {
                "output_dir": config.output_settings.output_dir,
                "pdf_filename_pattern": config.output_settings.pdf_filename_pattern
            }
        }

    def _dict_to_config(self, data: dict) -> AppConfig:
        """Convert dictionary to AppConfig dataclass."""
        wh_data = data.get("work_hours", {})
        paths_data = data.get("paths", {})
        holidays_data = data.get("holidays", {})
        ui_prefs_data = data.get("ui_prefs", {})
        output_data = data.get("output_settings", {})
        defaults = WorkHoursSettings()

        work_hours = WorkHoursSettings(
            expected_total_hours=float(wh_data.get("expected_total_hours", defaults.expected_total_hours)),
            standard_start_hour=int(wh_data.get("standard_start_hour", defaults.standard_start_hour)),
            standard_end_hour=int(wh_data.get("standard_end_hour", defaults.standard_end_hour)),
            lunch_break_hours=float(wh_data.get("lunch_break_hours", defaults.lunch_break_hours)),
            dinner_break_hours=float(wh_data.get("dinner_break_hours", defaults.dinner_break_hours)),
            lunch_threshold_hour=int(wh_data.get("lunch_threshold_hour", defaults.lunch_threshold_hour)),
            dinner_break_threshold_hour=int(
                wh_data.get("dinner_break_threshold_hour", defaults.dinner_break_threshold_hour)
            ),
            late_cutoff_hour=int(wh_data.get("late_cutoff_hour", defaults.late_cutoff_hour)),
            late_night_hour=int(wh_data.get("late_night_hour", defaults.late_night_hour)),
            morning_leave_hours=float(wh_data.get("morning_leave_hours", defaults.morning_leave_hours)),
            afternoon_leave_hours=float(wh_data.get("afternoon_leave_hours", defaults.afternoon_leave_hours)),
            full_day_leave_hours=float(wh_data.get("full_day_leave_hours", defaults.full_day_leave_hours)),
            implicit_absence_as_leave=bool(
                wh_data.get("implicit_absence_as_leave", defaults.implicit_absence_as_leave)
            )
        )

        paths = Paths(
            data_directory=paths_data.get("data_directory", "data"),
            file_name_pattern=paths_data.get("file_name_pattern", "attendance_{year_month}.xlsx"),
            custom_font_path=paths_data.get("custom_font_path", "")
        )

        holidays = Holidays(
            custom_dates=list(holidays_data.get("custom_dates", [])),
            removed_dates=list(holidays_data.get("removed_dates", [])),
            makeup_workdays=list(holidays_data.get("makeup_workdays", []))
        )

        # 未設定時沿用預設標籤表
        leave_labels = data.get("leave_labels") or default_leave_labels()

        ui_prefs = UIPrefs(
            theme_name=ui_prefs_data.get("theme_name", "Dark Mode")
        )

        output_settings = OutputSettings(
            output_dir=output_data.get("output_dir", ""),
            pdf_filename_pattern=output_data.get("pdf_filename_pattern", "工時統計報告_{year}_{month}.pdf")
        )

        return AppConfig(
            work_hours=work_hours,
            paths=paths,
            holidays=holidays,
            leave_labels=dict(leave_labels),
            ui_prefs=ui_prefs,
            output_settings=output_settings
        )
