"""
Settings Dialog Module

PyQt6 dialog for work-hours settings:
- Target hours, standard working hours and lateness cutoff
- Meal-break deductions and their thresholds
- Leave-hour values and implicit-absence handling
- Data directory and PDF output directory
"""

from pathlib import Path

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QGridLayout,
    QGroupBox, QLabel, QLineEdit, QCheckBox, QSpinBox, QDoubleSpinBox,
    QPushButton, QFileDialog, QDialogButtonBox
)

from config.config_manager import AppConfig
from ui.styles import ThemeManager


class SettingsDialog(QDialog):
    """Settings dialog editing the work-hours part of AppConfig in place."""

    def __init__(self, config: AppConfig, parent=None):
        super().__init__(parent)
        self.config = config
        self._init_ui()
        self._load_config_to_ui()
        self._connect_signals()

    def _init_ui(self):
        """Initialize the dialog UI."""
        self.setWindowTitle("設定")
        self.resize(640, 620)
        self.setModal(True)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(15)

        layout.addWidget(self._create_hours_group())
        layout.addWidget(self._create_meal_group())
        layout.addWidget(self._create_leave_group())
        layout.addWidget(self._create_paths_group())

        button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok |
            QDialogButtonBox.StandardButton.Cancel
        )
        button_box.accepted.connect(self._on_accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

        self._apply_styles()

    def _create_hours_group(self) -> QGroupBox:
        group = QGroupBox("工時目標")
        layout = QGridLayout(group)
        layout.setContentsMargins(15, 25, 15, 15)

        layout.addWidget(QLabel("期望總工時 (小時)"), 0, 0)
        self.spin_expected = self._double_spin(0, 744, 1)
        layout.addWidget(self.spin_expected, 0, 1)

        layout.addWidget(QLabel("標準上班時間 (時)"), 1, 0)
        self.spin_start_hour = self._hour_spin()
        layout.addWidget(self.spin_start_hour, 1, 1)

        layout.addWidget(QLabel("標準下班時間 (時)"), 2, 0)
        self.spin_end_hour = self._hour_spin()
        layout.addWidget(self.spin_end_hour, 2, 1)

        layout.addWidget(QLabel("遲到判定截止 (時)"), 3, 0)
        self.spin_late_cutoff = self._hour_spin()
        layout.addWidget(self.spin_late_cutoff, 3, 1)

        return group

    def _create_meal_group(self) -> QGroupBox:
        group = QGroupBox("用餐扣除")
        layout = QGridLayout(group)
        layout.setContentsMargins(15, 25, 15, 15)

        layout.addWidget(QLabel("午休扣除 (小時)"), 0, 0)
        self.spin_lunch = self._double_spin(0, 4, 0.25)
        layout.addWidget(self.spin_lunch, 0, 1)

        layout.addWidget(QLabel("午休判定 (時)"), 0, 2)
        self.spin_lunch_threshold = self._hour_spin()
        layout.addWidget(self.spin_lunch_threshold, 0, 3)

        layout.addWidget(QLabel("晚餐扣除 (小時)"), 1, 0)
        self.spin_dinner = self._double_spin(0, 4, 0.25)
        layout.addWidget(self.spin_dinner, 1, 1)

        layout.addWidget(QLabel("晚餐判定 (時)"), 1, 2)
        self.spin_dinner_threshold = self._hour_spin()
        layout.addWidget(self.spin_dinner_threshold, 1, 3)

        return group

    def _create_leave_group(self) -> QGroupBox:
        group = QGroupBox("請假時數")
        layout = QGridLayout(group)
        layout.setContentsMargins(15, 25, 15, 15)

        layout.addWidget(QLabel("上午請假"), 0, 0)
        self.spin_morning_leave = self._double_spin(0, 12, 0.5)
        layout.addWidget(self.spin_morning_leave, 0, 1)

        layout.addWidget(QLabel("下午請假"), 0, 2)
        self.spin_afternoon_leave = self._double_spin(0, 12, 0.5)
        layout.addWidget(self.spin_afternoon_leave, 0, 3)

        layout.addWidget(QLabel("全天請假"), 1, 0)
        self.spin_full_day_leave = self._double_spin(0, 24, 0.5)
        layout.addWidget(self.spin_full_day_leave, 1, 1)

        self.chk_implicit_absence = QCheckBox("工作日未打卡且未請假時，視為全天請假")
        layout.addWidget(self.chk_implicit_absence, 2, 0, 1, 4)

        return group

    def _create_paths_group(self) -> QGroupBox:
        group = QGroupBox("路徑設定")
        layout = QGridLayout(group)
        layout.setContentsMargins(15, 25, 15, 15)

        layout.addWidget(QLabel("考勤資料目錄:"), 0, 0)
        self.txt_data_dir = QLineEdit()
        layout.addWidget(self.txt_data_dir, 0, 1)
        self.btn_browse_data = QPushButton("瀏覽")
        layout.addWidget(self.btn_browse_data, 0, 2)

        layout.addWidget(QLabel("PDF 輸出目錄:"), 1, 0)
        self.txt_pdf_path = QLineEdit()
        self.txt_pdf_path.setPlaceholderText("留空則與考勤資料同目錄")
        layout.addWidget(self.txt_pdf_path, 1, 1)
        self.btn_browse_pdf = QPushButton("瀏覽")
        layout.addWidget(self.btn_browse_pdf, 1, 2)

        return group

    @staticmethod
    def _hour_spin() -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(0, 23)
        return spin

    @staticmethod
    def _double_spin(minimum: float, maximum: float, step: float) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(minimum, maximum)
        spin.setSingleStep(step)
        spin.setDecimals(2)
        return spin

    def _load_config_to_ui(self):
        """Load configuration values into UI controls."""
        wh = self.config.work_hours

        self.spin_expected.setValue(wh.expected_total_hours)
        self.spin_start_hour.setValue(wh.standard_start_hour)
        self.spin_end_hour.setValue(wh.standard_end_hour)
        self.spin_late_cutoff.setValue(wh.late_cutoff_hour)

        self.spin_lunch.setValue(wh.lunch_break_hours)
        self.spin_lunch_threshold.setValue(wh.lunch_threshold_hour)
        self.spin_dinner.setValue(wh.dinner_break_hours)
        self.spin_dinner_threshold.setValue(wh.dinner_break_threshold_hour)

        self.spin_morning_leave.setValue(wh.morning_leave_hours)
        self.spin_afternoon_leave.setValue(wh.afternoon_leave_hours)
        self.spin_full_day_leave.setValue(wh.full_day_leave_hours)
        self.chk_implicit_absence.setChecked(wh.implicit_absence_as_leave)

        self.txt_data_dir.setText(self.config.paths.data_directory)
        self.txt_pdf_path.setText(self.config.output_settings.output_dir)

    def _save_ui_to_config(self):
        """Save UI values to configuration."""
        wh = self.config.work_hours

        wh.expected_total_hours = self.spin_expected.value()
        wh.standard_start_hour = self.spin_start_hour.value()
        wh.standard_end_hour = self.spin_end_hour.value()
        wh.late_cutoff_hour = self.spin_late_cutoff.value()

        wh.lunch_break_hours = self.spin_lunch.value()
        wh.lunch_threshold_hour = self.spin_lunch_threshold.value()
        wh.dinner_break_hours = self.spin_dinner.value()
        wh.dinner_break_threshold_hour = self.spin_dinner_threshold.value()

        wh.morning_leave_hours = self.spin_morning_leave.value()
        wh.afternoon_leave_hours = self.spin_afternoon_leave.value()
        wh.full_day_leave_hours = self.spin_full_day_leave.value()
        wh.implicit_absence_as_leave = self.chk_implicit_absence.isChecked()

        self.config.paths.data_directory = self.txt_data_dir.text().strip() or "data"
        self.config.output_settings.output_dir = self.txt_pdf_path.text().strip()

    def _connect_signals(self):
        """Connect UI signals."""
        self.btn_browse_data.clicked.connect(
            lambda: self._browse_directory(self.txt_data_dir, "選擇考勤資料目錄")
        )
        self.btn_browse_pdf.clicked.connect(
            lambda: self._browse_directory(self.txt_pdf_path, "選擇 PDF 輸出目錄")
        )

    def _browse_directory(self, target: QLineEdit, caption: str):
        current_path = target.text()
        start_dir = current_path if current_path else str(Path.cwd())
        dir_path = QFileDialog.getExistingDirectory(self, caption, start_dir)
        if dir_path:
            target.setText(dir_path)

    def _on_accept(self):
        """Handle OK button click."""
        self._save_ui_to_config()
        self.accept()

    def _apply_styles(self):
        """Apply dialog styling from global theme."""
        theme = ThemeManager.get_theme(self.config.ui_prefs.theme_name)
        self.setStyleSheet(theme.stylesheet)
