"""
Main Window Module

PyQt6 window for the monthly work-hours calculator.
"""

import sys
from datetime import date
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QLineEdit, QComboBox, QDateEdit, QGroupBox,
    QPlainTextEdit, QMessageBox, QApplication
)
from PyQt6.QtCore import Qt, QDate
from PyQt6.QtGui import QAction, QActionGroup, QFont

from application.report_service import WorkHoursService
from config.config_manager import ConfigManager
from domain.entities import AttendanceEntry, LeaveType, MonthStatistics
from infrastructure.excel_parser import SourceUnavailableError
from infrastructure.logger import get_logger
from infrastructure.pdf_writer import PdfFontUnavailableError
from ui.styles import ThemeManager

logger = get_logger("MainWindow")


class MainWindow(QMainWindow):
    """
    Main application window.

    Layout:
    - Left: month selection, statistics summary, attendance submission, holidays
    - Right: full text report
    """

    STAT_LABEL_STYLE = (
        "background-color: #3a4ad9; color: white; padding: 5px; "
        "border-radius: 4px; min-width: 70px; font-weight: bold;"
    )

    def __init__(self):
        super().__init__()
        self.config_manager = ConfigManager()
        self.config = self.config_manager.load()
        self.service = WorkHoursService(self.config)
        self._last_stats: Optional[MonthStatistics] = None

        self._init_ui()
        self._connect_signals()

    def _init_ui(self):
        """Initialize the user interface."""
        self.setWindowTitle("月度工時統計")
        self.setMinimumSize(1000, 700)

        self._create_menu_bar()

        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QHBoxLayout(central)
        main_layout.setContentsMargins(10, 10, 10, 10)
        main_layout.setSpacing(15)

        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_layout.setContentsMargins(0, 0, 0, 0)
        left_layout.addWidget(self._create_month_group())
        left_layout.addWidget(self._create_stats_group())
        left_layout.addWidget(self._create_submit_group())
        left_layout.addWidget(self._create_holiday_group())
        left_layout.addStretch()
        main_layout.addWidget(left_panel, stretch=2)

        report_group = QGroupBox("工時統計報告")
        report_layout = QVBoxLayout(report_group)
        self.txt_report = QPlainTextEdit()
        self.txt_report.setReadOnly(True)
        self.txt_report.setFont(QFont("Microsoft JhengHei", 11))
        report_layout.addWidget(self.txt_report)
        main_layout.addWidget(report_group, stretch=3)

        self._apply_styles()

    def _create_menu_bar(self):
        """Create the menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("檔案")
        exit_action = QAction("離開", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        theme_menu = menubar.addMenu("主題")
        theme_group = QActionGroup(self)
        theme_group.setExclusive(True)
        current_theme = self.config.ui_prefs.theme_name
        for theme_name in ThemeManager.get_available_themes():
            action = QAction(theme_name, self, checkable=True)
            if theme_name == current_theme:
                action.setChecked(True)
            action.triggered.connect(lambda checked, name=theme_name: self._on_switch_theme(name))
            theme_menu.addAction(action)
            theme_group.addAction(action)

        settings_action = QAction("設定", self)
        settings_action.triggered.connect(self._on_open_settings)
        menubar.addAction(settings_action)

    def _create_month_group(self) -> QGroupBox:
        group = QGroupBox("統計月份")
        layout = QHBoxLayout(group)

        self.date_month = QDateEdit(QDate.currentDate())
        self.date_month.setDisplayFormat("yyyy-MM")
        layout.addWidget(self.date_month)

        self.btn_calculate = QPushButton("計算")
        self.btn_calculate.setStyleSheet("background-color: #2ea043; color: white; font-weight: bold;")
        layout.addWidget(self.btn_calculate)

        self.btn_template = QPushButton("產生模板")
        layout.addWidget(self.btn_template)

        self.btn_export_pdf = QPushButton("匯出 PDF")
        self.btn_export_pdf.setEnabled(False)
        layout.addWidget(self.btn_export_pdf)

        return group

    def _create_stats_group(self) -> QGroupBox:
        group = QGroupBox("統計資訊")
        layout = QGridLayout(group)
        layout.setSpacing(8)

        rows = [
            ("當月總工時", "lbl_total_hours"),
            ("出勤天數", "lbl_attendance_days"),
            ("距離目標還需", "lbl_remaining_hours"),
            ("剩餘工作日", "lbl_remaining_days"),
            ("需要日均工時", "lbl_required_average"),
        ]
        for row, (title, attr) in enumerate(rows):
            layout.addWidget(QLabel(title), row, 0)
            label = QLabel("-")
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setStyleSheet(self.STAT_LABEL_STYLE)
            setattr(self, attr, label)
            layout.addWidget(label, row, 1)

        return group

    def _create_submit_group(self) -> QGroupBox:
        group = QGroupBox("提交考勤")
        layout = QGridLayout(group)
        layout.setSpacing(8)

        layout.addWidget(QLabel("日期"), 0, 0)
        self.date_entry = QDateEdit(QDate.currentDate())
        self.date_entry.setDisplayFormat("yyyy-MM-dd")
        self.date_entry.setCalendarPopup(True)
        layout.addWidget(self.date_entry, 0, 1)

        layout.addWidget(QLabel("請假類型"), 0, 2)
        self.cmb_leave = QComboBox()
        for leave_type in LeaveType:
            self.cmb_leave.addItem(leave_type.description, leave_type)
        layout.addWidget(self.cmb_leave, 0, 3)

        layout.addWidget(QLabel("上班時間"), 1, 0)
        self.txt_clock_in = QLineEdit()
        self.txt_clock_in.setPlaceholderText("09:00")
        layout.addWidget(self.txt_clock_in, 1, 1)

        layout.addWidget(QLabel("下班時間"), 1, 2)
        self.txt_clock_out = QLineEdit()
        self.txt_clock_out.setPlaceholderText("18:00 / 01:30+1")
        layout.addWidget(self.txt_clock_out, 1, 3)

        layout.addWidget(QLabel("請假開始"), 2, 0)
        self.txt_leave_start = QLineEdit()
        layout.addWidget(self.txt_leave_start, 2, 1)

        layout.addWidget(QLabel("請假結束"), 2, 2)
        self.txt_leave_end = QLineEdit()
        layout.addWidget(self.txt_leave_end, 2, 3)

        layout.addWidget(QLabel("備註"), 3, 0)
        self.txt_remark = QLineEdit()
        layout.addWidget(self.txt_remark, 3, 1, 1, 3)

        self.btn_submit = QPushButton("提交")
        layout.addWidget(self.btn_submit, 4, 3)

        return group

    def _create_holiday_group(self) -> QGroupBox:
        group = QGroupBox("節假日調整")
        layout = QHBoxLayout(group)

        self.date_holiday = QDateEdit(QDate.currentDate())
        self.date_holiday.setDisplayFormat("yyyy-MM-dd")
        self.date_holiday.setCalendarPopup(True)
        layout.addWidget(self.date_holiday)

        self.btn_add_holiday = QPushButton("加入假日")
        layout.addWidget(self.btn_add_holiday)
        self.btn_remove_holiday = QPushButton("移除假日")
        layout.addWidget(self.btn_remove_holiday)

        return group

    def _connect_signals(self):
        """Connect UI signals to handlers."""
        self.btn_calculate.clicked.connect(self._on_calculate)
        self.btn_template.clicked.connect(self._on_generate_template)
        self.btn_export_pdf.clicked.connect(self._on_export_pdf)
        self.btn_submit.clicked.connect(self._on_submit)
        self.btn_add_holiday.clicked.connect(lambda: self._on_adjust_holiday(add=True))
        self.btn_remove_holiday.clicked.connect(lambda: self._on_adjust_holiday(add=False))

    def _apply_styles(self):
        """Apply visual styles to the window using ThemeManager."""
        theme = ThemeManager.get_theme(self.config.ui_prefs.theme_name)
        self.setStyleSheet(theme.stylesheet)

    def _on_switch_theme(self, theme_name: str):
        self.config.ui_prefs.theme_name = theme_name
        self.config_manager.save()
        self._apply_styles()

    def _on_open_settings(self):
        """Open the settings dialog and persist accepted changes."""
        from ui.settings_dialog import SettingsDialog
        dialog = SettingsDialog(self.config, self)
        if dialog.exec():
            self.config_manager.save()

    def _selected_year_month(self) -> str:
        return self.date_month.date().toString("yyyy-MM")

    def _show_message_box(self, msg_type: str, title: str, message: str):
        """Show a message box.

        Args:
            msg_type: 'information', 'warning' or 'critical'
        """
        icons = {
            "information": QMessageBox.Icon.Information,
            "warning": QMessageBox.Icon.Warning,
            "critical": QMessageBox.Icon.Critical,
        }
        msg_box = QMessageBox(self)
        msg_box.setWindowTitle(title)
        msg_box.setText(message)
        msg_box.setIcon(icons.get(msg_type, QMessageBox.Icon.NoIcon))
        msg_box.exec()

    def _on_calculate(self):
        """Calculate the selected month and show the report."""
        result, text = self.service.generate_report(self._selected_year_month())
        self.txt_report.setPlainText(text)

        if not result.success:
            self._last_stats = None
            self.btn_export_pdf.setEnabled(False)
            self._clear_stats()
            self._show_message_box("warning", "無法計算", result.error_message)
            return

        self._last_stats = result.statistics
        self.btn_export_pdf.setEnabled(True)
        self.update_stats(result.statistics)

    def _on_generate_template(self):
        year_month = self._selected_year_month()
        try:
            path = self.service.generate_template(year_month)
        except (ValueError, OSError) as e:
            logger.error(f"產生模板失敗: {e}")
            self._show_message_box("critical", "錯誤", f"產生模板失敗：{e}")
            return
        self._show_message_box("information", "成功", f"模板已產生：{path}")

    def _on_export_pdf(self):
        if self._last_stats is None:
            return
        try:
            path = self.service.export_pdf(self._last_stats)
        except PdfFontUnavailableError as e:
            self._show_message_box("warning", "缺少中文字型", str(e))
            return
        except PermissionError:
            self._show_message_box("critical", "錯誤", "無法寫入 PDF，檔案可能被其他程式佔用")
            return
        except Exception as e:
            logger.error(f"匯出 PDF 失敗: {e}")
            self._show_message_box("critical", "錯誤", f"匯出 PDF 時發生非預期錯誤：{e}")
            return
        self._show_message_box("information", "成功", f"PDF 已儲存：{path}")

    def _on_submit(self):
        """Write the form into the month workbook."""
        entry = AttendanceEntry(
            date=self.date_entry.date().toPyDate(),
            clock_in=self.txt_clock_in.text(),
            clock_out=self.txt_clock_out.text(),
            leave_type=self.cmb_leave.currentData(),
            leave_start=self.txt_leave_start.text(),
            leave_end=self.txt_leave_end.text(),
            remark=self.txt_remark.text()
        )
        try:
            self.service.submit_attendance(entry)
        except SourceUnavailableError as e:
            self._show_message_box("warning", "無法讀取考勤檔案", str(e))
            return
        except ValueError as e:
            self._show_message_box("warning", "提交失敗", str(e))
            return
        except PermissionError:
            self._show_message_box("critical", "錯誤", "無法寫入考勤檔案，檔案可能被其他程式佔用")
            return
        except Exception as e:
            logger.error(f"提交考勤失敗: {e}")
            self._show_message_box("critical", "錯誤", f"提交時發生非預期錯誤：{e}")
            return

        for edit in (self.txt_clock_in, self.txt_clock_out, self.txt_leave_start,
                     self.txt_leave_end, self.txt_remark):
            edit.clear()
        self.cmb_leave.setCurrentIndex(0)
        self._show_message_box("information", "成功", f"已提交 {entry.date.isoformat()} 的考勤記錄")

    def _on_adjust_holiday(self, add: bool):
        day: date = self.date_holiday.date().toPyDate()
        if add:
            self.service.add_holiday(day)
        else:
            self.service.remove_holiday(day)
        self.config_manager.save()

    def _clear_stats(self):
        for label in (self.lbl_total_hours, self.lbl_attendance_days, self.lbl_remaining_hours,
                      self.lbl_remaining_days, self.lbl_required_average):
            label.setText("-")

    def update_stats(self, stats: MonthStatistics):
        """Update statistics display."""
        self.lbl_total_hours.setText(f"{stats.total_worked_hours:.2f}")
        self.lbl_attendance_days.setText(str(stats.attendance_days))
        self.lbl_remaining_hours.setText(f"{stats.remaining_hours_to_target:.2f}")
        self.lbl_remaining_days.setText(str(stats.remaining_workdays))
        self.lbl_required_average.setText(f"{stats.required_average_hours_for_remaining_days:.2f}")

    def closeEvent(self, event):
        """Handle window close - save config."""
        self.config_manager.save()
        event.accept()


def run_app():
    """Run the application."""
    app = QApplication(sys.argv)
    app.setStyle('Fusion')

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run_app()
