"""
PDF Writer Module

Exports the monthly work-hours report as a PDF using fpdf2.
"""

import sys
from pathlib import Path
from typing import List, Optional

from fpdf import FPDF

from domain.entities import MonthStatistics
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")


# ==============================================================================
# Font Configuration
# ==============================================================================
WINDOWS_FONT_PATHS: List[Path] = [
    Path("C:/Windows/Fonts/msjh.ttc"),       # 微軟正黑體 (Microsoft JhengHei)
    Path("C:/Windows/Fonts/msyh.ttc"),       # 微軟雅黑 (Microsoft YaHei)
    Path("C:/Windows/Fonts/simsun.ttc"),     # 宋體 (SimSun)
]

MACOS_FONT_PATHS: List[Path] = [
    Path("/System/Library/Fonts/STHeiti Light.ttc"),
    Path("/System/Library/Fonts/PingFang.ttc"),
    Path("/Library/Fonts/Arial Unicode.ttf"),
]

LINUX_FONT_PATHS: List[Path] = [
    Path("/usr/share/fonts/truetype/noto/NotoSansCJK-Regular.ttc"),
    Path("/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc"),
    Path("/usr/share/fonts/truetype/wqy/wqy-microhei.ttc"),
    Path("/usr/share/fonts/truetype/droid/DroidSansFallback.ttf"),
]

FALLBACK_FONT = "Helvetica"


class PdfFontUnavailableError(RuntimeError):
    """Raised when no CJK font could be loaded for the report."""

    def __init__(self):
        super().__init__("找不到可用的中文字型，無法匯出 PDF。請在設定檔指定 custom_font_path")


def find_chinese_font(custom_font_path: Optional[str] = None) -> Optional[Path]:
    """
    Search for an available Chinese font with cross-platform support.
    """
    if custom_font_path:
        custom_path = Path(custom_font_path)
        if custom_path.exists():
            logger.info(f"使用自訂字型: {custom_path}")
            return custom_path
        else:
            logger.warning(f"自訂字型路徑不存在: {custom_path}")

    for font_path in _get_platform_fonts():
        if font_path.exists():
            logger.debug(f"找到系統字型: {font_path}")
            return font_path

    return _try_matplotlib_font()


def _get_platform_fonts() -> List[Path]:
    """Get the font search list for the current platform."""
    if sys.platform == 'win32':
        return WINDOWS_FONT_PATHS
    elif sys.platform == 'darwin':
        return MACOS_FONT_PATHS
    else:
        return LINUX_FONT_PATHS


def _try_matplotlib_font() -> Optional[Path]:
    """Try to find a Chinese font using matplotlib's font_manager."""
    try:
        from matplotlib import font_manager
    except ImportError:
        logger.debug("matplotlib 未安裝，跳過 font_manager 字型搜尋")
        return None

    font_names = [
        'Microsoft JhengHei', 'Microsoft YaHei', 'SimHei',
        'PingFang TC', 'PingFang SC', 'Noto Sans CJK TC',
        'Noto Sans CJK SC', 'WenQuanYi Micro Hei',
    ]

    for font_name in font_names:
        try:
            font_path = font_manager.findfont(
                font_manager.FontProperties(family=font_name),
                fallback_to_default=False
            )
        except ValueError:
            continue
        if font_path and Path(font_path).exists():
            logger.info(f"透過 matplotlib 找到字型: {font_path}")
            return Path(font_path)

    return None


# ==============================================================================
# WorkHoursPdf Class (A4 Portrait)
# ==============================================================================
class WorkHoursPdf(FPDF):
    """
    Custom FPDF class with Chinese font support for the monthly report.
    """

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.title_text = title
        self._font_family = FALLBACK_FONT
        self._font_loaded = False
        self._setup_chinese_font(custom_font_path)

    def _setup_chinese_font(self, custom_font_path: Optional[str] = None) -> None:
        """Load Chinese font if available."""
        font_path = find_chinese_font(custom_font_path)
        if font_path is None:
            logger.warning("無法找到中文字型，PDF 中文將無法正確顯示。")
            return

        try:
            self.add_font("ChineseFont", "", str(font_path))
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning(f"無法載入中文字型 {font_path}: {e}")
            return

        self._font_family = "ChineseFont"
        self._font_loaded = True
        logger.info(f"成功載入中文字型: {font_path.name}")

    @property
    def font_family_name(self) -> str:
        return self._font_family

    @property
    def font_loaded(self) -> bool:
        return self._font_loaded

    def header(self) -> None:
        """Draw page header with centered title."""
        self.set_font(self._font_family, '', 14)
        self.cell(0, 10, self.title_text, align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(2)

    def footer(self) -> None:
        """Draw page footer with page number."""
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.cell(0, 10, f'第 {self.page_no()}/{{nb}} 頁', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Writes report lines to a PDF.

    Section headings (lines starting with 【) are drawn bold-sized; the
    separator lines of the text report are drawn as horizontal rules.
    """

    LINE_HEIGHT = 7

    def __init__(self, custom_font_path: Optional[str] = None):
        self._custom_font_path = custom_font_path

    def create_report(
        self,
        stats: MonthStatistics,
        report_lines: List[str],
        output_path: Path
    ) -> Path:
        """
        Render the report lines of one month into a PDF file.

        Args:
            stats: The month's statistics (used for the title)
            report_lines: Lines from ReportFormatter.format_lines
            output_path: Target PDF path

        Returns:
            The written path

        Raises:
            PdfFontUnavailableError: If no CJK font could be loaded
        """
        pdf = WorkHoursPdf(
            title=f"{stats.year_month} 工時統計報告",
            custom_font_path=self._custom_font_path
        )
        if not pdf.font_loaded:
            logger.error("未載入中文字型，取消匯出 PDF")
            raise PdfFontUnavailableError()

        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.add_page()

        for line in report_lines:
            self._draw_line(pdf, line)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF 報表已儲存: {output_path}")
        return output_path

    def _draw_line(self, pdf: WorkHoursPdf, line: str) -> None:
        stripped = line.strip()
        if not stripped:
            pdf.ln(3)
            return

        if set(stripped) == {"="}:
            y = pdf.get_y() + 2
            pdf.line(pdf.l_margin, y, pdf.w - pdf.r_margin, y)
            pdf.ln(4)
            return

        if stripped.endswith("工時統計報告"):
            # Already in the page header
            return

        size = 12 if stripped.startswith("【") else 10
        pdf.set_font(pdf.font_family_name, '', size)
        pdf.cell(0, self.LINE_HEIGHT, line, new_x='LMARGIN', new_y='NEXT')


# ==============================================================================
# Utility Functions
# ==============================================================================
def format_filename(pattern: str, year: int, month: int) -> str:
    """Format filename pattern with placeholders."""
    return pattern.format(
        year=year,
        month=f"{month:02d}"
    )
