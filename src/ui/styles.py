"""
Style Management Module

Application themes for the work-hours window.
A theme is a colour palette; the stylesheet is rendered from one shared
template so every theme styles the same set of widgets.
"""

from abc import ABC, abstractmethod
from typing import Dict, Type

STYLESHEET_TEMPLATE = """
    QMainWindow, QDialog {{
        background-color: {window};
    }}
    QWidget {{
        font-family: 'Segoe UI', 'Microsoft JhengHei', system-ui, sans-serif;
        font-size: 13px;
        color: {text};
    }}
    QGroupBox {{
        font-weight: bold;
        border: 1px solid {border};
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 16px;
        background-color: {panel};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 5px;
        color: {accent};
    }}
    QPlainTextEdit {{
        background-color: {window};
        border: 1px solid {border};
        border-radius: 4px;
        font-family: 'Consolas', 'Microsoft JhengHei', monospace;
        color: {text};
    }}
    QLineEdit, QTimeEdit, QDateEdit, QSpinBox, QDoubleSpinBox, QComboBox {{
        background-color: {input};
        border: 1px solid {border};
        border-radius: 4px;
        padding: 4px 8px;
        color: {text};
        selection-background-color: {selection};
    }}
    QLineEdit:focus, QTimeEdit:focus, QDateEdit:focus, QSpinBox:focus, QDoubleSpinBox:focus {{
        border: 1px solid {button};
    }}
    QComboBox QAbstractItemView {{
        background-color: {panel};
        color: {text};
        selection-background-color: {selection};
        border: 1px solid {border};
        outline: none;
    }}
    QCheckBox {{
        spacing: 8px;
    }}
    QPushButton {{
        background-color: {button};
        color: {button_text};
        border: none;
        border-radius: 4px;
        padding: 8px 16px;
        font-weight: bold;
    }}
    QPushButton:hover {{
        background-color: {button_hover};
    }}
    QMenuBar {{
        background-color: {panel};
        border-bottom: 1px solid {border};
    }}
    QMenuBar::item:selected, QMenu::item:selected {{
        background-color: {selection};
    }}
    QMenu {{
        background-color: {panel};
        border: 1px solid {border};
    }}
"""


class Theme(ABC):
    """Abstract base class for Themes."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def palette(self) -> Dict[str, str]:
        """Colour roles used by the stylesheet template."""
        pass

    @property
    def stylesheet(self) -> str:
        return STYLESHEET_TEMPLATE.format(**self.palette)


class DarkTheme(Theme):
    """The default dark theme for the application."""

    @property
    def name(self) -> str:
        return "Dark Mode"

    @property
    def palette(self) -> Dict[str, str]:
        return {
            "window": "#1e1e1e",
            "panel": "#252526",
            "input": "#3c3c3c",
            "border": "#3e3e42",
            "text": "#e0e0e0",
            "accent": "#4ec9b0",
            "selection": "#37373d",
            "button": "#0078d4",
            "button_hover": "#106ebe",
            "button_text": "#ffffff",
        }


class ClassicWhiteTheme(Theme):
    """A minimal, Windows-native like light theme."""

    @property
    def name(self) -> str:
        return "Classic White"

    @property
    def palette(self) -> Dict[str, str]:
        return {
            "window": "#f0f0f0",
            "panel": "#ffffff",
            "input": "#ffffff",
            "border": "#adadad",
            "text": "#000000",
            "accent": "#005a9e",
            "selection": "#e5f3ff",
            "button": "#e1e1e1",
            "button_hover": "#e5f1fb",
            "button_text": "#000000",
        }


class ThemeManager:
    """
    Lookup of application themes by name.
    Stateless; falls back to the dark theme for unknown names.
    """

    _themes: Dict[str, Type[Theme]] = {
        "Dark Mode": DarkTheme,
        "Classic White": ClassicWhiteTheme
    }

    @classmethod
    def get_theme(cls, theme_name: str) -> Theme:
        """Factory method to get a theme instance by name."""
        theme_cls = cls._themes.get(theme_name)
        if not theme_cls:
            return DarkTheme()
        return theme_cls()

    @classmethod
    def get_available_themes(cls) -> list[str]:
        """Returns a list of available theme names."""
        return list(cls._themes.keys())
