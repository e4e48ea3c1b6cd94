"""
Theme support for the Mantis GUI.

Provides light (default) and dark stylesheets, persisted via QSettings.
"""
from __future__ import annotations

from PySide6 import QtCore, QtWidgets

SETTINGS_ORG = "Mantis"
SETTINGS_APP = "Mantis"
THEME_KEY = "theme"

DARK = "dark"
LIGHT = "light"
THEMES = (DARK, LIGHT)

LIGHT_STYLESHEET = """
QMainWindow { background-color: #f6f0ff; }
QGroupBox {
    background-color: #ffffff;
    border: 1px solid #d8c8f0;
    border-radius: 8px;
    margin-top: 14px;
    padding-top: 14px;
    font-weight: bold;
}
QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 4px 2px 4px; font-size: 14px; }
QGroupBox[active="true"] { border: 3px solid #a78bfa; background-color: #f1eaff; }
QGroupBox[target="true"] { border: 2px solid #facc15; }
QPushButton { border-radius: 6px; padding: 6px 14px; color: white; font-size: 15px; }
QPushButton#score { background-color: #22c55e; }
QPushButton#score:hover { background-color: #4ade80; }
QPushButton#steal { background-color: #facc15; }
QPushButton#steal:hover { background-color: #fde047; }
QPushButton#reset { background-color: #3b82f6; }
QPushButton#reset:hover { background-color: #60a5fa; }
QPushButton:disabled { background-color: #d4d4d4; color: #888888; }
"""

DARK_STYLESHEET = """
QWidget { background-color: #2d2d2d; color: #e0e0e0; }
QMainWindow { background-color: #2d2d2d; }
QGroupBox {
    background-color: #363636;
    border: 1px solid #505050;
    border-radius: 8px;
    margin-top: 14px;
    padding-top: 14px;
    font-weight: bold;
}
QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 4px 2px 4px; background-color: transparent; font-size: 14px; }
QGroupBox[active="true"] { border: 3px solid #a78bfa; }
QGroupBox[target="true"] { border: 2px solid #facc15; }
QPushButton {
    background-color: #404040;
    color: #e0e0e0;
    border: 1px solid #505050;
    border-radius: 6px;
    padding: 6px 14px;
    font-size: 15px;
}
QPushButton:hover { background-color: #505050; }
QPushButton:disabled { background-color: #353535; color: #808080; }
QLabel { color: #e0e0e0; background-color: transparent; }
"""


def get_saved_theme() -> str:
    settings = QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)
    return settings.value(THEME_KEY, LIGHT, type=str)


def save_theme(theme: str) -> None:
    settings = QtCore.QSettings(SETTINGS_ORG, SETTINGS_APP)
    settings.setValue(THEME_KEY, theme)


def apply_theme(app: QtWidgets.QApplication, theme: str) -> None:
    if theme == DARK:
        app.setStyleSheet(DARK_STYLESHEET)
    else:
        app.setStyleSheet(LIGHT_STYLESHEET)
