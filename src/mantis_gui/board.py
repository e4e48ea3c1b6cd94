"""
Board widgets: one tank panel per seat and the face-down / revealed deck card.
"""
from __future__ import annotations

from typing import List, Optional

from PySide6 import QtCore, QtWidgets

from mantis.deck import Color
from mantis.game import GameSnapshot, PlayerView

CHIP_STYLE = (
    "background-color: {color}; color: white; border-radius: 4px; "
    "font-weight: bold; padding: 4px;"
)
DOT_STYLE = "background-color: {color}; border-radius: {radius}px;"


def _chip(color: Color, count: int) -> QtWidgets.QLabel:
    label = QtWidgets.QLabel(f"{color.value.capitalize()}\n{count}")
    label.setAlignment(QtCore.Qt.AlignCenter)
    label.setFixedSize(56, 64)
    label.setStyleSheet(CHIP_STYLE.format(color=color.value))
    return label


def _dot(color: Color, size: int) -> QtWidgets.QLabel:
    dot = QtWidgets.QLabel()
    dot.setFixedSize(size, size)
    dot.setStyleSheet(DOT_STYLE.format(color=color.value, radius=size // 2))
    return dot


def _clear_layout(layout: QtWidgets.QLayout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()


class TankWidget(QtWidgets.QGroupBox):
    """Seat panel: "name (score)" title and one chip per held color."""

    clicked = QtCore.Signal(int)

    def __init__(self, seat: int, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.seat = seat
        self._chips = QtWidgets.QHBoxLayout(self)
        self._chips.setAlignment(QtCore.Qt.AlignCenter)
        self._targetable = False

    def show_player(self, player: PlayerView, active: bool, targetable: bool) -> None:
        self.setTitle(f"{player.name} ({player.score})")
        _clear_layout(self._chips)
        for color, count in player.tank:
            self._chips.addWidget(_chip(color, count))
        self._targetable = targetable
        self.setProperty("active", "true" if active else "false")
        self.setProperty("target", "true" if targetable else "false")
        self.setCursor(QtCore.Qt.PointingHandCursor if targetable else QtCore.Qt.ArrowCursor)
        # Re-polish so the dynamic properties pick up their stylesheet rules.
        self.style().unpolish(self)
        self.style().polish(self)

    def chip_count(self) -> int:
        return self._chips.count()

    def is_targetable(self) -> bool:
        return self._targetable

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._targetable:
            self.clicked.emit(self.seat)
        super().mousePressEvent(event)


class DeckCardWidget(QtWidgets.QFrame):
    """Top of the deck: three back dots while face-down, one front dot once revealed."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setFixedSize(80, 112)
        self.setFrameShape(QtWidgets.QFrame.StyledPanel)
        self._layout = QtWidgets.QVBoxLayout(self)
        self._layout.setAlignment(QtCore.Qt.AlignCenter)
        self.shown_colors: List[Color] = []

    def show_snapshot(self, snapshot: GameSnapshot) -> None:
        _clear_layout(self._layout)
        if snapshot.revealed is not None:
            self.shown_colors = [snapshot.revealed.front]
            self._layout.addWidget(_dot(snapshot.revealed.front, 24), alignment=QtCore.Qt.AlignCenter)
        else:
            self.shown_colors = list(snapshot.top_back)
            for color in snapshot.top_back:
                self._layout.addWidget(_dot(color, 16), alignment=QtCore.Qt.AlignCenter)
        count = QtWidgets.QLabel(f"{snapshot.deck_size} left")
        count.setAlignment(QtCore.Qt.AlignCenter)
        self._layout.addWidget(count)
