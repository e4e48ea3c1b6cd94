"""
Mantis GUI entrypoint.

One window: the four tanks around a central card zone. The human seat gets
SCORE / STEAL buttons on its turn; STEAL switches to target selection and a
click on another tank completes it. Computer seats play on Qt timers.
"""
from __future__ import annotations

import random
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from mantis.controller import EVENT_STATE, GameController, GameEvent, Scheduler
from mantis.game import GameConfig, GameSnapshot

from .board import DeckCardWidget, TankWidget
from .themes import DARK, LIGHT, apply_theme, get_saved_theme, save_theme
from .timers import QtScheduler

# (row, column) of each seat in the 3x3 board grid; seat 0 sits at the bottom.
SEAT_POSITIONS = {0: (2, 1), 1: (1, 0), 2: (0, 1), 3: (1, 2)}


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Mantis")
        self.setMinimumSize(900, 640)

        self.controller = GameController(
            config,
            rng=rng,
            scheduler=scheduler if scheduler is not None else QtScheduler(self),
        )

        board = QtWidgets.QWidget()
        grid = QtWidgets.QGridLayout(board)
        self._tanks: list[TankWidget] = []
        for seat in range(len(self.controller.config.player_names)):
            tank = TankWidget(seat)
            tank.clicked.connect(self._on_tank_clicked)
            row, col = SEAT_POSITIONS.get(seat, (seat, 3))
            grid.addWidget(tank, row, col)
            self._tanks.append(tank)
        grid.addWidget(self._make_center(), 1, 1)
        grid.setColumnStretch(1, 1)
        self.setCentralWidget(board)
        self._make_menu()

        self._unsubscribe = self.controller.subscribe(self._on_event)
        self.controller.start()

    def _make_center(self) -> QtWidgets.QWidget:
        widget = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(widget)
        layout.setAlignment(QtCore.Qt.AlignCenter)

        self.card = DeckCardWidget()
        layout.addWidget(self.card, alignment=QtCore.Qt.AlignCenter)

        buttons = QtWidgets.QHBoxLayout()
        self.btn_score = QtWidgets.QPushButton("SCORE")
        self.btn_score.setObjectName("score")
        self.btn_score.clicked.connect(self._on_score)
        self.btn_steal = QtWidgets.QPushButton("STEAL")
        self.btn_steal.setObjectName("steal")
        self.btn_steal.clicked.connect(self._on_steal)
        buttons.addWidget(self.btn_score)
        buttons.addWidget(self.btn_steal)
        layout.addLayout(buttons)

        self.lbl_hint = self._make_label("Tap a CPU to steal from", italic=True)
        self.lbl_status = self._make_label("CPU is thinking...", italic=True)
        self.lbl_winner = self._make_label("", bold=True)
        self.lbl_message = self._make_label("", bold=True)
        for label in (self.lbl_hint, self.lbl_status, self.lbl_winner, self.lbl_message):
            layout.addWidget(label)

        self.btn_reset = QtWidgets.QPushButton("Reset Game")
        self.btn_reset.setObjectName("reset")
        self.btn_reset.clicked.connect(self.controller.request_reset)
        layout.addWidget(self.btn_reset, alignment=QtCore.Qt.AlignCenter)
        return widget

    @staticmethod
    def _make_label(text: str, italic: bool = False, bold: bool = False) -> QtWidgets.QLabel:
        label = QtWidgets.QLabel(text)
        label.setWordWrap(True)
        label.setAlignment(QtCore.Qt.AlignCenter)
        font = label.font()
        font.setItalic(italic)
        font.setBold(bold)
        label.setFont(font)
        return label

    def _make_menu(self) -> None:
        view = self.menuBar().addMenu("View")
        group = QtGui.QActionGroup(self)
        saved = get_saved_theme()
        for theme, title in ((LIGHT, "Light theme"), (DARK, "Dark theme")):
            action = QtGui.QAction(title, self, checkable=True)
            action.setChecked(theme == saved)
            action.triggered.connect(lambda _checked=False, t=theme: self._on_theme_changed(t))
            group.addAction(action)
            view.addAction(action)

    # ---- Controller events ----

    def _on_event(self, event: GameEvent) -> None:
        if event.kind == EVENT_STATE:
            self.refresh(event.snapshot)

    def refresh(self, snap: GameSnapshot) -> None:
        for seat, tank in enumerate(self._tanks):
            targetable = snap.steal_selection and seat != snap.current_index
            active = snap.winner is None and seat == snap.current_index
            tank.show_player(snap.players[seat], active=active, targetable=targetable)
        self.card.show_snapshot(snap)

        human_turn = snap.winner is None and not snap.current_player.is_computer
        can_press = human_turn and snap.revealed is None and snap.deck_size > 0
        self.btn_score.setVisible(human_turn)
        self.btn_steal.setVisible(human_turn)
        self.btn_score.setEnabled(can_press and not snap.steal_selection)
        self.btn_steal.setEnabled(can_press)
        self.lbl_hint.setVisible(snap.steal_selection)
        self.lbl_status.setVisible(snap.winner is None and snap.current_player.is_computer and snap.deck_size > 0)
        self.lbl_winner.setText(f"{snap.winner} wins!" if snap.winner else ("Deck empty." if snap.stalled else ""))
        self.lbl_message.setText(snap.message)

    # ---- User input ----

    def _on_score(self) -> None:
        self.controller.request_score(self.controller.state.current_index)

    def _on_steal(self) -> None:
        if self.controller.snapshot().steal_selection:
            self.controller.cancel_steal_selection()
        else:
            self.controller.begin_steal_selection()

    def _on_tank_clicked(self, seat: int) -> None:
        self.controller.select_steal_target(seat)

    def _on_theme_changed(self, theme: str) -> None:
        save_theme(theme)
        app = QtWidgets.QApplication.instance()
        if app:
            apply_theme(app, theme)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self._unsubscribe()
        super().closeEvent(event)


def main(argv: Optional[list[str]] = None) -> None:
    import sys

    app = QtWidgets.QApplication(argv or sys.argv)
    apply_theme(app, get_saved_theme())
    win = MainWindow()
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
