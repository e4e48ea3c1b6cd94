"""
Qt-backed scheduler for ``GameController``: one single-shot QTimer per call.
"""
from __future__ import annotations

from typing import Callable, Optional, Set

from PySide6 import QtCore


class TimerHandle:
    def __init__(self, timer: QtCore.QTimer, live: Set[QtCore.QTimer]) -> None:
        self._timer = timer
        self._live = live

    def cancel(self) -> None:
        if self._timer in self._live:
            self._live.discard(self._timer)
            self._timer.stop()
            self._timer.deleteLater()

    def is_active(self) -> bool:
        return self._timer in self._live


class QtScheduler:
    """Runs callbacks on the Qt event loop after the requested delay."""

    def __init__(self, parent: Optional[QtCore.QObject] = None) -> None:
        self._parent = parent
        self._live: Set[QtCore.QTimer] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = QtCore.QTimer(self._parent)
        timer.setSingleShot(True)

        def _fire() -> None:
            if timer not in self._live:
                return
            self._live.discard(timer)
            timer.deleteLater()
            callback()

        timer.timeout.connect(_fire)
        self._live.add(timer)
        timer.start(max(0, int(delay_ms)))
        return TimerHandle(timer, self._live)

    def pending(self) -> int:
        return len(self._live)
