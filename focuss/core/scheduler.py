from __future__ import annotations

from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer

from focuss import config


class TickScheduler(Protocol):
    @property
    def is_armed(self) -> bool: ...

    def arm(self, callback: Callable[[], None]) -> None: ...

    def disarm(self) -> None: ...


class QtTickScheduler:
    """Owns at most one repeating `QTimer`; arming always replaces the previous one."""

    def __init__(self, interval_ms: int = config.TICK_INTERVAL_MS, parent: QObject | None = None) -> None:
        self._interval_ms = interval_ms
        self._parent = parent
        self._timer: QTimer | None = None

    @property
    def is_armed(self) -> bool:
        return self._timer is not None

    def arm(self, callback: Callable[[], None]) -> None:
        self.disarm()
        timer = QTimer(self._parent)
        timer.setInterval(self._interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        self._timer = timer

    def disarm(self) -> None:
        if self._timer is None:
            return
        timer, self._timer = self._timer, None
        timer.stop()
        timer.timeout.disconnect()
        timer.deleteLater()
