"""Stoppable refresh loop driving live video preview."""

from typing import Callable

from PyQt6.QtCore import QObject, QTimer


class FrameLoop(QObject):
    """Calls a callback once per refresh tick until stopped.

    AIDEV-NOTE: The tick runs on the GUI thread and each callback returns
    before the timer can fire again, so ticks never overlap. start() and
    stop() are idempotent.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_ms: int = 16,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._callback = callback
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_tick)
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def start(self):
        """Begin ticking (no-op if already running)."""
        if not self._timer.isActive():
            self._timer.start()

    def stop(self):
        """Stop ticking (no-op if already stopped)."""
        if self._timer.isActive():
            self._timer.stop()

    def _on_tick(self):
        self.tick_count += 1
        self._callback()
