import threading

from PySide6.QtCore import QObject, Signal


class TickSource(QObject):
    """Background one-second ticker.

    Signals:
    - tick(): emitted from the worker thread once per interval; Qt queues it
      into the GUI thread, so slots may touch widgets. The worker itself never does.
    """

    tick = Signal()

    def __init__(self, interval: float = 1.0, parent=None):
        super().__init__(parent)
        self.interval = float(interval)
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        if self.is_active():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="time-ticker-tick", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2)
            self._thread = None

    def is_active(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self):
        # Event.wait doubles as the sleep and the stop check
        while not self._stop.wait(self.interval):
            self.tick.emit()
