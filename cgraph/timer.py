"""A periodic timer running a task on its own thread."""

from __future__ import annotations

import threading
from typing import Any, Callable

__all__ = ["Timer"]


class Timer:
    """Calls a task every ``interval`` milliseconds until stopped."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._stop_event: threading.Event | None = None

    def start(self, interval: float, task: Callable[[], Any]) -> None:
        """Begin calling ``task`` every ``interval`` ms; ignored if already running."""
        with self._lock:
            if self._thread is not None:
                return
            stop_event = threading.Event()
            seconds = interval / 1000.0

            def loop() -> None:
                while not stop_event.wait(seconds):
                    task()

            thread = threading.Thread(target=loop, name="cgraph-timer", daemon=True)
            self._stop_event = stop_event
            self._thread = thread
            thread.start()

    def stop(self) -> None:
        """Stop the timer and wait for its thread; does nothing if not running."""
        with self._lock:
            thread, stop_event = self._thread, self._stop_event
            self._thread = None
            self._stop_event = None
        if thread is None or stop_event is None:
            return
        stop_event.set()
        if thread is not threading.current_thread():
            thread.join()