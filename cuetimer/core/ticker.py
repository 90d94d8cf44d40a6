"""
Tick source for the timer.

Delivers ``time.monotonic()`` readings at a fixed cadence, but only while
the timer wants ticks.  While idle or paused the thread parks on a wake
event instead of polling.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Ticker:
    """Background tick loop, gated by a ``wants_ticks`` predicate."""

    def __init__(
        self,
        on_tick: Callable[[float], None],
        wants_ticks: Callable[[], bool],
        interval: float = 0.01,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._on_tick = on_tick
        self._wants_ticks = wants_ticks
        self._interval = interval
        self._clock = clock
        self._thread: Optional[threading.Thread] = None
        self._wake_event = threading.Event()
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._running = False
        self.ticks_delivered = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            if self._running:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run_loop, name="TimerTicker", daemon=True)
            self._running = True
            self._thread.start()
            logger.info(f"⏱️ Ticker started ({self._interval * 1000:.0f}ms)")

    def wake(self) -> None:
        """Re-check ``wants_ticks`` now, e.g. right after a start command."""
        self._wake_event.set()

    def stop(self, timeout: float = 2.0) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_event.set()
            self._wake_event.set()
            thread = self._thread
        if thread is not None:
            thread.join(timeout)
        logger.info("Ticker stopped")

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            if not self._wants_ticks():
                self._wake_event.wait()
                self._wake_event.clear()
                continue

            try:
                self._on_tick(self._clock())
                self.ticks_delivered += 1
            except Exception:
                logger.exception("Tick handler failed")

            self._stop_event.wait(self._interval)
