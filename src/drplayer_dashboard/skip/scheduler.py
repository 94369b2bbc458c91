"""Cancellable delayed callbacks.

An ``asyncio`` event loop already satisfies :class:`Scheduler` through
``loop.call_later``; :class:`ThreadingScheduler` covers hosts without one.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Protocol

# Non-zero, since the skip controller reads a 0 timestamp as "never"
MANUAL_CLOCK_START_MS = 1_000_000.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadingScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


@dataclass
class ManualTimer:
    due_ms: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by an explicit millisecond clock.

    Nothing fires until :meth:`advance` moves the clock past a timer's due
    time. Used by the playback simulation and by tests.
    """

    def __init__(self, start_ms: float = MANUAL_CLOCK_START_MS):
        self.now_ms = start_ms
        self._timers: list[ManualTimer] = []

    def clock(self) -> float:
        return self.now_ms

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now_ms + delay * 1000, callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are neither cancelled nor fired."""
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing due timers in due order."""
        target = self.now_ms + ms
        while True:
            due = [t for t in self._timers if not t.cancelled and t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_ms)
            self._timers.remove(timer)
            self.now_ms = max(self.now_ms, timer.due_ms)
            timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self.now_ms = target
