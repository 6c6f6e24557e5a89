"""
Single-threaded timer queue and a registry of named timers.

TickScheduler exposes the same ``after`` / ``after_cancel`` surface as a
Tk root, so the control logic can run on either. Time only moves when
``advance`` is called, which keeps every timer deterministic under test;
``run`` drives it from the wall clock.
"""
import heapq
import itertools
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from .logger import logger


class TickScheduler:
    """Timer queue measured in milliseconds of scheduler time."""

    def __init__(self):
        self._now = 0
        self._queue: List[Tuple[int, int, str]] = []
        self._callbacks: Dict[str, Tuple[Callable, tuple]] = {}
        self._seq = itertools.count()

    @property
    def now(self) -> int:
        return self._now

    def after(self, delay_ms: int, callback: Callable, *args) -> str:
        """Schedule ``callback(*args)`` after ``delay_ms``; returns its id."""
        seq = next(self._seq)
        after_id = f"after#{seq}"
        self._callbacks[after_id] = (callback, args)
        heapq.heappush(self._queue, (self._now + max(0, int(delay_ms)), seq, after_id))
        return after_id

    def after_cancel(self, after_id: Optional[str]):
        """Cancel a pending callback. Unknown or fired ids are ignored."""
        if after_id:
            self._callbacks.pop(after_id, None)

    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, ms: int):
        """
        Move time forward, firing every callback that falls due.

        Callbacks scheduled while advancing also fire if they fall due
        before the target time.
        """
        target = self._now + max(0, int(ms))
        while self._queue and self._queue[0][0] <= target:
            due, _, after_id = heapq.heappop(self._queue)
            entry = self._callbacks.pop(after_id, None)
            if entry is None:
                continue
            self._now = due
            callback, args = entry
            try:
                callback(*args)
            except Exception:
                logger.exception(f"Error in scheduled callback {getattr(callback, '__name__', callback)}")
        self._now = target

    def run(self, stop_event: threading.Event, tick_ms: int = 20):
        """Advance with the wall clock until ``stop_event`` is set."""
        last = time.monotonic()
        while not stop_event.is_set():
            time.sleep(tick_ms / 1000)
            current = time.monotonic()
            elapsed = int((current - last) * 1000)
            if elapsed > 0:
                # Carry the sub-millisecond remainder into the next tick
                last += elapsed / 1000
                self.advance(elapsed)


class TimerRegistry:
    """
    Named timers on top of a scheduler.

    Setting a name replaces any timer already registered under it, and a
    callback only runs if its timer is still the one registered under its
    name, so a replaced or cancelled timer can never fire late.
    """

    def __init__(self, scheduler):
        self._scheduler = scheduler
        self._timers: Dict[str, Tuple[object, str]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._timers

    def names(self) -> List[str]:
        return sorted(self._timers)

    def set_timeout(self, name: str, delay_ms: int, callback: Callable[[], None]):
        """Run ``callback`` once after ``delay_ms``."""
        self.cancel(name)
        token = object()

        def fire():
            if self._current_token(name) is not token:
                return
            del self._timers[name]
            callback()

        self._timers[name] = (token, self._scheduler.after(delay_ms, fire))

    def set_interval(self, name: str, interval_ms: int, callback: Callable[[], None]):
        """Run ``callback`` every ``interval_ms`` until cancelled."""
        self.cancel(name)
        token = object()

        def fire():
            if self._current_token(name) is not token:
                return
            # Re-arm first so the callback may cancel or replace this timer
            self._timers[name] = (token, self._scheduler.after(interval_ms, fire))
            callback()

        self._timers[name] = (token, self._scheduler.after(interval_ms, fire))

    def cancel(self, name: str):
        entry = self._timers.pop(name, None)
        if entry is not None:
            self._scheduler.after_cancel(entry[1])

    def cancel_all(self):
        for name in list(self._timers):
            self.cancel(name)

    def _current_token(self, name: str) -> Optional[object]:
        entry = self._timers.get(name)
        return entry[0] if entry else None
