"""
Two-phase flip transition gate.

A gate runs at most one transition at a time. The data change behind a
transition is applied at its midpoint, and the gate stays closed until
the second phase has finished.
"""
from typing import Callable, Optional

from .config import FLIP_PHASE_MS
from .logger import logger

IDLE = 'idle'
FLIPPING = 'flipping'


class AnimationGate:
    """Exclusive ``idle`` -> ``flipping`` -> ``idle`` transition."""

    def __init__(self, name: str, scheduler, phase_ms: int = FLIP_PHASE_MS):
        self.name = name
        self.phase_ms = phase_ms
        self._scheduler = scheduler
        self._state = IDLE

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == IDLE

    @property
    def duration_ms(self) -> int:
        return self.phase_ms * 2

    def trigger(self, mutation: Callable[[], None],
                on_complete: Optional[Callable[[], None]] = None) -> bool:
        """
        Start a transition.

        Args:
            mutation: Data change applied at the midpoint
            on_complete: Called once the gate is idle again

        Returns:
            False without scheduling anything if a transition is in flight
        """
        if self._state != IDLE:
            logger.debug(f"[{self.name}] transition rejected, gate is {self._state}")
            return False

        self._state = FLIPPING
        self._scheduler.after(self.phase_ms, self._midpoint, mutation, on_complete)
        return True

    def _midpoint(self, mutation: Callable[[], None], on_complete: Optional[Callable[[], None]]):
        try:
            mutation()
        except Exception:
            logger.exception(f"[{self.name}] transition mutation failed")
        finally:
            self._scheduler.after(self.phase_ms, self._finish, on_complete)

    def _finish(self, on_complete: Optional[Callable[[], None]]):
        self._state = IDLE
        if on_complete is not None:
            on_complete()
