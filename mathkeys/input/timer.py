"""Cancellable single-shot deadline timer polled by the owner's event loop."""

from __future__ import annotations

import time
from collections.abc import Callable


class DeadlineTimer:
    """Single-shot timer; arming again replaces any pending deadline.

    Nothing runs in the background: the owner calls ``poll`` between events,
    so a callback never interleaves with keystroke handling.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._deadline: float | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def arm(self, seconds: float, callback: Callable[[], None]) -> None:
        self._deadline = self._clock() + max(0.0, seconds)
        self._callback = callback

    def cancel(self) -> None:
        self._deadline = None
        self._callback = None

    def poll(self, now: float | None = None) -> bool:
        """Fire the callback if the deadline has passed; return whether it fired."""
        if self._deadline is None:
            return False
        if now is None:
            now = self._clock()
        if now < self._deadline:
            return False
        callback = self._callback
        self.cancel()
        if callback is not None:
            callback()
        return True
