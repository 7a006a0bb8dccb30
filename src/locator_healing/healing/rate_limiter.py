"""
Rate Limiter for Model Calls
----------------------------

Bounds how many external model calls self‑healing may issue within a
sliding time window.  The window is a fixed ring of ``max_calls``
timestamp slots; a slot is free once its timestamp has slid out of the
window.  Acquisition never blocks: a denied call is the caller's cue to
skip the model for this attempt, not to sleep and retry.

One lock guards the ring, so a single limiter can be shared by every
resolution request running in parallel test threads.

Usage::

    limiter = RateLimiter(max_calls=10, window_seconds=60)
    if limiter.try_acquire():
        answer = client.chat(prompt, timeout=5)
"""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional

from ..utils.logger import get_logger


class RateLimiter:
    """Non‑blocking sliding window limiter over a ring of timestamps."""

    def __init__(
        self,
        max_calls: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_calls < 0:
            raise ValueError("max_calls must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_calls = max_calls
        self.window_seconds = window_seconds
        self._clock = clock
        self._slots: List[Optional[float]] = [None] * max_calls
        self._index = 0
        self._lock = threading.Lock()
        self.logger = get_logger(self.__class__.__name__)

    def _release_expired(self, now: float) -> int:
        """Free slots that fell out of the window; return the occupied count."""
        window_start = now - self.window_seconds
        occupied = 0
        for i, ts in enumerate(self._slots):
            if ts is None:
                continue
            if ts < window_start:
                self._slots[i] = None
            else:
                occupied += 1
        return occupied

    def try_acquire(self) -> bool:
        """Claim a call slot if the window has room.

        Returns ``True`` when the call may proceed and ``False`` when
        ``max_calls`` calls were already made within the window.
        """
        with self._lock:
            now = self._clock()
            occupied = self._release_expired(now)
            if occupied >= self.max_calls:
                self.logger.debug("Rate limit reached: %d/%d calls in window", occupied, self.max_calls)
                return False
            self._slots[self._index] = now
            self._index = (self._index + 1) % self.max_calls
            return True

    def remaining(self) -> int:
        """Number of calls that would currently be granted."""
        with self._lock:
            return self.max_calls - self._release_expired(self._clock())

    def reset(self) -> None:
        with self._lock:
            self._slots = [None] * self.max_calls
            self._index = 0
        self.logger.debug("Rate limiter reset")

    def __repr__(self) -> str:
        return f"RateLimiter(max_calls={self.max_calls}, window_seconds={self.window_seconds})"


__all__ = ["RateLimiter"]
