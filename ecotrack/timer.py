"""A wall-clock stopwatch that reports elapsed milliseconds."""

from __future__ import annotations

import time


class Timer:
    """Measures milliseconds between successive calls.

    Until :meth:`reset` is called the reference point is the epoch.
    """

    def __init__(self) -> None:
        self._last = 0.0

    def reset(self) -> None:
        """Take the current time as the new reference point."""
        self._last = time.time()

    def ms_delay(self) -> float:
        """Return milliseconds since the reference point and move it to now."""
        now = time.time()
        elapsed = (now - self._last) * 1000.0
        self._last = now
        return elapsed