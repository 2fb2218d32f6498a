"""Wall-clock budget shared by every HTTP call and sleep of one thread fetch."""

from __future__ import annotations

import time
from collections.abc import Callable

from reddit_threads.errors import ThreadFetchTimeout


class Deadline:
    """A monotonic-clock deadline ``timeout`` seconds from construction."""

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.timeout = timeout
        self._clock = clock
        self._expires_at = clock() + timeout

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def check(self) -> None:
        """Raise :class:`ThreadFetchTimeout` if the budget is spent."""
        if self.expired:
            raise ThreadFetchTimeout(self.timeout)

    def cap(self, seconds: float) -> float:
        """Clamp a per-request timeout to what is left of the budget."""
        self.check()
        return min(seconds, self.remaining())

    def sleep(self, seconds: float, sleeper: Callable[[float], None] = time.sleep) -> None:
        """Sleep, or fail straight away if the sleep would outlast the budget."""
        if seconds >= self.remaining():
            raise ThreadFetchTimeout(self.timeout)
        sleeper(seconds)
