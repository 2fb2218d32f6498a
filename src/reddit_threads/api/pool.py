"""Bounded pool of concurrent thread fetches with a per-fetch time budget."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeVar

from reddit_threads.errors import ServerBusy

T = TypeVar("T")


class FetchPool:
    """At most ``max_concurrency`` fetches at once; extra work is refused.

    Saturation raises :class:`ServerBusy` instead of queueing, which keeps
    memory bounded and stops a burst of requests from piling onto Reddit's
    own rate limit.
    """

    def __init__(self, max_concurrency: int = 20, timeout: float = 30.0) -> None:
        self.capacity = max_concurrency
        self.timeout = timeout
        self._slots = threading.BoundedSemaphore(max_concurrency)
        self._lock = threading.Lock()
        self._active = 0

    @property
    def active(self) -> int:
        with self._lock:
            return self._active

    def run(self, job: Callable[[float], T]) -> T:
        """Run ``job(timeout)`` in the calling thread if a slot is free."""
        if not self._slots.acquire(blocking=False):
            raise ServerBusy()
        with self._lock:
            self._active += 1
        try:
            return job(self.timeout)
        finally:
            with self._lock:
                self._active -= 1
            self._slots.release()
