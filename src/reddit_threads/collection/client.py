"""Retrying JSON client for Reddit's public endpoints (no credentials needed)."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import requests

from reddit_threads.collection.deadline import Deadline
from reddit_threads.config import FetchConfig
from reddit_threads.errors import FetchExhausted, HttpError, ThreadFetchTimeout
from reddit_threads.logger import get_logger

logger = get_logger("client")

_DEFAULT_RETRY_AFTER = 5.0  # seconds, when a 429 carries no usable Retry-After
_SERVER_ERRORS = (500, 503)


def _retry_after(response: requests.Response) -> float:
    value = response.headers.get("Retry-After")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return _DEFAULT_RETRY_AFTER
    return seconds if seconds >= 0 else _DEFAULT_RETRY_AFTER


class RedditJSONClient:
    """GET JSON from Reddit with bounded retries.

    - 429: sleep for ``Retry-After`` (default 5s) and try again. These waits
      do not use up an attempt; ``max_rate_limit_waits`` bounds them instead.
    - 500/503: back off ``2 ** attempt`` seconds and retry (uses an attempt).
    - any other non-2xx: :class:`HttpError`, no retry.
    - network or JSON errors: back off and retry, :class:`FetchExhausted` on
      the last attempt.

    The session is reused across calls; nothing else is kept between calls,
    so one client can serve concurrent fetches.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cfg = config or FetchConfig()
        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": self._cfg.user_agent,
            "Accept": "application/json",
        })
        self._sleep = sleep

    @property
    def config(self) -> FetchConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _wait(self, seconds: float, deadline: Deadline | None) -> None:
        if deadline is not None:
            deadline.sleep(seconds, self._sleep)
        else:
            self._sleep(seconds)

    def _timeout(self, deadline: Deadline | None) -> float:
        if deadline is not None:
            return deadline.cap(self._cfg.request_timeout)
        return self._cfg.request_timeout

    def _get(self, url: str, deadline: Deadline | None) -> requests.Response:
        return self._session.get(url, timeout=self._timeout(deadline))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch_json(self, url: str, deadline: Deadline | None = None) -> Any:
        """Fetch ``url`` and return the decoded JSON body.

        Raises:
            HttpError: non-retryable status (e.g. 403, 404).
            FetchExhausted: transient failures persisted past the retry budget.
            ThreadFetchTimeout: ``deadline`` ran out first.
        """
        max_retries = self._cfg.max_retries
        attempt = 1
        rate_limit_waits = 0

        while True:
            try:
                response = self._get(url, deadline)
            except requests.RequestException as exc:
                error: Exception = exc
            else:
                status = response.status_code

                if status == 429:
                    if rate_limit_waits >= self._cfg.max_rate_limit_waits:
                        raise FetchExhausted(attempt, "HTTP 429: rate limited", url)
                    rate_limit_waits += 1
                    wait = _retry_after(response)
                    logger.warning("Rate limited (429) on %s, waiting %.1fs", url, wait)
                    self._wait(wait, deadline)
                    continue

                if status in _SERVER_ERRORS:
                    error = HttpError(status, response.reason or "", url)
                elif not 200 <= status < 300:
                    raise HttpError(status, response.reason or "", url)
                else:
                    try:
                        return response.json()
                    except ValueError as exc:
                        error = exc

            # A request cut short by the capped timeout is the deadline's doing
            if deadline is not None and deadline.expired:
                raise ThreadFetchTimeout(deadline.timeout) from error
            if attempt >= max_retries:
                raise FetchExhausted(attempt, error, url) from error

            backoff = 2**attempt
            logger.warning(
                "Request to %s failed (%s), retrying in %ss (attempt %d/%d)",
                url, error, backoff, attempt, max_retries,
            )
            self._wait(backoff, deadline)
            attempt += 1
