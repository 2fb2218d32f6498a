"""Exception hierarchy for reddit-threads."""

from __future__ import annotations


class RedditThreadsError(Exception):
    """Base exception for all reddit-threads errors."""

    def __init__(self, message: str = "An error occurred in reddit-threads"):
        self.message = message
        super().__init__(self.message)


class InvalidReference(RedditThreadsError):
    """Input is not a Reddit post URL, shorthand or post ID."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f'Invalid Reddit URL or post ID: "{text}"\n'
            "Expected formats:\n"
            "  - https://www.reddit.com/r/subreddit/comments/postid/\n"
            "  - r/subreddit/comments/postid\n"
            '  - A post ID like "1abcdef"'
        )


class FetchError(RedditThreadsError):
    """Base exception for failures talking to Reddit."""

    def __init__(self, message: str = "Failed to fetch data from Reddit"):
        super().__init__(message)


class HttpError(FetchError):
    """Non-retryable, non-2xx response (e.g. 404 for a deleted post)."""

    def __init__(self, status: int, status_text: str = "", url: str = ""):
        self.status = status
        self.status_text = status_text
        self.url = url
        super().__init__(f"HTTP {status}: {status_text}".rstrip(": "))


class FetchExhausted(FetchError):
    """Transient failures (429/5xx/network) outlasted the retry budget."""

    def __init__(self, attempts: int, last_error: object = None, url: str = ""):
        self.attempts = attempts
        self.last_error = last_error
        self.url = url
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


class ThreadFetchTimeout(FetchError):
    """The whole thread fetch ran past its deadline."""

    def __init__(self, timeout: float | None = None):
        self.timeout = timeout
        if timeout is None:
            message = "Thread fetch timed out"
        else:
            message = f"Thread fetch timed out after {timeout:g}s"
        super().__init__(message)


class ThreadFetchFailed(RedditThreadsError):
    """The post endpoint did not return the expected [post, comments] listings."""

    def __init__(
        self,
        message: str = (
            "Unexpected API response format. "
            "Make sure the URL points to a valid Reddit post."
        ),
    ):
        super().__init__(message)


class BatchResolutionFailed(RedditThreadsError):
    """One more-children batch could not be resolved.

    Only ever raised and handled inside the resolver; a missing batch means
    fewer comments, never a failed thread.
    """

    def __init__(self, batch_index: int, ids: list[str], cause: BaseException):
        self.batch_index = batch_index
        self.ids = ids
        self.cause = cause
        super().__init__(
            f"Batch {batch_index + 1} ({len(ids)} ids) could not be resolved: {cause}"
        )


class ServerBusy(RedditThreadsError):
    """Every worker slot is taken."""

    def __init__(self, message: str = "Server is busy. Please try again in a moment."):
        super().__init__(message)
