"""Fetch a Reddit thread: post + complete comment tree, "more" stubs resolved."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from reddit_threads.collection.client import RedditJSONClient
from reddit_threads.collection.deadline import Deadline
from reddit_threads.collection.extractor import count_comments, extract_listing, transform_post
from reddit_threads.collection.parser import build_json_url, parse_reference
from reddit_threads.collection.resolver import MoreCommentsResolver
from reddit_threads.collection.schemas import PostRef, ThreadMetadata, ThreadResult
from reddit_threads.config import TOOL_VERSION, FetchConfig
from reddit_threads.errors import ThreadFetchFailed
from reddit_threads.logger import get_logger

logger = get_logger("assembler")

ProgressCallback = Callable[[str], None]


def _noop(_message: str) -> None:
    return None


class ThreadAssembler:
    """Sequence one thread fetch: post page → extract → resolve more → count.

    Holds no per-thread state, so one assembler may serve many fetches at
    once; every call builds and returns its own tree.
    """

    def __init__(
        self,
        client: RedditJSONClient | None = None,
        resolver: MoreCommentsResolver | None = None,
        config: FetchConfig | None = None,
    ) -> None:
        self._cfg = config or (client.config if client is not None else FetchConfig())
        self._client = client or RedditJSONClient(self._cfg)
        self._resolver = resolver or MoreCommentsResolver(
            self._client,
            batch_size=self._cfg.batch_size,
            batch_delay=self._cfg.batch_delay,
        )

    def fetch_thread(
        self,
        ref: PostRef,
        sort: str = "confidence",
        max_more_batches: int = -1,
        on_progress: ProgressCallback | None = None,
        timeout: float | None = None,
    ) -> ThreadResult:
        """Fetch the post behind ``ref`` with every comment Reddit will give.

        Args:
            ref: Parsed post reference.
            sort: Comment sort passed to Reddit (``confidence``, ``top``, ...).
            max_more_batches: Quota of /api/morechildren batches, -1 = no limit.
            on_progress: Receives human-readable status lines.
            timeout: Seconds for the whole fetch, HTTP calls and sleeps included.

        Raises:
            HttpError, FetchExhausted: the post page itself could not be fetched.
            ThreadFetchFailed: the response is not a [post, comments] pair.
            ThreadFetchTimeout: ``timeout`` elapsed.
        """
        progress = on_progress or _noop
        deadline = Deadline(timeout) if timeout is not None else None

        progress("Fetching post and comments...")
        data = self._client.fetch_json(build_json_url(ref, sort), deadline=deadline)

        if not isinstance(data, list) or len(data) < 2:
            raise ThreadFetchFailed()

        try:
            raw_post = data[0]["data"]["children"][0]["data"]
            post = transform_post(raw_post)
        except (KeyError, IndexError, TypeError) as exc:
            raise ThreadFetchFailed("Response contains no post.") from exc

        if not ref.subreddit:
            ref = ref.with_subreddit(post.subreddit)

        try:
            extracted = extract_listing(data[1])
        except (KeyError, TypeError, AttributeError) as exc:
            raise ThreadFetchFailed("Response contains a malformed comment.") from exc
        comments = extracted.comments
        fetched = count_comments(comments)
        progress(f"Fetched {fetched} comments...")

        if extracted.more_ids:
            progress(f"Resolving {len(extracted.more_ids)} additional comment threads...")

            def _on_batch(added: int) -> None:
                nonlocal fetched
                fetched += added
                progress(f"Fetched {fetched} comments...")

            self._resolver.resolve(
                comments,
                extracted.more_ids,
                post.fullname or extracted.link_id,
                max_batches=max_more_batches,
                deadline=deadline,
                on_batch=_on_batch,
            )

        total = count_comments(comments)
        logger.info(
            "Fetched r/%s/%s: %d comments (post reports %d)",
            ref.subreddit, ref.post_id, total, post.num_comments,
        )

        return ThreadResult(
            post=post,
            comments=comments,
            metadata=ThreadMetadata(
                fetched_at=datetime.now(tz=UTC).isoformat(),
                total_comments_fetched=total,
                tool_version=TOOL_VERSION,
            ),
            ref=ref,
        )


def fetch_thread(
    reference: str,
    sort: str = "confidence",
    max_more_batches: int = -1,
    on_progress: ProgressCallback | None = None,
    timeout: float | None = None,
    assembler: ThreadAssembler | None = None,
) -> ThreadResult:
    """Parse ``reference`` (URL, shorthand or ID) and fetch the thread."""
    ref = parse_reference(reference)
    return (assembler or ThreadAssembler()).fetch_thread(
        ref,
        sort=sort,
        max_more_batches=max_more_batches,
        on_progress=on_progress,
        timeout=timeout,
    )
