"""Resolve "more comments" stubs through /api/morechildren and merge them back."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from reddit_threads.collection.client import RedditJSONClient
from reddit_threads.collection.deadline import Deadline
from reddit_threads.collection.extractor import iter_comments, transform_comment
from reddit_threads.collection.parser import build_more_children_url
from reddit_threads.collection.schemas import CommentNode
from reddit_threads.config import MAX_BATCH_SIZE
from reddit_threads.errors import BatchResolutionFailed, FetchError, ThreadFetchTimeout
from reddit_threads.logger import get_logger

logger = get_logger("resolver")


@dataclass
class ResolveStats:
    batches_attempted: int = 0
    batches_failed: int = 0
    comments_added: int = 0
    ids_skipped: int = 0  # ids left unresolved because of the batch quota


class CommentIndex:
    """Fullname → node lookup over a comment tree, kept current while merging.

    Built once with a pre-order walk of the tree, then extended as each new
    comment is placed, so a comment resolved in a later batch can find a
    parent that itself only arrived in an earlier batch.
    """

    def __init__(self, tree: list[CommentNode]) -> None:
        self._tree = tree
        self._by_fullname: dict[str, CommentNode] = {
            node.fullname: node for node in iter_comments(tree)
        }

    def __contains__(self, fullname: str) -> bool:
        return fullname in self._by_fullname

    def __len__(self) -> int:
        return len(self._by_fullname)

    def get(self, fullname: str) -> CommentNode | None:
        return self._by_fullname.get(fullname)

    def merge(self, new_comments: Iterable[CommentNode]) -> int:
        """Attach each comment under its parent, or as a new root.

        Comments are placed in the order given, not sorted by ancestry: a
        reply that arrives before its own parent becomes a root and stays
        one. Returns how many were promoted to roots.
        """
        orphans = 0
        for comment in new_comments:
            parent = self._by_fullname.get(comment.parent_id)
            if parent is not None:
                parent.replies.append(comment)
            else:
                self._tree.append(comment)
                orphans += 1
            self._by_fullname[comment.fullname] = comment
        return orphans


def merge_into_tree(tree: list[CommentNode], new_comments: Iterable[CommentNode]) -> int:
    """One-off merge; see :meth:`CommentIndex.merge`."""
    return CommentIndex(tree).merge(new_comments)


def _batches(ids: list[str], size: int) -> list[list[str]]:
    return [ids[i : i + size] for i in range(0, len(ids), size)]


def _things(payload: object) -> list[dict]:
    """``json.data.things`` of a morechildren response."""
    if not isinstance(payload, dict):
        raise ValueError("morechildren response is not an object")
    things = ((payload.get("json") or {}).get("data") or {}).get("things")
    if things is None:
        errors = (payload.get("json") or {}).get("errors")
        if errors:
            raise ValueError(f"morechildren returned errors: {errors}")
        return []
    if not isinstance(things, list):
        raise ValueError("morechildren things is not a list")
    return things


class MoreCommentsResolver:
    """Fetch withheld comments in batches and graft them onto a tree.

    Batches run one after another with ``batch_delay`` seconds between them.
    The pacing clock lives on the instance, so separate resolvers never wait
    on each other.
    """

    def __init__(
        self,
        client: RedditJSONClient,
        batch_size: int = MAX_BATCH_SIZE,
        batch_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self._batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))
        self._batch_delay = batch_delay
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _pause(self, deadline: Deadline | None) -> None:
        if self._batch_delay <= 0:
            return
        if deadline is not None:
            deadline.sleep(self._batch_delay, self._sleep)
        else:
            self._sleep(self._batch_delay)

    def _fetch_batch(
        self,
        index: int,
        ids: list[str],
        link_id: str,
        deadline: Deadline | None,
    ) -> list[CommentNode]:
        url = build_more_children_url(link_id, ids)
        try:
            payload = self._client.fetch_json(url, deadline=deadline)
            things = _things(payload)
            return [transform_comment(t.get("data") or {}) for t in things if t.get("kind") == "t1"]
        except ThreadFetchTimeout:
            raise
        except (FetchError, ValueError, KeyError, TypeError, AttributeError) as exc:
            if deadline is not None and deadline.expired:
                raise ThreadFetchTimeout(deadline.timeout) from exc
            raise BatchResolutionFailed(index, ids, exc) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(
        self,
        tree: list[CommentNode],
        more_ids: list[str],
        link_id: str,
        max_batches: int = -1,
        deadline: Deadline | None = None,
        on_batch: Callable[[int], None] | None = None,
    ) -> ResolveStats:
        """Resolve ``more_ids`` into ``tree`` in place.

        Args:
            tree: Root comments; new comments are merged into it.
            more_ids: Ids collected from "more" stubs.
            link_id: Post fullname (``t3_*``).
            max_batches: Batch quota, ``-1`` for no limit.
            deadline: Shared time budget of the surrounding thread fetch.
            on_batch: Called with the number of comments each batch added.

        A batch that cannot be fetched or parsed is logged and skipped; the
        rest still run. Only a spent ``deadline`` stops the loop early.

        Raises:
            ValueError: ``max_batches`` is below -1.
            ThreadFetchTimeout: ``deadline`` ran out.
        """
        if max_batches < -1:
            raise ValueError(f"max_batches must be -1 or >= 0, got {max_batches}")
        stats = ResolveStats()
        batches = _batches(more_ids, self._batch_size)
        if max_batches != -1:
            for skipped in batches[max_batches:]:
                stats.ids_skipped += len(skipped)
            batches = batches[:max_batches]

        index = CommentIndex(tree)

        for i, batch in enumerate(batches):
            stats.batches_attempted += 1
            try:
                new_comments = self._fetch_batch(i, batch, link_id, deadline)
            except BatchResolutionFailed as exc:
                stats.batches_failed += 1
                logger.warning("Skipping more-comments batch: %s", exc)
            else:
                if new_comments:
                    index.merge(new_comments)
                    stats.comments_added += len(new_comments)
                    if on_batch is not None:
                        on_batch(len(new_comments))

            if i + 1 < len(batches):
                self._pause(deadline)

        if stats.ids_skipped:
            logger.info(
                "Batch quota of %d reached, %d more-comment ids left unresolved",
                max_batches, stats.ids_skipped,
            )
        return stats
