"""Non-destructive comment-tree filters (score, deleted, OP, depth, top N)."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from reddit_threads.collection.schemas import CommentNode


@dataclass(frozen=True)
class FilterOptions:
    min_score: int | None = None
    skip_deleted: bool = False
    op_only: bool = False
    max_depth: int | None = None
    top: int | None = None  # keep only the first N root comments


def filter_tree(
    comments: list[CommentNode],
    predicate: Callable[[CommentNode], bool],
) -> list[CommentNode]:
    """Keep nodes matching ``predicate``.

    A node that fails takes its whole subtree with it, even replies that
    would have matched.
    """
    return [
        c.copy(replies=filter_tree(c.replies, predicate))
        for c in comments
        if predicate(c)
    ]


def trim_depth(comments: list[CommentNode], max_depth: int) -> list[CommentNode]:
    """Drop replies below nodes at ``depth >= max_depth``."""
    result: list[CommentNode] = []
    for c in comments:
        if c.depth >= max_depth:
            result.append(c.copy(replies=[]))
        else:
            result.append(c.copy(replies=trim_depth(c.replies, max_depth)))
    return result


def apply_filters(comments: list[CommentNode], options: FilterOptions) -> list[CommentNode]:
    """Apply every filter set in ``options``; returns a new tree."""
    filtered = comments

    if options.min_score is not None:
        min_score = options.min_score
        filtered = filter_tree(filtered, lambda c: c.score >= min_score)

    if options.skip_deleted:
        filtered = filter_tree(filtered, lambda c: not c.is_deleted)

    if options.op_only:
        filtered = filter_tree(filtered, lambda c: c.is_submitter)

    if options.max_depth is not None:
        filtered = trim_depth(filtered, options.max_depth)

    if options.top is not None:
        filtered = filtered[: options.top]

    return filtered


def estimate_tokens(text: str) -> int:
    """Rough LLM token estimate (~4 characters per token)."""
    return math.ceil(len(text) / 4)
