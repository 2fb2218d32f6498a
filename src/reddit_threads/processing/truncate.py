"""Cap a comment tree at a node budget while keeping its shape."""

from __future__ import annotations

from reddit_threads.collection.schemas import CommentNode


def truncate_comments(comments: list[CommentNode], limit: int) -> list[CommentNode]:
    """Return a copy of ``comments`` holding at most ``limit`` nodes.

    Nodes are kept in pre-order (a root, then all of its replies, then the
    next root) against a single counter for the whole forest, so an early
    large branch can use up the budget before later roots are reached.
    ``limit == -1`` returns ``comments`` itself. The input is never modified.
    """
    if limit == -1:
        return comments

    kept = 0

    def _level(nodes: list[CommentNode]) -> list[CommentNode]:
        nonlocal kept
        result: list[CommentNode] = []
        for node in nodes:
            if kept >= limit:
                break
            kept += 1
            result.append(node.copy(replies=_level(node.replies)))
        return result

    return _level(comments)
