"""Turn raw Reddit listing JSON into Post / CommentNode trees."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from reddit_threads.collection.parser import BASE_URL
from reddit_threads.collection.schemas import DELETED, CommentNode, Post


@dataclass
class ExtractedListing:
    """Result of walking one comment listing."""

    comments: list[CommentNode] = field(default_factory=list)
    # Ids withheld behind "more" stubs, in the order they were met
    more_ids: list[str] = field(default_factory=list)
    # Fullname of the post (t3_*) as reported by the first comment carrying one
    link_id: str = ""


def transform_post(raw: dict) -> Post:
    """Build a Post from the ``data`` of the post listing's first child."""
    return Post(
        id=raw["id"],
        title=raw.get("title") or "",
        author=raw.get("author") or DELETED,
        subreddit=raw.get("subreddit") or "",
        selftext=raw.get("selftext") or "",
        url=raw.get("url") or "",
        score=raw.get("score", 0),
        upvote_ratio=raw.get("upvote_ratio", 0.0),
        num_comments=raw.get("num_comments", 0),
        created_utc=raw.get("created_utc", 0.0),
        permalink=f"{BASE_URL}{raw.get('permalink', '')}",
        flair=raw.get("link_flair_text"),
        is_self=bool(raw.get("is_self", True)),
        is_nsfw=bool(raw.get("over_18", False)),
        is_spoiler=bool(raw.get("spoiler", False)),
        is_locked=bool(raw.get("locked", False)),
        is_archived=bool(raw.get("archived", False)),
        fullname=raw.get("name") or f"t3_{raw['id']}",
    )


def transform_comment(raw: dict) -> CommentNode:
    """Build a CommentNode (without replies) from a ``t1`` thing's ``data``."""
    edited = raw.get("edited")
    author = raw.get("author")
    body = raw.get("body")
    score = raw.get("score")
    depth = raw.get("depth")
    return CommentNode(
        id=raw["id"],
        author=DELETED if author is None else author,
        body=DELETED if body is None else body,
        score=0 if score is None else score,
        created_utc=raw.get("created_utc", 0.0),
        parent_id=raw.get("parent_id", ""),
        depth=0 if depth is None else depth,
        is_submitter=bool(raw.get("is_submitter", False)),
        distinguished=raw.get("distinguished"),
        stickied=bool(raw.get("stickied", False)),
        # Reddit sends ``false`` or the edit timestamp; only a timestamp counts
        edited=isinstance(edited, (int, float)) and not isinstance(edited, bool),
    )


def extract_listing(listing: object) -> ExtractedListing:
    """Walk a comment listing, recursing into each comment's ``replies``.

    ``t1`` children become CommentNodes in listing order, their nested
    listings becoming their replies. ``more`` children contribute their ids
    to ``more_ids``; no parent is recorded because each resolved comment
    carries its own ``parent_id``.
    """
    result = ExtractedListing()

    children = _children(listing)
    for child in children:
        if not isinstance(child, dict):
            continue
        kind = child.get("kind")
        data = child.get("data") or {}

        if kind == "t1":
            comment = transform_comment(data)
            if not result.link_id and data.get("link_id"):
                result.link_id = data["link_id"]

            # replies is "" when there are none, a full listing otherwise
            replies = data.get("replies")
            if isinstance(replies, dict):
                nested = extract_listing(replies)
                comment.replies = nested.comments
                result.more_ids.extend(nested.more_ids)
                if not result.link_id and nested.link_id:
                    result.link_id = nested.link_id

            result.comments.append(comment)

        elif kind == "more":
            ids = data.get("children") or []
            result.more_ids.extend(ids)

    return result


def _children(listing: object) -> list[dict]:
    if not isinstance(listing, dict):
        return []
    data = listing.get("data")
    if not isinstance(data, dict):
        return []
    children = data.get("children")
    return children if isinstance(children, list) else []


def iter_comments(comments: list[CommentNode]) -> Iterator[CommentNode]:
    """Yield every node of a comment forest in pre-order."""
    for comment in comments:
        yield comment
        yield from iter_comments(comment.replies)


def count_comments(comments: list[CommentNode]) -> int:
    """Total nodes reachable from ``comments``, replies included."""
    return sum(1 for _ in iter_comments(comments))
