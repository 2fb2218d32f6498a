"""Parse Reddit post URLs / shorthands / IDs and build API URLs."""

from __future__ import annotations

import re

from reddit_threads.collection.schemas import PostRef
from reddit_threads.errors import InvalidReference

BASE_URL = "https://www.reddit.com"
MORE_CHILDREN_URL = f"{BASE_URL}/api/morechildren.json"

SORT_ORDERS = ("confidence", "top", "new", "controversial", "old", "qa")
_SORT_ALIASES = {"best": "confidence"}

_URL_RE = re.compile(
    r"(?:https?://)?(?:(?:www|old|new)\.)?reddit\.com/r/([^/]+)/comments/([a-z0-9]+)",
    re.IGNORECASE,
)
_SHORT_RE = re.compile(r"^r/([^/]+)/comments/([a-z0-9]+)", re.IGNORECASE)
_ID_RE = re.compile(r"^[a-z0-9]{5,10}$", re.IGNORECASE)


def parse_reference(text: str) -> PostRef:
    """Parse user input into a :class:`PostRef`.

    Accepted formats:
        - https://www.reddit.com/r/subreddit/comments/postid/slug/
        - https://old.reddit.com/r/subreddit/comments/postid/slug/
        - reddit.com/r/subreddit/comments/postid
        - r/subreddit/comments/postid
        - a bare post ID (5-10 alphanumerics), e.g. "1abcdef"

    A bare ID leaves ``subreddit`` empty; it is filled in once the post
    has been fetched.

    Raises:
        InvalidReference: if the input matches none of the above.
    """
    trimmed = (text or "").strip()

    match = _URL_RE.search(trimmed) or _SHORT_RE.match(trimmed)
    if match:
        subreddit, post_id = match.group(1), match.group(2)
        return PostRef(
            subreddit=subreddit,
            post_id=post_id,
            canonical_url=f"{BASE_URL}/r/{subreddit}/comments/{post_id}",
        )

    if _ID_RE.match(trimmed):
        return PostRef(
            subreddit="",
            post_id=trimmed,
            canonical_url=f"{BASE_URL}/comments/{trimmed}",
        )

    raise InvalidReference(trimmed)


def normalize_sort(sort: str) -> str:
    """Map a user-supplied comment sort to the value Reddit expects."""
    value = (sort or "").strip().lower()
    value = _SORT_ALIASES.get(value, value)
    if value not in SORT_ORDERS:
        raise ValueError(
            f"Invalid sort {sort!r}. Use one of: best, {', '.join(SORT_ORDERS)}"
        )
    return value


def build_json_url(ref: PostRef, sort: str = "confidence") -> str:
    """JSON endpoint for a post and its comment listing."""
    query = f"?sort={sort}" if sort else ""
    return f"{ref.canonical_url}.json{query}"


def build_more_children_url(link_id: str, ids: list[str]) -> str:
    """``/api/morechildren`` URL for one batch of more-stub ids."""
    children = ",".join(ids)
    return f"{MORE_CHILDREN_URL}?api_type=json&link_id={link_id}&children={children}"
