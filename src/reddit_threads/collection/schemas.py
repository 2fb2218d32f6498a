"""Dataclasses for a fetched Reddit thread: post, comment tree and metadata."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

DELETED = "[deleted]"
REMOVED = "[removed]"


@dataclass(frozen=True)
class PostRef:
    """Where a post lives, as parsed from user input."""

    subreddit: str  # empty until the post has been fetched (bare-ID input)
    post_id: str
    canonical_url: str

    def with_subreddit(self, subreddit: str) -> PostRef:
        return replace(self, subreddit=subreddit)


@dataclass(frozen=True)
class Post:
    """A single Reddit post (submission)."""

    id: str
    title: str
    author: str
    subreddit: str
    selftext: str
    url: str
    score: int
    upvote_ratio: float
    num_comments: int
    created_utc: float
    permalink: str
    flair: str | None
    is_self: bool
    is_nsfw: bool = False
    is_spoiler: bool = False
    is_locked: bool = False
    is_archived: bool = False
    # e.g. t3_abc123, used as link_id for /api/morechildren
    fullname: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "subreddit": self.subreddit,
            "selftext": self.selftext,
            "url": self.url,
            "score": self.score,
            "upvoteRatio": self.upvote_ratio,
            "numComments": self.num_comments,
            "createdUtc": self.created_utc,
            "permalink": self.permalink,
            "flair": self.flair,
            "isSelf": self.is_self,
            "isNsfw": self.is_nsfw,
            "isSpoiler": self.is_spoiler,
            "isLocked": self.is_locked,
            "isArchived": self.is_archived,
        }


@dataclass
class CommentNode:
    """A single Reddit comment and the replies it owns."""

    id: str
    author: str = DELETED
    body: str = DELETED
    score: int = 0
    created_utc: float = 0.0
    parent_id: str = ""  # fullname of the parent: t3_* for roots, t1_* otherwise
    depth: int = 0  # as reported by Reddit, never recomputed
    is_submitter: bool = False
    distinguished: str | None = None
    stickied: bool = False
    edited: bool = False
    replies: list[CommentNode] = field(default_factory=list)

    @property
    def fullname(self) -> str:
        return f"t1_{self.id}"

    @property
    def is_deleted(self) -> bool:
        return self.author == DELETED or self.body in (DELETED, REMOVED)

    def copy(self, replies: list[CommentNode] | None = None) -> CommentNode:
        """Shallow copy; the copy gets its own replies list."""
        return replace(self, replies=list(self.replies if replies is None else replies))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author,
            "body": self.body,
            "score": self.score,
            "createdUtc": self.created_utc,
            "parentId": self.parent_id,
            "depth": self.depth,
            "isSubmitter": self.is_submitter,
            "edited": self.edited,
            "distinguished": self.distinguished,
            "stickied": self.stickied,
            "replies": [reply.to_dict() for reply in self.replies],
        }


@dataclass(frozen=True)
class ThreadMetadata:
    fetched_at: str  # ISO-8601, UTC
    total_comments_fetched: int
    tool_version: str

    def to_dict(self) -> dict:
        return {
            "fetchedAt": self.fetched_at,
            "totalCommentsFetched": self.total_comments_fetched,
            "toolVersion": self.tool_version,
        }


@dataclass(frozen=True)
class ThreadResult:
    """A post with its full comment forest.

    Treated as read-only once returned: filtering and truncation build new
    trees through :meth:`with_comments` instead of editing this one.
    """

    post: Post
    comments: list[CommentNode]
    metadata: ThreadMetadata
    ref: PostRef | None = None

    def with_comments(self, comments: list[CommentNode]) -> ThreadResult:
        return replace(self, comments=comments)

    def to_dict(self) -> dict:
        return {
            "post": self.post.to_dict(),
            "comments": [c.to_dict() for c in self.comments],
            "metadata": self.metadata.to_dict(),
        }
