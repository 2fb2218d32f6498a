"""Tests for Post, CommentNode and ThreadResult dataclasses."""

from dataclasses import FrozenInstanceError

import pytest

from reddit_threads.collection.schemas import (
    CommentNode,
    Post,
    PostRef,
    ThreadMetadata,
    ThreadResult,
)


def _make_post(**kwargs) -> Post:
    defaults = dict(
        id="abc123",
        title="Mechanical keyboard review",
        author="user1",
        subreddit="keyboards",
        selftext="Great board!",
        url="https://www.reddit.com/r/keyboards/comments/abc123/",
        score=100,
        upvote_ratio=0.95,
        num_comments=10,
        created_utc=1_700_000_000.0,
        permalink="https://www.reddit.com/r/keyboards/comments/abc123/review/",
        flair="Review",
        is_self=True,
        fullname="t3_abc123",
    )
    defaults.update(kwargs)
    return Post(**defaults)


def _make_comment(**kwargs) -> CommentNode:
    defaults = dict(
        id="cmt1",
        author="user2",
        body="I agree!",
        score=5,
        created_utc=1_700_000_100.0,
        parent_id="t3_abc123",
        depth=0,
    )
    defaults.update(kwargs)
    return CommentNode(**defaults)


def test_post_to_dict_uses_camel_case():
    d = _make_post().to_dict()
    assert d["upvoteRatio"] == 0.95
    assert d["numComments"] == 10
    assert d["isSelf"] is True
    assert "fullname" not in d


def test_comment_defaults():
    cmt = CommentNode(id="x")
    assert cmt.author == "[deleted]"
    assert cmt.body == "[deleted]"
    assert cmt.replies == []
    assert cmt.fullname == "t1_x"


def test_comment_is_deleted():
    assert _make_comment(author="[deleted]").is_deleted
    assert _make_comment(body="[removed]").is_deleted
    assert not _make_comment().is_deleted


def test_comment_to_dict_nests_replies():
    cmt = _make_comment(replies=[_make_comment(id="cmt2", parent_id="t1_cmt1", depth=1)])
    d = cmt.to_dict()
    assert d["parentId"] == "t3_abc123"
    assert d["replies"][0]["id"] == "cmt2"
    assert d["replies"][0]["replies"] == []


def test_comment_copy_has_own_replies_list():
    child = _make_comment(id="cmt2")
    cmt = _make_comment(replies=[child])
    clone = cmt.copy()
    clone.replies.append(_make_comment(id="cmt3"))
    assert len(cmt.replies) == 1
    assert clone.replies[0] is child
    assert cmt.copy(replies=[]).replies == []


def test_post_ref_is_immutable():
    ref = PostRef("", "abc123", "https://www.reddit.com/comments/abc123")
    with pytest.raises(FrozenInstanceError):
        ref.subreddit = "x"  # type: ignore[misc]
    filled = ref.with_subreddit("keyboards")
    assert filled.subreddit == "keyboards"
    assert ref.subreddit == ""


def test_thread_with_comments_leaves_original():
    comments = [_make_comment()]
    thread = ThreadResult(
        post=_make_post(),
        comments=comments,
        metadata=ThreadMetadata("2026-01-01T00:00:00+00:00", 1, "1.0.0"),
    )
    trimmed = thread.with_comments([])
    assert trimmed.comments == []
    assert thread.comments is comments
    assert thread.to_dict()["metadata"] == {
        "fetchedAt": "2026-01-01T00:00:00+00:00",
        "totalCommentsFetched": 1,
        "toolVersion": "1.0.0",
    }
