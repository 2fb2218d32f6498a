"""Tests for listing → CommentNode tree extraction."""

from __future__ import annotations

from reddit_threads.collection.extractor import (
    count_comments,
    extract_listing,
    iter_comments,
    transform_comment,
    transform_post,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _comment(cid, parent="t3_abc123", depth=0, replies=None, **extra):
    data = {
        "id": cid,
        "name": f"t1_{cid}",
        "author": "commenter",
        "body": f"body of {cid}",
        "score": 3,
        "created_utc": 1_700_000_000.0,
        "parent_id": parent,
        "link_id": "t3_abc123",
        "depth": depth,
        "is_submitter": False,
        "edited": False,
        "distinguished": None,
        "stickied": False,
        "replies": _listing(replies) if replies else "",
    }
    data.update(extra)
    return {"kind": "t1", "data": data}


def _more(ids, parent="t3_abc123"):
    return {
        "kind": "more",
        "data": {
            "id": ids[0] if ids else "_",
            "parent_id": parent,
            "count": len(ids),
            "children": ids,
        },
    }


def _listing(children):
    return {"kind": "Listing", "data": {"children": children, "after": None, "before": None}}


def _post_data(**extra):
    data = {
        "id": "abc123",
        "name": "t3_abc123",
        "title": "A question",
        "author": "op_user",
        "subreddit": "test",
        "selftext": "Body text",
        "url": "https://www.reddit.com/r/test/comments/abc123/a_question/",
        "score": 42,
        "upvote_ratio": 0.93,
        "num_comments": 12,
        "created_utc": 1_700_000_000.0,
        "permalink": "/r/test/comments/abc123/a_question/",
        "link_flair_text": "Help",
        "is_self": True,
        "over_18": False,
        "spoiler": True,
        "locked": False,
        "archived": True,
    }
    data.update(extra)
    return data


# ---------------------------------------------------------------------------
# transform_post / transform_comment
# ---------------------------------------------------------------------------


def test_transform_post_fields():
    post = transform_post(_post_data())
    assert post.id == "abc123"
    assert post.fullname == "t3_abc123"
    assert post.permalink == "https://www.reddit.com/r/test/comments/abc123/a_question/"
    assert post.flair == "Help"
    assert post.is_spoiler and post.is_archived
    assert not post.is_nsfw and not post.is_locked


def test_transform_post_fullname_fallback():
    data = _post_data()
    del data["name"]
    assert transform_post(data).fullname == "t3_abc123"


def test_transform_comment_deleted_defaults():
    raw = _comment("c1")["data"]
    del raw["author"]
    del raw["body"]
    comment = transform_comment(raw)
    assert comment.author == "[deleted]"
    assert comment.body == "[deleted]"
    assert comment.replies == []


def test_transform_comment_edited_timestamp_only():
    assert transform_comment(_comment("c1", edited=1_700_000_500.0)["data"]).edited is True
    assert transform_comment(_comment("c1", edited=1_700_000_500)["data"]).edited is True
    assert transform_comment(_comment("c1", edited=False)["data"]).edited is False
    assert transform_comment(_comment("c1", edited=True)["data"]).edited is False


def test_transform_comment_flags():
    comment = transform_comment(
        _comment("c1", is_submitter=True, distinguished="moderator", stickied=True)["data"]
    )
    assert comment.is_submitter
    assert comment.distinguished == "moderator"
    assert comment.stickied
    assert comment.fullname == "t1_c1"


# ---------------------------------------------------------------------------
# extract_listing
# ---------------------------------------------------------------------------


def test_three_roots_with_nested_reply_and_more():
    listing = _listing([
        _comment("a"),
        _comment("b", replies=[_comment("b1", parent="t1_b", depth=1), _more(["c1", "c2"], "t1_b")]),
        _comment("c"),
    ])
    result = extract_listing(listing)
    assert [c.id for c in result.comments] == ["a", "b", "c"]
    assert [r.id for r in result.comments[1].replies] == ["b1"]
    assert result.more_ids == ["c1", "c2"]
    assert result.link_id == "t3_abc123"


def test_counts_match_t1_children_at_every_depth():
    listing = _listing([
        _comment("a", replies=[
            _comment("a1", "t1_a", 1, replies=[
                _comment("a11", "t1_a1", 2),
                _more(["m3"], "t1_a1"),
            ]),
            _comment("a2", "t1_a", 1),
        ]),
        _more(["m1", "m2"]),
        _comment("b"),
    ])
    result = extract_listing(listing)
    assert count_comments(result.comments) == 5
    assert sorted(result.more_ids) == ["m1", "m2", "m3"]
    assert len(result.more_ids) == len(set(result.more_ids))


def test_preorder_iteration_order():
    listing = _listing([
        _comment("a", replies=[_comment("a1", "t1_a", 1), _comment("a2", "t1_a", 1)]),
        _comment("b"),
    ])
    result = extract_listing(listing)
    assert [c.id for c in iter_comments(result.comments)] == ["a", "a1", "a2", "b"]


def test_more_without_children_ignored():
    result = extract_listing(_listing([_comment("a"), _more([])]))
    assert result.more_ids == []
    assert len(result.comments) == 1


def test_link_id_from_nested_comment():
    root = _comment("a", replies=[_comment("a1", "t1_a", 1)])
    del root["data"]["link_id"]
    result = extract_listing(_listing([root]))
    assert result.link_id == "t3_abc123"


def test_depth_is_taken_from_source():
    result = extract_listing(_listing([_comment("a", depth=4)]))
    assert result.comments[0].depth == 4


def test_empty_or_malformed_listing():
    for raw in (None, {}, {"data": None}, {"data": {"children": None}}, "", []):
        result = extract_listing(raw)
        assert result.comments == []
        assert result.more_ids == []
        assert result.link_id == ""


def test_non_dict_children_skipped():
    result = extract_listing(_listing(["junk", None, _comment("a"), 42]))
    assert [c.id for c in result.comments] == ["a"]
