"""Tests for comment-tree filters."""

from __future__ import annotations

from reddit_threads.collection.extractor import count_comments, iter_comments
from reddit_threads.collection.schemas import CommentNode
from reddit_threads.processing.filters import FilterOptions, apply_filters, estimate_tokens


def _node(cid, *replies, score=1, depth=0, author="user", body=None, op=False):
    return CommentNode(
        id=cid,
        author=author,
        body=body if body is not None else f"text {cid}",
        score=score,
        depth=depth,
        is_submitter=op,
        replies=list(replies),
    )


def _tree():
    return [
        _node(
            "a",
            _node("a1", _node("a11", score=9, depth=2), score=-2, depth=1),
            _node("a2", score=7, depth=1, op=True),
            score=10,
        ),
        _node("b", _node("b1", depth=1, op=True), author="[deleted]", score=5),
        _node("c", body="[removed]", score=0),
        _node("d", score=3, op=True),
    ]


def _ids(comments):
    return [c.id for c in iter_comments(comments)]


def test_no_options_keeps_everything():
    tree = _tree()
    assert _ids(apply_filters(tree, FilterOptions())) == _ids(tree)


def test_min_score_drops_whole_subtree():
    result = apply_filters(_tree(), FilterOptions(min_score=1))
    # a1 fails, so its high-scoring reply a11 goes too
    assert _ids(result) == ["a", "a2", "b", "b1", "d"]


def test_skip_deleted():
    result = apply_filters(_tree(), FilterOptions(skip_deleted=True))
    assert _ids(result) == ["a", "a1", "a11", "a2", "d"]


def test_op_only():
    result = apply_filters(_tree(), FilterOptions(op_only=True))
    assert _ids(result) == ["d"]


def test_max_depth():
    result = apply_filters(_tree(), FilterOptions(max_depth=1))
    assert _ids(result) == ["a", "a1", "a2", "b", "b1", "c", "d"]
    assert apply_filters(_tree(), FilterOptions(max_depth=0))[0].replies == []


def test_top_n_roots():
    result = apply_filters(_tree(), FilterOptions(top=2))
    assert [c.id for c in result] == ["a", "b"]
    assert count_comments(result) == 6


def test_filters_are_non_destructive():
    tree = _tree()
    apply_filters(tree, FilterOptions(min_score=100, max_depth=0))
    assert count_comments(tree) == 8


def test_estimate_tokens():
    assert estimate_tokens("") == 0
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2
