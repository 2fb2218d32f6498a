"""Tests for flattening a thread into a DataFrame."""

from __future__ import annotations

import pandas as pd

from reddit_threads.collection.schemas import CommentNode, Post, ThreadMetadata, ThreadResult
from reddit_threads.reporting.frames import thread_to_frame, write_frame


def _thread(comments):
    post = Post(
        id="abc123", title="T", author="op", subreddit="test", selftext="body", url="",
        score=1, upvote_ratio=1.0, num_comments=2, created_utc=1_700_000_000.0,
        permalink="", flair=None, is_self=True,
    )
    meta = ThreadMetadata(fetched_at="2026-01-01T00:00:00+00:00", total_comments_fetched=2,
                          tool_version="1.0.0")
    return ThreadResult(post=post, comments=comments, metadata=meta)


def _comments():
    reply = CommentNode(id="c2", parent_id="t1_c1", depth=1, created_utc=1_700_000_100.0)
    return [CommentNode(id="c1", parent_id="t3_abc123", created_utc=1_700_000_050.0,
                        replies=[reply])]


def test_post_row_then_comments_in_preorder():
    df = thread_to_frame(_thread(_comments()))
    assert list(df["record_type"]) == ["post", "comment", "comment"]
    assert list(df["id"]) == ["abc123", "c1", "c2"]
    assert df.loc[2, "parent_id"] == "t1_c1"
    assert df.loc[1, "num_replies"] == 1
    assert pd.isna(df.loc[0, "depth"])


def test_created_utc_is_timezone_aware():
    df = thread_to_frame(_thread(_comments()))
    assert str(df["created_utc"].dt.tz) == "UTC"


def test_thread_without_comments():
    df = thread_to_frame(_thread([]))
    assert len(df) == 1


def test_write_frame_csv_and_parquet(tmp_path):
    df = thread_to_frame(_thread(_comments()))
    csv = write_frame(df, tmp_path / "out" / "thread.csv")
    parquet = write_frame(df, tmp_path / "out" / "thread.parquet")
    assert len(pd.read_csv(csv)) == 3
    assert list(pd.read_parquet(parquet)["id"]) == ["abc123", "c1", "c2"]
