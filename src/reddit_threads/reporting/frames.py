"""Flatten a ThreadResult into a pandas DataFrame (one row per record)."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pandas as pd

from reddit_threads.collection.extractor import iter_comments
from reddit_threads.collection.schemas import ThreadResult

TABULAR_FORMATS = {"parquet": ".parquet", "csv": ".csv"}


def thread_to_frame(thread: ThreadResult) -> pd.DataFrame:
    """Post row first, then every comment in pre-order.

    ``parent_id`` / ``depth`` keep the tree recoverable from the flat table.
    """
    post = thread.post
    records: list[dict] = [
        {
            "id": post.id,
            "record_type": "post",
            "post_id": post.id,
            "subreddit": post.subreddit,
            "author": post.author,
            "title": post.title,
            "body": post.selftext,
            "score": post.score,
            "created_utc": datetime.fromtimestamp(post.created_utc, tz=UTC),
            "parent_id": None,
            "depth": None,
            "is_submitter": True,
            "num_replies": None,
        }
    ]
    for comment in iter_comments(thread.comments):
        records.append(
            {
                "id": comment.id,
                "record_type": "comment",
                "post_id": post.id,
                "subreddit": post.subreddit,
                "author": comment.author,
                "title": None,
                "body": comment.body,
                "score": comment.score,
                "created_utc": datetime.fromtimestamp(comment.created_utc, tz=UTC),
                "parent_id": comment.parent_id,
                "depth": comment.depth,
                "is_submitter": comment.is_submitter,
                "num_replies": len(comment.replies),
            }
        )

    df = pd.DataFrame(records)
    for column in ("depth", "num_replies"):
        df[column] = pd.to_numeric(df[column]).astype("Int64")
    return df


def write_frame(df: pd.DataFrame, path: Path) -> Path:
    """Write Parquet or CSV depending on ``path``'s suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix == ".csv":
        df.to_csv(path, index=False)
    else:
        df.to_parquet(path, index=False)
    return path
