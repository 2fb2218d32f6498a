"""Render a ThreadResult as Markdown, JSON or plain text."""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from reddit_threads.collection.schemas import CommentNode, Post, ThreadResult

_TEMPLATES_DIR = Path(__file__).parent / "templates"

FORMAT_EXTENSIONS: dict[str, str] = {
    "md": ".md",
    "json": ".json",
    "text": ".txt",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def relative_time(utc_timestamp: float, now: float | None = None) -> str:
    diff = (time.time() if now is None else now) - utc_timestamp
    if diff < 60:
        return "just now"
    if diff < 3600:
        return f"{int(diff // 60)}m ago"
    if diff < 86400:
        return f"{int(diff // 3600)}h ago"
    if diff < 2592000:
        return f"{int(diff // 86400)}d ago"
    if diff < 31536000:
        return f"{int(diff // 2592000)}mo ago"
    return f"{int(diff // 31536000)}y ago"


def _long_date(utc_timestamp: float) -> str:
    dt = datetime.fromtimestamp(utc_timestamp, tz=UTC)
    return f"{dt:%B} {dt.day}, {dt.year}"


def _indent_lines(text: str, prefix: str) -> str:
    return "\n".join(f"{prefix}{line}" for line in text.split("\n"))


def _comment_badges(comment: CommentNode) -> str:
    badges = ""
    if comment.is_submitter:
        badges += " **[OP]**"
    if comment.distinguished == "moderator":
        badges += " **[MOD]**"
    if comment.stickied:
        badges += " 📌"
    return badges


def _post_badges(post: Post) -> list[str]:
    badges: list[str] = []
    if post.flair:
        badges.append(f"🏷️ {post.flair}")
    if post.is_nsfw:
        badges.append("🔞 NSFW")
    if post.is_spoiler:
        badges.append("⚠️ Spoiler")
    if post.is_locked:
        badges.append("🔒 Locked")
    if post.is_archived:
        badges.append("📦 Archived")
    return badges


def _walk(comments: list[CommentNode], indent: int = 0) -> Iterator[tuple[int, CommentNode]]:
    for comment in comments:
        yield indent, comment
        yield from _walk(comment.replies, indent + 1)


def _environment(now: float | None) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["relative_time"] = lambda ts: relative_time(ts, now)
    env.filters["long_date"] = _long_date
    env.filters["indent_lines"] = _indent_lines
    env.filters["comment_badges"] = _comment_badges
    return env


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_markdown(thread: ThreadResult, now: float | None = None) -> str:
    """Markdown document: post header, body, nested comment list, footer."""
    template = _environment(now).get_template("thread.md.j2")
    return template.render(
        post=thread.post,
        metadata=thread.metadata,
        badges=_post_badges(thread.post),
        entries=list(_walk(thread.comments)),
    )


def format_json(thread: ThreadResult) -> str:
    return json.dumps(thread.to_dict(), indent=2, ensure_ascii=False)


def _render_text_comment(comment: CommentNode) -> str:
    indent = "  " * comment.depth
    op_tag = " [OP]" if comment.is_submitter else ""
    header = f"{indent}[{comment.depth}] u/{comment.author} ({comment.score} pts){op_tag}:"
    output = f"{header}\n{_indent_lines(comment.body, indent + '  ')}\n"
    for reply in comment.replies:
        output += _render_text_comment(reply)
    return output


def format_text(thread: ThreadResult) -> str:
    """Plain text, indented by reported depth; the most token-efficient form."""
    post, metadata = thread.post, thread.metadata
    date = datetime.fromtimestamp(post.created_utc, tz=UTC).strftime("%Y-%m-%d")

    text = f"TITLE: {post.title}\n"
    text += (
        f"SUBREDDIT: r/{post.subreddit} | AUTHOR: u/{post.author} | "
        f"SCORE: {post.score} | COMMENTS: {metadata.total_comments_fetched}\n"
    )
    text += f"DATE: {date}\n"
    text += "\n---\n"
    if post.is_self and post.selftext:
        text += post.selftext + "\n"
    elif not post.is_self:
        text += f"LINK: {post.url}\n"
    text += "---\n\n"

    for comment in thread.comments:
        text += _render_text_comment(comment)
    return text


FORMATTERS: dict[str, Callable[[ThreadResult], str]] = {
    "md": format_markdown,
    "json": format_json,
    "text": format_text,
}
