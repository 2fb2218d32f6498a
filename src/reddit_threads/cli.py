"""Click CLI: fetch | serve."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from reddit_threads.config import TOOL_VERSION, fetch_config, log_config
from reddit_threads.logger import setup_logger

_FORMATS = ("md", "json", "text", "parquet", "csv")
_SORTS = ("best", "confidence", "top", "new", "controversial", "old", "qa")


@click.group()
@click.version_option(TOOL_VERSION, prog_name="reddit-threads")
@click.option("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
def cli(log_level: str | None) -> None:
    """Download complete Reddit threads (post + all comments) in AI-friendly formats."""
    setup_logger(log_level or log_config.log_level)


@cli.command()
@click.argument("url")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(_FORMATS),
    default="md",
    show_default=True,
    help="Output format",
)
@click.option("--output", "-o", type=click.Path(), default=None, help="Output file path")
@click.option(
    "--stdout", "to_stdout", is_flag=True, default=False, help="Print instead of writing a file"
)
@click.option(
    "--sort",
    type=click.Choice(_SORTS, case_sensitive=False),
    default=fetch_config.default_sort,
    show_default=True,
    help="Comment sort order",
)
@click.option("--min-score", type=int, default=None, help="Only include comments with score >= N")
@click.option("--max-depth", type=int, default=None, help="Limit comment nesting depth")
@click.option("--skip-deleted", is_flag=True, default=False, help="Skip deleted/removed comments")
@click.option("--op-only", is_flag=True, default=False, help="Only include comments by OP")
@click.option("--top", type=int, default=None, help="Only include the top N root comments")
@click.option(
    "--limit",
    type=click.IntRange(min=-1),
    default=-1,
    help="Keep at most N comments in total (-1 = all)",
)
@click.option(
    "--max-batches",
    type=click.IntRange(min=-1),
    default=fetch_config.max_more_batches,
    help="Max 'more comments' batches to resolve (-1 = all)",
)
@click.option("--timeout", type=float, default=None, help="Give up after this many seconds")
@click.option("--token-count", is_flag=True, default=False, help="Show estimated token count")
def fetch(
    url: str,
    fmt: str,
    output: str | None,
    to_stdout: bool,
    sort: str,
    min_score: int | None,
    max_depth: int | None,
    skip_deleted: bool,
    op_only: bool,
    top: int | None,
    limit: int,
    max_batches: int,
    timeout: float | None,
    token_count: bool,
) -> None:
    """Fetch a thread → <subreddit>_<postid>.<ext>

    URL may be a full Reddit URL, r/<sub>/comments/<id>, or a bare post ID.
    """
    from reddit_threads.collection.assembler import ThreadAssembler
    from reddit_threads.collection.parser import normalize_sort, parse_reference
    from reddit_threads.errors import RedditThreadsError
    from reddit_threads.processing.filters import FilterOptions, apply_filters, estimate_tokens
    from reddit_threads.processing.truncate import truncate_comments
    from reddit_threads.reporting.formatters import FORMAT_EXTENSIONS, FORMATTERS
    from reddit_threads.reporting.frames import TABULAR_FORMATS, thread_to_frame, write_frame

    try:
        ref = parse_reference(url)
    except RedditThreadsError as exc:
        click.echo(exc.message, err=True)
        sys.exit(1)

    if to_stdout and fmt in TABULAR_FORMATS:
        click.echo(f"--stdout cannot be used with --format {fmt}", err=True)
        sys.exit(1)

    def _progress(message: str) -> None:
        if not to_stdout:
            click.echo(message, err=True)

    try:
        thread = ThreadAssembler().fetch_thread(
            ref,
            sort=normalize_sort(sort),
            max_more_batches=max_batches,
            on_progress=_progress,
            timeout=timeout,
        )
    except RedditThreadsError as exc:
        click.echo(f"Fetch failed: {exc.message}", err=True)
        sys.exit(1)

    options = FilterOptions(
        min_score=min_score,
        skip_deleted=skip_deleted,
        op_only=op_only,
        max_depth=max_depth,
        top=top,
    )
    comments = truncate_comments(apply_filters(thread.comments, options), limit)
    filtered = thread.with_comments(comments)

    subreddit = thread.ref.subreddit if thread.ref else thread.post.subreddit
    extension = TABULAR_FORMATS.get(fmt) or FORMAT_EXTENSIONS[fmt]
    out_path = Path(output) if output else Path(f"{subreddit}_{thread.post.id}{extension}")

    if fmt in TABULAR_FORMATS:
        write_frame(thread_to_frame(filtered), out_path)
        click.echo(f"Saved: {out_path}")
        return

    rendered = FORMATTERS[fmt](filtered)
    if to_stdout:
        click.echo(rendered, nl=False)
    else:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered, encoding="utf-8")
        click.echo(
            f"Saved {thread.metadata.total_comments_fetched} comments "
            f"from r/{subreddit}: {out_path}"
        )

    if token_count:
        click.echo(f"Estimated tokens: ~{estimate_tokens(rendered):,}", err=True)


@cli.command()
@click.option("--host", default=None, help="Bind address (default: SERVER_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: SERVER_PORT)")
def serve(host: str | None, port: int | None) -> None:
    """Start the thread API server (FastAPI + uvicorn)."""
    import uvicorn

    from reddit_threads.config import server_config

    uvicorn.run(
        "reddit_threads.api.app:app",
        host=host or server_config.host,
        port=port or server_config.port,
    )


if __name__ == "__main__":
    cli()
