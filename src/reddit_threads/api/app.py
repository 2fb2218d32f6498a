"""FastAPI application serving complete Reddit threads."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

from reddit_threads.api.models import FetchMetadata, FetchRequest, HealthResponse, ThreadResponse
from reddit_threads.api.pool import FetchPool
from reddit_threads.collection.assembler import ThreadAssembler
from reddit_threads.collection.extractor import count_comments
from reddit_threads.collection.parser import normalize_sort, parse_reference
from reddit_threads.config import TOOL_VERSION, server_config
from reddit_threads.errors import (
    FetchExhausted,
    HttpError,
    InvalidReference,
    ServerBusy,
    ThreadFetchFailed,
    ThreadFetchTimeout,
)
from reddit_threads.logger import get_logger
from reddit_threads.processing.truncate import truncate_comments

logger = get_logger("api")

_BUSY = "Server is busy. Please try again in a moment."

# ---------------------------------------------------------------------------
# Shared workers — one assembler, one bounded pool per process
# ---------------------------------------------------------------------------

_assembler = ThreadAssembler()
_pool = FetchPool(
    max_concurrency=server_config.max_concurrency,
    timeout=server_config.fetch_timeout,
)


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Reddit Threads API",
    description=(
        "Fetch complete Reddit threads (post + every comment) as JSON. "
        "Run 'reddit-threads serve' to start the server."
    ),
    version=TOOL_VERSION,
)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/api/health", response_model=HealthResponse, tags=["Meta"])
def health() -> HealthResponse:
    """Liveness check with current worker usage."""
    return HealthResponse(
        status="ok",
        version=TOOL_VERSION,
        active=_pool.active,
        capacity=_pool.capacity,
    )


@app.post("/api/fetch", response_model=ThreadResponse, tags=["Threads"])
def fetch(req: FetchRequest) -> ThreadResponse:
    """Fetch a thread, resolving "more comments" up to the configured quota.

    The comment tree is cut to ``SERVER_COMMENT_LIMIT`` nodes when set;
    ``metadata.truncated`` says whether that happened.
    """
    if not req.url.strip():
        raise HTTPException(status_code=400, detail="URL is required")

    try:
        sort = normalize_sort(req.sort)
        ref = parse_reference(req.url)
    except (ValueError, InvalidReference) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        thread = _pool.run(
            lambda timeout: _assembler.fetch_thread(
                ref,
                sort=sort,
                max_more_batches=server_config.max_more_batches,
                timeout=timeout,
            )
        )
    except (ServerBusy, ThreadFetchTimeout) as exc:
        logger.warning("Rejected fetch for %s: %s", req.url, exc)
        raise HTTPException(status_code=503, detail=_BUSY) from exc
    except ThreadFetchFailed as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except HttpError as exc:
        status = 404 if exc.status == 404 else 502
        raise HTTPException(status_code=status, detail=str(exc)) from exc
    except FetchExhausted as exc:
        logger.warning("Reddit unavailable for %s: %s", req.url, exc)
        raise HTTPException(status_code=503, detail=f"Reddit is unavailable: {exc}") from exc

    total = thread.metadata.total_comments_fetched
    limit = server_config.comment_limit
    truncated = limit != -1 and total > limit
    comments = truncate_comments(thread.comments, limit)

    return ThreadResponse(
        post=thread.post.to_dict(),
        comments=[c.to_dict() for c in comments],
        metadata=FetchMetadata(
            fetched_at=thread.metadata.fetched_at,
            total_comments_fetched=total,
            comments_returned=count_comments(comments),
            truncated=truncated,
            comment_limit=limit if truncated else None,
            tool_version=thread.metadata.tool_version,
        ),
    )
