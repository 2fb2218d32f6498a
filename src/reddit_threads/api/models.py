"""Pydantic request/response models for the thread API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FetchRequest(BaseModel):
    url: str
    sort: str = "confidence"


class FetchMetadata(_CamelModel):
    fetched_at: str
    total_comments_fetched: int
    comments_returned: int
    truncated: bool
    comment_limit: int | None = None
    tool_version: str


class ThreadResponse(BaseModel):
    post: dict[str, Any]
    comments: list[dict[str, Any]]
    metadata: FetchMetadata


class HealthResponse(BaseModel):
    status: str
    version: str
    active: int
    capacity: int
