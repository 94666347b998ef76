"""Post response schema - one element of the search endpoint's JSON array."""

from typing import Any

from pydantic import BaseModel


class PostResponse(BaseModel):
    id: str
    type: str | None = None
    slug: str | None = None
    title: str | None = None
    content: str | None = None
    excerpt: str | None = None
    date: str | None = None
    link: str | None = None
    meta: dict[str, Any] | None = None
    taxonomies: dict[str, Any] | None = None
    score: float | None = None  # Relevance from the engine; absent for ID-only results
