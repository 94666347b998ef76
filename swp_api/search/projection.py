"""
Item projection - turn raw engine hits into response items.
Hits are read, never modified: each call builds a new PostResponse.
"""

from typing import Any

from swp_api.schemas.post import PostResponse


class ItemProjection:
    """Response shaping for search hits (per-item view, then collection trimming)."""

    # Omitted from collection items when the engine returned nothing for them
    collection_exclude_none = True

    def project_for_response(self, hit: dict[str, Any], request: Any = None) -> PostResponse:
        """Map an Elasticsearch hit (or an already flat document) to a PostResponse."""
        source = hit.get("_source") or {}
        if "_id" not in hit and "_source" not in hit:
            source = hit
        data = {
            "id": str(hit.get("_id", source.get("id", ""))),
            "type": source.get("type"),
            "slug": source.get("slug"),
            "title": source.get("title"),
            "content": source.get("content"),
            "excerpt": source.get("excerpt"),
            "date": source.get("date"),
            "link": source.get("link"),
            "meta": source.get("meta"),
            "taxonomies": source.get("taxonomies"),
            "score": hit.get("_score"),
        }
        return PostResponse(**data)

    def project_for_collection(self, item: PostResponse) -> dict[str, Any]:
        """JSON-ready dict for the collection array."""
        return item.model_dump(mode="json", exclude_none=self.collection_exclude_none)
