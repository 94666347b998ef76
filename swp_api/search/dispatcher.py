"""
Search dispatcher - the request pipeline of the search endpoint.
Permission gate -> sanitize/validate per schema -> drop unknown keys -> engine -> projection.
"""

import logging
from typing import Any

from prometheus_client import Counter

from swp_api.config import Settings
from swp_api.search.engines import EngineRegistry, SearchEngine
from swp_api.search.exceptions import Forbidden, InvalidArgument, InvalidEngine, MalformedSubQuery
from swp_api.search.policy import PolicySet, is_allowed
from swp_api.search.projection import ItemProjection
from swp_api.search.schema import ParameterSpec, resolve_schema
from swp_api.search.validators import (
    DATE_QUERY_KEYS,
    META_QUERY_KEYS,
    TAX_QUERY_KEYS,
    missing_keys,
)

logger = logging.getLogger(__name__)

SEARCH_REQUESTS = Counter(
    "swp_api_search_requests_total",
    "Search requests by outcome",
    ["outcome"],
)

_SUB_QUERY_KEYS = {
    "tax_query": TAX_QUERY_KEYS,
    "meta_query": META_QUERY_KEYS,
    "date_query": DATE_QUERY_KEYS,
}


class SearchDispatcher:
    """Validates search requests and hands the clean arguments to the engine."""

    def __init__(
        self,
        settings: Settings,
        registry: EngineRegistry,
        engine: SearchEngine,
        projection: ItemProjection,
        policy: PolicySet | None = None,
    ):
        self.settings = settings
        self.registry = registry
        self.engine = engine
        self.projection = projection
        self.policy = policy or PolicySet()

    def _clean_value(self, spec: ParameterSpec, raw: Any) -> Any:
        value = spec.sanitize(raw)
        if spec.validate is None:
            return value
        if spec.validate(value) is False:
            if not spec.has_fallback:
                raise InvalidArgument(spec.name)
            err = MalformedSubQuery(spec.name, missing_keys(value, _SUB_QUERY_KEYS.get(spec.name, ())))
            logger.debug("%s; using empty filter", err.message)
            return spec.fallback
        return value

    def clean_args(self, params: dict[str, Any]) -> dict[str, Any]:
        """Clean argument set: schema defaults overlaid with sanitized, validated supplied values."""
        schema = resolve_schema(self.settings, self.registry, self.policy)
        args = {name: spec.default for name, spec in schema.items()}
        for key, raw in params.items():
            spec = schema.get(key)
            if spec is None:
                continue
            args[key] = self._clean_value(spec, raw)
        return args

    async def handle(self, params: dict[str, Any], request: Any = None) -> list[dict[str, Any]]:
        """Run one search request. Raises Forbidden, InvalidEngine or InvalidArgument on rejection."""
        if not await is_allowed(request, self.policy):
            SEARCH_REQUESTS.labels(outcome="forbidden").inc()
            raise Forbidden()
        try:
            args = self.clean_args(params)
        except InvalidEngine:
            SEARCH_REQUESTS.labels(outcome="invalid_engine").inc()
            raise
        except InvalidArgument:
            SEARCH_REQUESTS.labels(outcome="invalid_argument").inc()
            raise
        logger.debug("search args: %s", sorted(args))

        hits = await self.engine.search(args)
        posts = [
            self.projection.project_for_collection(self.projection.project_for_response(hit, request))
            for hit in hits
        ]
        SEARCH_REQUESTS.labels(outcome="ok").inc()
        logger.info("search: engine=%s results=%d", args.get("engine"), len(posts))
        return posts
