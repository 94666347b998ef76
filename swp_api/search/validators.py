"""
Validators - reject malformed structured input.
A validator returns False to reject a value, or raises a SearchAPIError to fail the request outright.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from swp_api.search.engines import EngineRegistry
from swp_api.search.exceptions import InvalidEngine

TAX_QUERY_KEYS = ("taxonomy", "field", "terms")
META_QUERY_KEYS = ("key", "value", "compare")
DATE_QUERY_KEYS = ("year", "month", "day")


def engine_exists(name: Any, registry: EngineRegistry) -> Any:
    """Return name unchanged if the registry knows it; otherwise raise InvalidEngine."""
    if not registry.is_valid_engine(name):
        raise InvalidEngine(str(name))
    return name


def missing_keys(query: Any, required: Iterable[str]) -> list[str]:
    """Required keys absent from query (all of them when query is not a mapping)."""
    if not isinstance(query, Mapping):
        return list(required)
    return [key for key in required if key not in query]


def require_keys(query: Any, required: Iterable[str]) -> bool:
    """True when query is a mapping holding every required key."""
    return isinstance(query, Mapping) and not missing_keys(query, required)


def validate_tax_query(query: Any) -> bool:
    return require_keys(query, TAX_QUERY_KEYS)


def validate_meta_query(query: Any) -> bool:
    return require_keys(query, META_QUERY_KEYS)


def validate_date_query(query: Any) -> bool:
    return require_keys(query, DATE_QUERY_KEYS)
