"""
Parameter schema - every query parameter the search endpoint accepts.
Each entry pairs a default with a sanitizer and an optional validator; resolved per request so policy changes apply at once.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable

from swp_api.config import Settings
from swp_api.search import sanitizers, validators
from swp_api.search.engines import EngineRegistry
from swp_api.search.policy import PolicySet

Sanitizer = Callable[[Any], Any]
Validator = Callable[[Any], Any]

_NO_FALLBACK = object()


@dataclass(frozen=True)
class ParameterSpec:
    """
    Contract for one query parameter.
    validate returns False to reject; if fallback is set the rejected value is replaced by it,
    otherwise the request fails with InvalidArgument.
    """

    name: str
    default: Any
    sanitize: Sanitizer
    validate: Validator | None = None
    fallback: Any = field(default=_NO_FALLBACK, compare=False)

    @property
    def has_fallback(self) -> bool:
        return self.fallback is not _NO_FALLBACK


def default_schema(
    settings: Settings,
    registry: EngineRegistry,
    max_posts_per_page: int,
) -> dict[str, ParameterSpec]:
    """The stock parameter table, before policy changes."""
    specs = [
        ParameterSpec("s", "", sanitizers.text_normalize),
        ParameterSpec(
            "engine",
            "default",
            sanitizers.text_normalize,
            partial(validators.engine_exists, registry=registry),
        ),
        ParameterSpec(
            "posts_per_page",
            settings.posts_per_page,
            partial(sanitizers.clamp_to_max, maximum=max_posts_per_page),
        ),
        ParameterSpec("nopaging", 0, sanitizers.to_bool),
        ParameterSpec("load_posts", 1, sanitizers.to_bool),
        ParameterSpec("page", 1, sanitizers.absint),
        ParameterSpec("post__in", False, sanitizers.comma_or_single_to_list),
        ParameterSpec("post__not_in", False, sanitizers.comma_or_single_to_list),
        # Sub-queries degrade to an empty filter instead of failing the request
        ParameterSpec(
            "tax_query",
            False,
            sanitizers.strip_tags_over_map,
            validators.validate_tax_query,
            fallback={},
        ),
        ParameterSpec(
            "meta_query",
            False,
            sanitizers.strip_tags_over_map,
            validators.validate_meta_query,
            fallback={},
        ),
        ParameterSpec(
            "date_query",
            False,
            sanitizers.strip_tags_over_map,
            validators.validate_date_query,
            fallback={},
        ),
    ]
    return {spec.name: spec for spec in specs}


def resolve_schema(
    settings: Settings,
    registry: EngineRegistry,
    policy: PolicySet,
) -> dict[str, ParameterSpec]:
    """Schema for the current request: stock table with the policy's page cap and schema changes applied."""
    maximum = policy.resolve_max_posts_per_page(settings.max_posts_per_page)
    schema = default_schema(settings, registry, maximum)
    return policy.apply_schema(schema)
