"""
FastAPI dependencies - injection for the search pipeline's collaborators.
Tests override get_search_engine / get_policy_set / get_engine_registry through app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends

from swp_api.config import Settings, get_settings
from swp_api.search.dispatcher import SearchDispatcher
from swp_api.search.elasticsearch_client import ElasticsearchSearchEngine
from swp_api.search.engines import EngineRegistry, SearchEngine
from swp_api.search.policy import PolicySet, build_policy_set
from swp_api.search.projection import ItemProjection


def get_app_settings() -> Settings:
    return get_settings()


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_engine_registry(settings: AppSettings) -> EngineRegistry:
    return EngineRegistry(settings.search_engines)


def get_search_engine(
    settings: AppSettings,
    registry: Annotated[EngineRegistry, Depends(get_engine_registry)],
) -> SearchEngine:
    return ElasticsearchSearchEngine(registry, settings)


def get_policy_set(settings: AppSettings) -> PolicySet:
    """Policy from the enabled access checks. Built per request; the closures share the Redis client."""
    return build_policy_set(settings)


def get_projection() -> ItemProjection:
    return ItemProjection()


def get_dispatcher(
    settings: AppSettings,
    registry: Annotated[EngineRegistry, Depends(get_engine_registry)],
    engine: Annotated[SearchEngine, Depends(get_search_engine)],
    policy: Annotated[PolicySet, Depends(get_policy_set)],
    projection: Annotated[ItemProjection, Depends(get_projection)],
) -> SearchDispatcher:
    return SearchDispatcher(settings, registry, engine, projection, policy)


Dispatcher = Annotated[SearchDispatcher, Depends(get_dispatcher)]
