"""
Pytest fixtures - fake search engine, dispatcher, HTTP client.
Challenge: Isolated tests; no Elasticsearch or Redis needed.
"""

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from swp_api.api.dependencies import get_engine_registry, get_search_engine
from swp_api.config import Settings
from swp_api.main import app
from swp_api.search.dispatcher import SearchDispatcher
from swp_api.search.engines import EngineRegistry
from swp_api.search.policy import PolicySet
from swp_api.search.projection import ItemProjection

ENGINES = {"default": "posts", "products": "products"}

HITS = [
    {
        "_id": "12",
        "_score": 3.5,
        "_source": {"type": "post", "slug": "cat-care", "title": "Cat care", "content": "Feed the cat."},
    },
    {
        "_id": "7",
        "_score": 1.25,
        "_source": {"type": "post", "slug": "cat-toys", "title": "Cat toys", "content": "Yarn."},
    },
]


class FakeSearchEngine:
    """Records every clean argument set and returns canned hits."""

    def __init__(self, hits: list[dict[str, Any]] | None = None):
        self.hits = HITS if hits is None else hits
        self.calls: list[dict[str, Any]] = []

    async def search(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(args)
        return list(self.hits)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, search_engines=ENGINES)


@pytest.fixture
def registry() -> EngineRegistry:
    return EngineRegistry(ENGINES)


@pytest.fixture
def engine() -> FakeSearchEngine:
    return FakeSearchEngine()


@pytest.fixture
def make_dispatcher(settings, registry, engine):
    def factory(policy: PolicySet | None = None) -> SearchDispatcher:
        return SearchDispatcher(settings, registry, engine, ItemProjection(), policy)

    return factory


@pytest_asyncio.fixture
async def client(registry, engine):
    app.dependency_overrides[get_engine_registry] = lambda: registry
    app.dependency_overrides[get_search_engine] = lambda: engine
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
