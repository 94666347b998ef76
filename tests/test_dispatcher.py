"""
Dispatcher tests - permission gate, schema filtering, fail-soft sub-queries, projection.
"""

import pytest

from swp_api.search import sanitizers
from swp_api.search.exceptions import Forbidden, InvalidArgument, InvalidEngine
from swp_api.search.policy import PolicySet
from swp_api.search.schema import ParameterSpec


@pytest.mark.asyncio
async def test_posts_per_page_is_clamped(make_dispatcher, engine):
    await make_dispatcher().handle({"s": "cat", "engine": "default", "posts_per_page": "999"})
    assert engine.calls[0]["posts_per_page"] == 50
    assert engine.calls[0]["s"] == "cat"


@pytest.mark.asyncio
async def test_unknown_keys_never_reach_engine(make_dispatcher, engine):
    await make_dispatcher().handle({"foo": "bar", "s": "cat", "index": "secrets"})
    args = engine.calls[0]
    assert "foo" not in args
    assert "index" not in args
    assert set(args) == {
        "s", "engine", "posts_per_page", "nopaging", "load_posts", "page",
        "post__in", "post__not_in", "tax_query", "meta_query", "date_query",
    }


@pytest.mark.asyncio
async def test_defaults_fill_unsupplied_keys(make_dispatcher, engine, settings):
    await make_dispatcher().handle({})
    args = engine.calls[0]
    assert args["s"] == ""
    assert args["engine"] == "default"
    assert args["posts_per_page"] == settings.posts_per_page
    assert args["page"] == 1
    assert args["post__in"] is False
    assert args["tax_query"] is False


@pytest.mark.asyncio
async def test_invalid_engine_rejects_request(make_dispatcher, engine):
    with pytest.raises(InvalidEngine):
        await make_dispatcher().handle({"engine": "nonexistent"})
    assert engine.calls == []


@pytest.mark.asyncio
async def test_malformed_tax_query_degrades_to_empty(make_dispatcher, engine):
    posts = await make_dispatcher().handle({"tax_query": {"taxonomy": "genre"}})
    assert engine.calls[0]["tax_query"] == {}
    assert len(posts) == 2


@pytest.mark.asyncio
async def test_non_mapping_sub_query_degrades_to_empty(make_dispatcher, engine):
    await make_dispatcher().handle({"meta_query": "color=red", "date_query": ["2024"]})
    assert engine.calls[0]["meta_query"] == {}
    assert engine.calls[0]["date_query"] == {}


@pytest.mark.asyncio
async def test_valid_sub_query_is_sanitized(make_dispatcher, engine):
    query = {"taxonomy": "genre", "field": "slug", "terms": "<i>jazz</i>"}
    await make_dispatcher().handle({"tax_query": query})
    assert engine.calls[0]["tax_query"] == {"taxonomy": "genre", "field": "slug", "terms": "jazz"}
    assert query["terms"] == "<i>jazz</i>"


@pytest.mark.asyncio
async def test_sanitizers_applied(make_dispatcher, engine):
    await make_dispatcher().handle(
        {"nopaging": "yes", "load_posts": "0", "page": "3", "post__in": "4,5", "post__not_in": "9"}
    )
    args = engine.calls[0]
    assert args["nopaging"] is True
    assert args["load_posts"] is False
    assert args["page"] == 3
    assert args["post__in"] == ["4", "5"]
    assert args["post__not_in"] == ["9"]


@pytest.mark.asyncio
async def test_always_deny_permission_is_forbidden(make_dispatcher, engine):
    dispatcher = make_dispatcher(PolicySet(permission=lambda allowed, request: False))
    for params in ({}, {"s": "cat"}, {"engine": "nonexistent"}):
        with pytest.raises(Forbidden):
            await dispatcher.handle(params)
    assert engine.calls == []


@pytest.mark.asyncio
async def test_async_permission_predicate(make_dispatcher, engine):
    async def allow(allowed, request):
        return allowed

    await make_dispatcher(PolicySet(permission=allow)).handle({"s": "cat"})
    assert len(engine.calls) == 1


@pytest.mark.asyncio
async def test_max_posts_per_page_override(make_dispatcher, engine):
    dispatcher = make_dispatcher(PolicySet(max_posts_per_page=lambda default: 10))
    await dispatcher.handle({"posts_per_page": "25"})
    assert engine.calls[0]["posts_per_page"] == 10


@pytest.mark.asyncio
async def test_schema_mutator_adds_and_removes_parameters(make_dispatcher, engine):
    def mutate(schema):
        schema.pop("post__not_in")
        schema["orderby"] = ParameterSpec("orderby", "relevance", sanitizers.text_normalize)
        return schema

    await make_dispatcher(PolicySet(schema_mutator=mutate)).handle({"orderby": " date ", "post__not_in": "3"})
    args = engine.calls[0]
    assert args["orderby"] == "date"
    assert "post__not_in" not in args


@pytest.mark.asyncio
async def test_strict_validator_without_fallback_raises_invalid_argument(make_dispatcher, engine):
    def mutate(schema):
        schema["lang"] = ParameterSpec("lang", "en", sanitizers.text_normalize, lambda v: v in ("en", "de"))
        return schema

    with pytest.raises(InvalidArgument) as exc_info:
        await make_dispatcher(PolicySet(schema_mutator=mutate)).handle({"lang": "xx"})
    assert exc_info.value.details == {"param": "lang"}


@pytest.mark.asyncio
async def test_results_are_projected_in_engine_order(make_dispatcher):
    posts = await make_dispatcher().handle({"s": "cat"})
    assert [p["id"] for p in posts] == ["12", "7"]
    assert posts[0] == {
        "id": "12",
        "type": "post",
        "slug": "cat-care",
        "title": "Cat care",
        "content": "Feed the cat.",
        "score": 3.5,
    }


@pytest.mark.asyncio
async def test_zero_results_is_empty_list(make_dispatcher, engine):
    engine.hits = []
    assert await make_dispatcher().handle({"s": "nothing"}) == []
