"""
Search endpoint - GET /swp_api/search.
Challenge: Accept free-form (bracketed) query parameters, validate them, return a JSON array of posts.
Design: Thin controller; the dispatcher owns validation and the engine call.
"""

from fastapi import APIRouter, Request

from swp_api.api.dependencies import Dispatcher
from swp_api.api.params import parse_query_params

router = APIRouter()


@router.get("")
async def search(request: Request, dispatcher: Dispatcher) -> list[dict]:
    """
    Search posts through the selected engine.
    Query: s, engine, posts_per_page, nopaging, load_posts, page, post__in, post__not_in,
    tax_query[...], meta_query[...], date_query[...]. Unknown parameters are ignored.
    """
    params = parse_query_params(request.query_params.multi_items())
    return await dispatcher.handle(params, request)
