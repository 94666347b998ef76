"""
API router - the swp_api namespace (search route plus probes).
"""

from fastapi import APIRouter

from swp_api.api.endpoints import health, search

api_router = APIRouter(prefix="/swp_api")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
