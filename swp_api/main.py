"""
FastAPI application entry point.
Mounts the swp_api routes, Prometheus metrics, error handlers; bootstraps engine indices on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from swp_api.api.router import api_router
from swp_api.cache.redis_client import close_redis
from swp_api.config import get_settings
from swp_api.core.exception_handlers import register_exception_handlers
from swp_api.core.logging import setup_logging
from swp_api.search.elasticsearch_client import close_elasticsearch, ensure_engine_indices
from swp_api.search.engines import EngineRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure engine indices when ES is available. Shutdown: close ES/Redis clients."""
    settings = get_settings()
    try:
        await ensure_engine_indices(EngineRegistry(settings.search_engines), settings)
    except Exception as e:
        # ES may be down; the app still serves (searches return empty)
        logger.warning("index bootstrap skipped: %s", e)
    yield
    await close_elasticsearch()
    await close_redis()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        description="Search endpoint in front of named Elasticsearch-backed search engines.",
        version="0.3.0",
        lifespan=lifespan,
    )

    # Read-only public endpoint: any origin may call it
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Prometheus metrics at /metrics
    app.mount("/metrics", make_asgi_app())

    app.include_router(api_router)
    return app


app = create_app()
