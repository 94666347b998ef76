"""
Health checks - for load balancers, Kubernetes, and monitoring.
Liveness is static; readiness reports which engines are configured.
"""

from fastapi import APIRouter, Depends

from swp_api.api.dependencies import AppSettings, get_engine_registry
from swp_api.search.engines import EngineRegistry

router = APIRouter()


@router.get("")
async def health(settings: AppSettings):
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(registry: EngineRegistry = Depends(get_engine_registry)):
    """Readiness: can accept traffic? (Elasticsearch reachability is not probed here.)"""
    return {"status": "ready", "engines": registry.names()}
