"""
Health Check Router - Company Scoring Platform
app/routers/health.py

Returns health status of the store and the (optional) Redis cache.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from app.config import get_settings
from app.core.dependencies import get_config_repository, get_run_repository
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository
from app.services.cache import cache_status

router = APIRouter(tags=["Health"])



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]



#  Dependency Health Checks


def check_store(config_repo: ConfigRepository, run_repo: RunRepository) -> str:
    """Store is healthy when both repositories answer."""
    settings = get_settings()
    try:
        configs = config_repo.count()
        runs = run_repo.count()
    except Exception as e:
        error_msg = str(e)[:100] + "..." if len(str(e)) > 100 else str(e)
        return f"unhealthy: {error_msg}"
    return f"healthy ({settings.STORE_BACKEND}: {configs} configs, {runs} runs)"


def check_cache() -> str:
    """Disabled counts as healthy; enabled-but-unreachable degrades."""
    state = cache_status()
    if state == "unavailable":
        return "unhealthy: redis unreachable"
    return f"healthy ({state})"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of the store and the config cache.",
)
async def health_check(
    config_repo: ConfigRepository = Depends(get_config_repository),
    run_repo: RunRepository = Depends(get_run_repository),
):
    """Check health of all dependencies."""
    dependencies = {
        "store": check_store(config_repo, run_repo),
        "redis": check_cache(),
    }

    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=get_settings().APP_VERSION,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
