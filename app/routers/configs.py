"""
Scoring Config Router - Company Scoring Platform
app/routers/configs.py

Handles scoring config CRUD with optional Redis caching of reads.
"""

from fastapi import APIRouter, Depends, Response, status

from app.config import settings
from app.core.dependencies import get_config_service
from app.core.errors import raise_for
from app.core.exceptions import RepositoryException
from app.models.scoring_config import (
    ConfigValidationResponse,
    ScoringConfig,
    ScoringConfigCreate,
    ScoringConfigListResponse,
    ScoringConfigSaveResponse,
    ScoringConfigUpdate,
)
from app.scoring.config_validation import validate_config
from app.services.cache import (
    CACHE_KEY_CONFIGS_ALL,
    cached_fetch,
    config_cache_key,
    invalidate_config_cache,
)
from app.services.config_service import ScoringConfigService

router = APIRouter(prefix=settings.API_PREFIX, tags=["Scoring Configs"])



#  Routes


@router.get(
    "/configs",
    response_model=ScoringConfigListResponse,
    summary="List scoring configs",
    description="Returns all scoring configs, oldest first. Cached when Redis is enabled.",
)
async def list_configs(
    service: ScoringConfigService = Depends(get_config_service),
) -> ScoringConfigListResponse:
    def load() -> ScoringConfigListResponse:
        configs = service.list_configs()
        return ScoringConfigListResponse(items=configs, total=len(configs))

    return cached_fetch(CACHE_KEY_CONFIGS_ALL, ScoringConfigListResponse, load)


@router.post(
    "/configs/validate",
    response_model=ConfigValidationResponse,
    summary="Validate a scoring config without saving",
    description="Returns hard errors, weight-allocation warnings and the weight total for the editor.",
)
async def validate_scoring_config(payload: ScoringConfigCreate) -> ConfigValidationResponse:
    result = validate_config(payload)
    return ConfigValidationResponse(
        valid=result.ok,
        errors=result.errors,
        warnings=result.warnings,
        total_weight=result.total_weight,
        weight_allocation=result.weight_allocation,
    )


@router.get(
    "/configs/{config_id}",
    response_model=ScoringConfig,
    summary="Get a scoring config",
)
async def get_config(
    config_id: str,
    service: ScoringConfigService = Depends(get_config_service),
) -> ScoringConfig:
    try:
        return cached_fetch(config_cache_key(config_id), ScoringConfig, lambda: service.get_config(config_id))
    except RepositoryException as e:
        raise_for(e)


@router.post(
    "/configs",
    response_model=ScoringConfigSaveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a scoring config",
    description=(
        "Rejects a missing name, no criteria, unnamed criteria, duplicate criterion ids and "
        "weights outside 0-100. A weight total other than 100 is saved with a warning."
    ),
)
async def create_config(
    payload: ScoringConfigCreate,
    service: ScoringConfigService = Depends(get_config_service),
) -> ScoringConfigSaveResponse:
    try:
        saved = service.create_config(payload)
    except RepositoryException as e:
        raise_for(e)
    invalidate_config_cache()
    return saved


@router.put(
    "/configs/{config_id}",
    response_model=ScoringConfigSaveResponse,
    summary="Replace a scoring config",
    description="Existing runs keep the rubric they were created with.",
)
async def update_config(
    config_id: str,
    payload: ScoringConfigUpdate,
    service: ScoringConfigService = Depends(get_config_service),
) -> ScoringConfigSaveResponse:
    try:
        saved = service.update_config(config_id, payload)
    except RepositoryException as e:
        raise_for(e)
    invalidate_config_cache()
    return saved


@router.delete(
    "/configs/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a scoring config",
    description="Existing runs are not affected.",
)
async def delete_config(
    config_id: str,
    service: ScoringConfigService = Depends(get_config_service),
) -> Response:
    try:
        service.delete_config(config_id)
    except RepositoryException as e:
        raise_for(e)
    invalidate_config_cache()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
