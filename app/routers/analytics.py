"""
Analytics Router - Company Scoring Platform
app/routers/analytics.py

Chart data for one run: score distribution, top/bottom ranking, radar
comparison of up to four companies, and a two-criterion scatter. All views
work on partial runs (`partial` is true while results can still arrive).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.config import settings
from app.core.dependencies import get_run_service
from app.core.errors import raise_for
from app.core.exceptions import RepositoryException
from app.models.analytics import DistributionResponse, RadarResponse, RankingResponse, ScatterResponse
from app.services.run_service import RunService

router = APIRouter(prefix=f"{settings.API_PREFIX}/runs/{{run_id}}/analytics", tags=["Analytics"])


@router.get(
    "/distribution",
    response_model=DistributionResponse,
    summary="Score distribution histogram",
    description="Width-1 buckets up to a max of 10, width-10 buckets above.",
)
async def get_distribution(run_id: str, service: RunService = Depends(get_run_service)) -> DistributionResponse:
    try:
        return service.distribution(run_id)
    except RepositoryException as e:
        raise_for(e)


@router.get(
    "/ranking",
    response_model=RankingResponse,
    summary="Top and bottom companies",
    description="Top reads highest first, bottom lowest first; ties keep arrival order.",
)
async def get_ranking(
    run_id: str,
    limit: int = Query(default=settings.RANKING_LIMIT, ge=1, le=100),
    service: RunService = Depends(get_run_service),
) -> RankingResponse:
    try:
        return service.ranking(run_id, limit)
    except RepositoryException as e:
        raise_for(e)


@router.get(
    "/radar",
    response_model=RadarResponse,
    summary="Radar comparison",
    description=f"Pass `companyIds` once per company; at most {settings.RADAR_MAX_COMPANIES} companies.",
)
async def get_radar(
    run_id: str,
    company_ids: Optional[List[str]] = Query(default=None, alias="companyIds"),
    service: RunService = Depends(get_run_service),
) -> RadarResponse:
    try:
        return service.radar(run_id, company_ids or [])
    except RepositoryException as e:
        raise_for(e)


@router.get(
    "/scatter",
    response_model=ScatterResponse,
    summary="Two-criterion scatter",
    description="Axes default to the first and second criterion of the run's rubric.",
)
async def get_scatter(
    run_id: str,
    x: Optional[str] = Query(default=None, description="Criterion id for the x axis"),
    y: Optional[str] = Query(default=None, description="Criterion id for the y axis"),
    service: RunService = Depends(get_run_service),
) -> ScatterResponse:
    try:
        return service.scatter(run_id, x, y)
    except RepositoryException as e:
        raise_for(e)
