"""
Stats Router - Company Scoring Platform
app/routers/stats.py

Cross-run rollup shown in the dashboard header.
"""

from fastapi import APIRouter, Depends

from app.config import settings
from app.core.dependencies import get_run_service
from app.models.run import StatsResponse
from app.services.run_service import RunService

router = APIRouter(prefix=settings.API_PREFIX, tags=["Stats"])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Dashboard stats",
    description="Total runs, companies scored, average of run averages, and runs still pending or running.",
)
async def get_stats(service: RunService = Depends(get_run_service)) -> StatsResponse:
    return service.get_stats()
