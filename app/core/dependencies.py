"""
Dependencies - Company Scoring Platform
app/core/dependencies.py

FastAPI dependency injection for repositories and services.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends

from app.config import get_settings
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository
from app.services.config_service import ScoringConfigService
from app.services.evaluation_worker import EvaluationWorker, get_evaluation_worker as _build_worker
from app.services.run_service import RunService


@lru_cache()
def get_config_repository() -> ConfigRepository:
    """Get cached ConfigRepository instance."""
    return ConfigRepository(get_settings().state_dir)


@lru_cache()
def get_run_repository() -> RunRepository:
    """Get cached RunRepository instance."""
    return RunRepository(get_settings().state_dir)


def get_config_service(
    config_repo: ConfigRepository = Depends(get_config_repository),
) -> ScoringConfigService:
    return ScoringConfigService(config_repo)


def get_run_service(
    config_repo: ConfigRepository = Depends(get_config_repository),
    run_repo: RunRepository = Depends(get_run_repository),
) -> RunService:
    settings = get_settings()
    return RunService(
        config_repo,
        run_repo,
        poll_interval_seconds=settings.RUN_POLL_INTERVAL_SECONDS,
        radar_limit=settings.RADAR_MAX_COMPANIES,
    )


@lru_cache()
def get_evaluation_worker() -> Optional[EvaluationWorker]:
    """Background worker selected by EVALUATION_WORKER, or None."""
    return _build_worker(get_settings().EVALUATION_WORKER)
