"""
Scoring Config Service - Company Scoring Platform
app/services/config_service.py

Validates scoring configs at the edit boundary and persists them. Hard rule
violations reject the save; soft ones (weight total, unknown scale) come back
as warnings next to the saved config.
"""

import logging
from typing import List

from app.core.exceptions import ConfigValidationException
from app.models.scoring_config import (
    ScoringConfig,
    ScoringConfigBase,
    ScoringConfigSaveResponse,
)
from app.repositories.config_repository import ConfigRepository
from app.scoring.config_validation import ConfigValidationResult, validate_config

logger = logging.getLogger(__name__)


class ScoringConfigService:
    """CRUD for scoring configs with validation."""

    def __init__(self, config_repo: ConfigRepository):
        self.config_repo = config_repo

    def list_configs(self) -> List[ScoringConfig]:
        return self.config_repo.get_all()

    def get_config(self, config_id: str) -> ScoringConfig:
        return self.config_repo.get_or_raise(config_id)

    def _validate(self, payload: ScoringConfigBase) -> ConfigValidationResult:
        result = validate_config(payload)
        if not result.ok:
            logger.info("Rejected scoring config '%s': %s", payload.name, "; ".join(result.errors))
            raise ConfigValidationException(result.errors)
        return result

    def _save_response(self, config: ScoringConfig, result: ConfigValidationResult) -> ScoringConfigSaveResponse:
        return ScoringConfigSaveResponse(
            **config.model_dump(),
            total_weight=result.total_weight,
            weight_allocation=result.weight_allocation,
            warnings=result.warnings,
        )

    def create_config(self, payload: ScoringConfigBase) -> ScoringConfigSaveResponse:
        result = self._validate(payload)
        config = self.config_repo.create(payload)
        logger.info("Created scoring config %s (%s)", config.id, config.name)
        return self._save_response(config, result)

    def update_config(self, config_id: str, payload: ScoringConfigBase) -> ScoringConfigSaveResponse:
        # Existence first so an unknown id is a 404 even for an invalid body
        self.config_repo.get_or_raise(config_id)
        result = self._validate(payload)
        config = self.config_repo.update(config_id, payload)
        logger.info("Updated scoring config %s", config_id)
        return self._save_response(config, result)

    def delete_config(self, config_id: str) -> None:
        """Runs keep their own copy of the rubric, so they are not touched."""
        self.config_repo.delete(config_id)
        logger.info("Deleted scoring config %s", config_id)
