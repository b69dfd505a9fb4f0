"""
Scoring Config Repository - Company Scoring Platform
app/repositories/config_repository.py

Data access layer for ScoringConfig entity operations.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from uuid import uuid4

from app.core.exceptions import EntityNotFoundException
from app.models.scoring_config import ScoringConfig, ScoringConfigBase
from app.repositories.base import BaseRepository


class ConfigRepository(BaseRepository[ScoringConfig]):
    """Repository for ScoringConfig CRUD operations."""

    ENTITY_TYPE = "Config"
    STATE_FILE_NAME = "configs.json"

    def __init__(self, state_dir: Optional[Path] = None):
        super().__init__(ScoringConfig, state_dir)

    def create(self, payload: ScoringConfigBase, config_id: Optional[str] = None) -> ScoringConfig:
        """
        Persist a new config.

        Args:
            payload: Validated config fields
            config_id: Optional fixed id (used for seeded defaults)

        Returns:
            Created config
        """
        config = ScoringConfig(
            id=config_id or f"config-{uuid4().hex[:12]}",
            created_at=datetime.now(timezone.utc),
            **payload.model_dump(),
        )
        with self.transaction() as records:
            if config.is_default:
                self._clear_default(records)
            records[config.id] = config
        return config.model_copy(deep=True)

    def update(self, config_id: str, payload: ScoringConfigBase) -> ScoringConfig:
        """
        Replace a config's editable fields, keeping id and created_at.

        Returns:
            Updated config
        """
        with self.transaction() as records:
            current = records.get(config_id)
            if current is None:
                raise EntityNotFoundException(self.ENTITY_TYPE, config_id)
            updated = ScoringConfig(
                id=current.id,
                created_at=current.created_at,
                **payload.model_dump(),
            )
            if updated.is_default:
                self._clear_default(records, keep=config_id)
            records[config_id] = updated
        return updated.model_copy(deep=True)

    def get_all(self) -> List[ScoringConfig]:
        """All configs, oldest first."""
        return sorted(super().get_all(), key=lambda c: c.created_at)

    def get_default(self) -> Optional[ScoringConfig]:
        for config in self.get_all():
            if config.is_default:
                return config
        return None

    def _clear_default(self, records, keep: Optional[str] = None) -> None:
        for config_id, config in records.items():
            if config.is_default and config_id != keep:
                records[config_id] = config.model_copy(update={"is_default": False})
