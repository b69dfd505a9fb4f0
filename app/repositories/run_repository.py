"""
Run Repository - Company Scoring Platform
app/repositories/run_repository.py

Data access layer for Run entity operations. Worker events are applied
through `mutate`, so a company result is appended and `companies_scored`
incremented under one lock.
"""

from pathlib import Path
from typing import List, Optional

from app.models.run import RunRecord
from app.repositories.base import BaseRepository


class RunRepository(BaseRepository[RunRecord]):
    """Repository for Run CRUD and lifecycle updates."""

    ENTITY_TYPE = "Run"
    STATE_FILE_NAME = "runs.json"

    def __init__(self, state_dir: Optional[Path] = None):
        super().__init__(RunRecord, state_dir)

    def get_all(self) -> List[RunRecord]:
        """All runs, newest first."""
        return sorted(super().get_all(), key=lambda r: r.date, reverse=True)
