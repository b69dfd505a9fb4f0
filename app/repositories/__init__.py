"""
Repositories Package - Company Scoring Platform
app/repositories/__init__.py

Store abstraction for scoring configs and runs.
"""

from app.repositories.base import BaseRepository
from app.repositories.config_repository import ConfigRepository
from app.repositories.run_repository import RunRepository

__all__ = [
    "BaseRepository",
    "ConfigRepository",
    "RunRepository",
]
