"""
Services module for the Company Scoring Platform.
"""

from app.services.cache import get_cache
from app.services.config_service import ScoringConfigService
from app.services.redis_cache import RedisCache
from app.services.run_service import RunService


__all__ = [
    # Core services
    "get_cache",
    "RedisCache",
    "ScoringConfigService",
    "RunService",
]
