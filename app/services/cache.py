"""
Cache Service Singleton - Company Scoring Platform
app/services/cache.py

Read-through Redis cache for scoring configs, with key helpers and
invalidation. Runs are never cached; their progress changes under polling.
Gracefully handles Redis unavailability: a failed cache call is logged and
the store is used instead.
"""
import redis
import structlog
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel

from app.services.redis_cache import RedisCache
from app.config import settings

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger(__name__)

CACHE_KEY_CONFIG_PREFIX = "config:"
CACHE_KEY_CONFIGS_ALL = "configs:all"

# Singleton instance
_cache: Optional[RedisCache] = None


def get_cache() -> Optional[RedisCache]:
    """
    Get or create Redis cache instance.

    Returns:
        RedisCache instance if caching is enabled and Redis answers, None otherwise.

    Note:
        Returns None if Redis is unavailable, allowing the application
        to continue functioning without caching (graceful degradation).
    """
    global _cache
    if not settings.CACHE_ENABLED:
        return None
    if _cache is None:
        try:
            candidate = RedisCache()
            candidate.ping()
            _cache = candidate
        except (redis.RedisError, ConnectionError) as e:
            logger.warning("redis_unavailable", error=str(e))
            _cache = None
    return _cache


def reset_cache() -> None:
    """
    Reset the cache singleton.

    Useful for testing or when Redis connection needs to be re-established.
    """
    global _cache
    _cache = None


def cache_status() -> str:
    """'disabled', 'connected' or 'unavailable' for the health endpoint."""
    if not settings.CACHE_ENABLED:
        return "disabled"
    return "connected" if get_cache() is not None else "unavailable"


def config_cache_key(config_id: str) -> str:
    return f"{CACHE_KEY_CONFIG_PREFIX}{config_id}"


def cached_fetch(key: str, model: Type[T], loader: Callable[[], T], ttl: Optional[int] = None) -> T:
    """
    Return the cached value for `key`, or call `loader` and cache its result.

    Exceptions from `loader` (e.g. not found) propagate unchanged.
    """
    cache = get_cache()
    if cache:
        try:
            cached = cache.get(key, model)
            if cached is not None:
                logger.debug("cache_hit", key=key)
                return cached
        except (redis.RedisError, ValueError) as e:
            logger.warning("cache_read_failed", key=key, error=str(e))

    value = loader()

    if cache:
        try:
            cache.set(key, value, ttl or settings.CACHE_TTL_CONFIGS)
        except redis.RedisError as e:
            logger.warning("cache_write_failed", key=key, error=str(e))
    return value


def invalidate_config_cache() -> None:
    """
    Drop every cached config entry after a write.

    Saving a default config clears the flag on the others, so one write can
    change several cached configs.
    """
    cache = get_cache()
    if cache:
        try:
            cache.delete_pattern(f"{CACHE_KEY_CONFIG_PREFIX}*")
            cache.delete(CACHE_KEY_CONFIGS_ALL)
        except redis.RedisError as e:
            logger.warning("cache_invalidation_failed", error=str(e))
