"""
Redis Client Wrapper - Company Scoring Platform
app/services/redis_cache.py

Thin pydantic-aware wrapper over redis-py. Every key is stored under a
namespace so several deployments can share one Redis database, and models
are written camelCase exactly as the API serves them.
"""

import redis
from typing import Iterable, Optional, TypeVar, Type
from pydantic import BaseModel
from app.config import settings

T = TypeVar("T", bound=BaseModel)

DEFAULT_NAMESPACE = "scoring"


class RedisCache:
    def __init__(self, url: Optional[str] = None, namespace: str = DEFAULT_NAMESPACE):
        self.namespace = namespace
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    def ping(self) -> bool:
        return bool(self.client.ping())

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Read a cached model; None on a miss."""
        data = self.client.get(self._key(key))
        if data:
            return model.model_validate_json(data)
        return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self.client.setex(self._key(key), ttl_seconds, value.model_dump_json(by_alias=True))

    def delete(self, *keys: str) -> int:
        """Drop the given keys; returns how many existed."""
        if not keys:
            return 0
        return self.client.delete(*(self._key(k) for k in keys))

    def delete_pattern(self, pattern: str) -> int:
        """Drop every key matching a glob pattern (SCAN, not KEYS)."""
        matched: Iterable[str] = self.client.scan_iter(match=self._key(pattern))
        removed = 0
        for key in matched:
            removed += self.client.delete(key)
        return removed
