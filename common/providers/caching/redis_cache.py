import json
from typing import Any, Optional
import redis.asyncio as redis

from common.core.config import settings
from .interface import CacheInterface
from common.core.telemetry import get_logger, trace_span

logger = get_logger(__name__)


class RedisCache(CacheInterface):
    """Redis-backed cache.

    Every key is also added to an index set named after its prefix so that
    `delete_pattern("prefix:*")` never needs the blocking KEYS command.
    """

    INDEX_PREFIX = "cache_index:"

    def __init__(self):
        self._client: Optional[redis.Redis] = None

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.Redis.from_url(
                settings.redis_connection_url, decode_responses=True
            )
        return self._client

    def _index_key(self, key_or_pattern: str) -> str:
        base = key_or_pattern.split(":", 1)[0].rstrip("*")
        return f"{self.INDEX_PREFIX}{base}"

    @trace_span
    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self._get_client().get(key)
            return json.loads(value) if value is not None else None
        except Exception as e:
            logger.error(f"Error getting cache key {key}: {e}")
            return None

    @trace_span
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            client = self._get_client()
            serialized = json.dumps(value, default=str)
            if ttl:
                await client.setex(key, ttl, serialized)
            else:
                await client.set(key, serialized)
            await client.sadd(self._index_key(key), key)
            return True
        except Exception as e:
            logger.error(f"Error setting cache key {key}: {e}")
            return False

    @trace_span
    async def delete(self, key: str) -> bool:
        try:
            client = self._get_client()
            deleted = await client.delete(key)
            await client.srem(self._index_key(key), key)
            return bool(deleted)
        except Exception as e:
            logger.error(f"Error deleting cache key {key}: {e}")
            return False

    @trace_span
    async def delete_pattern(self, pattern: str) -> int:
        try:
            client = self._get_client()
            index_key = self._index_key(pattern)
            keys = [
                key
                for key in await client.smembers(index_key)
                if key.startswith(pattern.rstrip("*"))
            ]
            if not keys:
                return 0
            deleted = await client.delete(*keys)
            await client.srem(index_key, *keys)
            return deleted
        except Exception as e:
            logger.error(f"Error deleting cache pattern {pattern}: {e}")
            return 0
