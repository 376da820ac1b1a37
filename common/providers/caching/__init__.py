from .interface import CacheInterface
from .decorators import cache, cache_invalidate
from .factory import get_cache_provider
from .redis_cache import RedisCache
from .memory_cache import MemoryCache
from .passthrough_cache import PassthroughCache

__all__ = [
    "CacheInterface",
    "cache",
    "cache_invalidate",
    "get_cache_provider",
    "RedisCache",
    "MemoryCache",
    "PassthroughCache",
]
