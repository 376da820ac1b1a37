"""Global rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from common.core.config import settings
from common.core.constants import CacheProviderType

# Redis storage shares counters across API replicas; other cache modes keep
# counters in process memory.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["20/second", "600/minute"],
    storage_uri=(
        settings.redis_connection_url
        if settings.cache_provider == CacheProviderType.REDIS
        else "memory://"
    ),
)
