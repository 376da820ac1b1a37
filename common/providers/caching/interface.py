from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheInterface(ABC):
    """Interface for cache providers.

    Keys are `prefix:rest` strings; `delete_pattern` takes `prefix:*`.
    Values are JSON-serializable.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the number deleted."""
        pass
