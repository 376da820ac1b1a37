import functools
import hashlib
import json
from typing import Callable, Optional, List, Type
from pydantic import BaseModel

from common.core.telemetry import get_logger
from .factory import get_cache_provider

logger = get_logger(__name__)


def _generate_cache_key(func: Callable, args: tuple, kwargs: dict) -> str:
    """`Class:method[:argshash]` for methods, `module:function[:argshash]` otherwise."""
    if args and hasattr(args[0], func.__name__):
        owner = args[0].__class__.__name__
        key_args = args[1:]
    else:
        owner = func.__module__.split(".")[-1]
        key_args = args

    suffix = ""
    if key_args or kwargs:
        payload = json.dumps(
            {"args": key_args, "kwargs": dict(sorted(kwargs.items()))},
            sort_keys=True,
            default=str,
        )
        suffix = f":{hashlib.md5(payload.encode()).hexdigest()[:8]}"
    return f"{owner}:{func.__name__}{suffix}"


def _is_model_type(model_type: Type) -> bool:
    return isinstance(model_type, type) and issubclass(model_type, BaseModel)


def cache(model_type: Type, ttl: int = 3600, key_generator: Optional[Callable] = None):
    """
    Cache decorator for async methods/functions.

    Cache failures are logged and never propagate: the wrapped call always
    runs when the cache cannot answer.

    Args:
        model_type: Pydantic model (or plain type) the result deserializes to.
            Lists of models are supported.
        ttl: Time to live in seconds
        key_generator: Optional callable receiving the call arguments (without self)
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            cache_key = None
            try:
                if key_generator:
                    is_method = args and hasattr(args[0], func.__name__)
                    call_args = args[1:] if is_method else args
                    cache_key = key_generator(*call_args, **kwargs)
                else:
                    cache_key = _generate_cache_key(func, args, kwargs)

                cached_value = await get_cache_provider().get(cache_key)
                if cached_value is not None:
                    logger.debug(f"Cache hit for key: {cache_key}")
                    if not _is_model_type(model_type):
                        return cached_value
                    if isinstance(cached_value, list):
                        return [model_type.model_validate(item) for item in cached_value]
                    return model_type.model_validate(cached_value)
            except Exception as e:
                logger.warning(f"Cache lookup failed for {func.__name__}: {e}")

            result = await func(*args, **kwargs)

            if cache_key and result is not None:
                try:
                    value = result
                    if _is_model_type(model_type):
                        if isinstance(result, list):
                            value = [item.model_dump(mode="json") for item in result]
                        else:
                            value = result.model_dump(mode="json")
                    await get_cache_provider().set(cache_key, value, ttl)
                except Exception as e:
                    logger.warning(f"Cache set failed for key {cache_key}: {e}")

            return result

        return wrapper

    return decorator


def cache_invalidate(patterns: List[str]):
    """Clear cache key patterns (e.g. `["MembershipLevelRepository:*"]`) after the call."""

    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            result = await func(*args, **kwargs)

            for pattern in patterns:
                try:
                    deleted_count = await get_cache_provider().delete_pattern(pattern)
                    logger.info(
                        f"Invalidated {deleted_count} cache keys matching pattern: {pattern}"
                    )
                except Exception as e:
                    logger.warning(f"Cache invalidation failed for pattern {pattern}: {e}")

            return result

        return wrapper

    return decorator
