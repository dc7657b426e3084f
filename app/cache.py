"""
Redis caching utilities for read-heavy menu data.
Every helper fails open: a missing Redis means a cache miss, never an error.
"""
import json
import logging
from functools import wraps
from typing import Any, Callable, Optional

from .config import CACHE_ENABLED
from .rate_limiter import get_redis_client

logger = logging.getLogger(__name__)

CATEGORY_HIERARCHY_KEY = "menu:categories:hierarchy"
CATEGORY_LIST_KEY = "menu:categories:all"


class Cache:
    """Redis cache wrapper storing JSON values"""

    def __init__(self, enabled: bool = CACHE_ENABLED):
        self.enabled = enabled
        self.redis_client = None

    def _get_client(self):
        if not self.enabled:
            return None
        if self.redis_client is None:
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"⚠️ Redis cache unavailable: {e}")
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
        except Exception as e:
            logger.error(f"❌ Cache get error for {key}: {e}")
            return None

        if value is None:
            logger.debug(f"Cache MISS: {key}")
            return None
        logger.debug(f"✅ Cache HIT: {key}")
        return json.loads(value)

    def set(self, key: str, value: Any, ttl: int = 3600) -> bool:
        """Store value under key for ttl seconds (default 1 hour)"""
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value, default=str))
            logger.debug(f"✅ Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.delete(key)
            logger.debug(f"✅ Cache DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"❌ Cache delete error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g. 'menu:categories:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if not keys:
                return 0
            deleted = client.delete(*keys)
            logger.debug(f"✅ Cache DELETE pattern: {pattern} ({deleted} keys)")
            return deleted
        except Exception as e:
            logger.error(f"❌ Cache delete pattern error for {pattern}: {e}")
            return 0


cache = Cache()


def cached(key: str, ttl: int = 3600):
    """
    Cache the JSON-serializable result of a zero-argument loader

    Example:
        @cached(CATEGORY_HIERARCHY_KEY, ttl=600)
        def load_hierarchy():
            return build_tree(...)
    """

    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cached_value = cache.get(key)
            if cached_value is not None:
                return cached_value

            result = func(*args, **kwargs)
            if result is not None:
                cache.set(key, result, ttl)
            return result

        return wrapper

    return decorator


def invalidate_category_cache() -> int:
    """Drop every cached category view after a category write"""
    return cache.delete_pattern("menu:categories:*")
