"""
Redis cache utility for expensive report aggregations
"""
import functools
import json
import logging
from typing import Any, Callable, Optional, Tuple

import redis

logger = logging.getLogger(__name__)


class CacheService:
    """
    Best-effort Redis cache

    Every operation degrades to a no-op when Redis is not configured or not
    reachable, so callers never fail because of the cache.
    """

    def __init__(self, redis_client: Optional[Any] = None, default_ttl: int = 300):
        self.redis_client = redis_client
        self.default_ttl = default_ttl

    @classmethod
    def from_url(cls, url: Optional[str], default_ttl: int = 300) -> "CacheService":
        """
        Connect to Redis, falling back to a disabled cache

        Args:
            url: Redis URL, or None to disable caching
            default_ttl: Expiration used when set() is called without one
        """
        if not url:
            logger.info("REDIS_URL not set. Caching disabled.")
            return cls(None, default_ttl)

        try:
            client = redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            client = None

        return cls(client, default_ttl)

    @property
    def enabled(self) -> bool:
        return self.redis_client is not None

    def _run(self, action: str, key: str, operation: Callable[[Any], Any]) -> Tuple[bool, Any]:
        """
        Run one Redis call against the client

        Returns (succeeded, result). A disabled cache or a Redis error yields
        (False, None); errors are logged and never raised.
        """
        if self.redis_client is None:
            return False, None

        try:
            return True, operation(self.redis_client)
        except Exception as e:
            logger.error(f"Cache {action} failed for {key}: {str(e)}")
            return False, None

    def get(self, key: str) -> Optional[Any]:
        """Decoded JSON value stored under key, or None"""
        _, raw = self._run("get", key, lambda client: client.get(key))
        if not raw:
            return None

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding undecodable cache entry: {key}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store value as JSON for ttl seconds (the default TTL when omitted)

        Dates and other non-JSON values are stored as strings.
        """
        payload = json.dumps(value, default=str)
        expire = ttl or self.default_ttl
        stored, _ = self._run("set", key, lambda client: client.setex(key, expire, payload))
        return stored

    def delete(self, key: str) -> bool:
        deleted, _ = self._run("delete", key, lambda client: client.delete(key))
        return deleted


def cached(key: str, ttl_setting: Callable[[Any], int]):
    """
    Cache-aside decorator for service methods

    The decorated method's instance must expose a ``cache`` attribute holding
    a CacheService (or None). On a hit the stored value is returned as-is; on
    a miss the method runs and its result is stored for the instance-provided
    TTL.

    Args:
        key: Fixed cache key for the report
        ttl_setting: Callable receiving the instance and returning the TTL
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            cache: Optional[CacheService] = getattr(self, "cache", None)
            if cache is None or not cache.enabled:
                return func(self, *args, **kwargs)

            hit = cache.get(key)
            if hit is not None:
                logger.info(f"Cache hit: {key}")
                return hit

            logger.info(f"Cache miss: {key}")
            result = func(self, *args, **kwargs)

            ttl = ttl_setting(self)
            if cache.set(key, result, ttl):
                logger.info(f"Cached {key} for {ttl}s")

            return result
        return wrapper
    return decorator
