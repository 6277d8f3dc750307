"""
Redis caching layer for the repos service.
"""

from typing import Optional

import redis.asyncio as redis

from shared.logging import get_logger
from shared.errors import CacheUnavailableError
from shared.metrics import MetricsCollector

from .codec import encode_count, decode_count


class RedisCache:
    """Redis-backed cache of repository counts.

    Reads fail open and writes are best-effort: store errors are logged and
    counted, never raised to the caller.
    """

    cache_type = "redis"

    def __init__(
        self,
        redis_url: str,
        metrics: Optional[MetricsCollector] = None,
        socket_timeout: float = 5.0,
        client: Optional[redis.Redis] = None
    ):
        self.redis_url = redis_url
        self.metrics = metrics
        self.socket_timeout = socket_timeout
        self.logger = get_logger("repos.cache.redis")
        self.redis: Optional[redis.Redis] = client

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self.redis is None:
            self.redis = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
                health_check_interval=30
            )
        return self.redis

    async def start(self):
        """Start the Redis cache.

        An unreachable server is logged and tolerated; lookups then miss.
        """
        try:
            client = await self._get_redis()
            await client.ping()
            self.logger.info("Connected to Redis", redis_url=self.redis_url)
        except Exception as e:
            self.logger.error("Failed to connect to Redis", redis_url=self.redis_url, error=str(e))

    async def stop(self):
        """Stop the Redis cache."""
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self.logger.info("Redis cache stopped")

    async def get(self, key: str) -> Optional[int]:
        """Get a cached count, or ``None`` on miss or store failure."""
        try:
            raw = await self._read(key)
        except CacheUnavailableError as e:
            self.logger.error("Redis cache error", operation="get", key=key, error=e.details.get("error"))
            self._record("cache_errors_total", operation="get")
            return None

        count = decode_count(raw)
        if count is None:
            if raw is not None:
                self.logger.warning("Discarding undecodable cache entry", key=key, value=str(raw))
            self._record("cache_misses_total")
            return None

        self._record("cache_hits_total")
        return count

    async def set(self, key: str, value: int, ttl_seconds: int) -> bool:
        """Cache a count with an expiry. Returns whether the write succeeded."""
        try:
            client = await self._get_redis()
            await client.setex(key, ttl_seconds, encode_count(value))
        except Exception as e:
            self.logger.error("Redis cache error", operation="set", key=key, error=str(e))
            self._record("cache_errors_total", operation="set")
            return False

        self.logger.debug("Cached repository count", key=key, ttl=ttl_seconds)
        return True

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            client = await self._get_redis()
            await client.ping()
            return True
        except Exception:
            return False

    async def _read(self, key: str):
        try:
            client = await self._get_redis()
            return await client.get(key)
        except Exception as e:
            raise CacheUnavailableError(details={"key": key, "error": str(e)}) from e

    def _record(self, metric_name: str, **labels):
        if self.metrics is not None:
            self.metrics.increment_counter(metric_name, cache_type=self.cache_type, **labels)
