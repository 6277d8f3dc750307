"""
Cache-aside lookup of a user's public repository count.
"""

import time
from typing import Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .models import LookupResult, LookupSource, ResolutionResult

DEFAULT_CACHE_TTL_SECONDS = 3600


class RepoLookupService:
    """Checks the cache, falls back to the upstream resolver, writes back on success.

    The cache is expected to fail open: ``get`` returns ``None`` on any store
    error and ``set`` never raises. The resolver reports every failure as a
    ``ResolutionResult`` rather than an exception.
    """

    def __init__(
        self,
        cache,
        resolver,
        metrics: Optional[MetricsCollector] = None,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    ):
        self.cache = cache
        self.resolver = resolver
        self.metrics = metrics
        self.ttl_seconds = ttl_seconds
        self.logger = get_logger("repos.lookup")

    async def lookup(self, username: str) -> LookupResult:
        """Resolve the public repository count for ``username``."""
        cached = await self.cache.get(username)
        if cached is not None:
            self.logger.info("Cache hit", username=username)
            return LookupResult(username, ResolutionResult.found(cached), LookupSource.CACHE)

        self.logger.info("Cache miss", username=username)

        start_time = time.time()
        resolution = await self.resolver.resolve(username)
        self._record_resolution(resolution, time.time() - start_time)

        if resolution.is_found:
            # Result is ignored; the fresh value is served either way
            await self.cache.set(username, resolution.count, self.ttl_seconds)
            return LookupResult(username, resolution, LookupSource.UPSTREAM)

        return LookupResult(username, resolution)

    def _record_resolution(self, resolution: ResolutionResult, duration: float):
        if self.metrics is None:
            return
        self.metrics.increment_counter("upstream_requests_total", outcome=resolution.outcome.value)
        self.metrics.get_metric("upstream_request_duration_seconds").observe(duration)
