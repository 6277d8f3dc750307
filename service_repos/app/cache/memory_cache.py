"""
In-process TTL cache for the repos service.
"""

import time
from typing import Callable, Dict, Optional, Tuple

from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .codec import encode_count, decode_count


class InMemoryCache:
    """Process-local cache with per-key expiry.

    Entries are stored encoded, exactly as Redis would hold them, and are
    dropped lazily once their deadline passes.
    """

    cache_type = "memory"

    def __init__(
        self,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.metrics = metrics
        self.clock = clock
        self.logger = get_logger("repos.cache.memory")
        self._store: Dict[str, Tuple[float, str]] = {}  # key -> (expires_at, encoded value)

    async def start(self):
        self.logger.info("In-memory cache started")

    async def stop(self):
        self._store.clear()
        self.logger.info("In-memory cache stopped")

    async def get(self, key: str) -> Optional[int]:
        """Get a cached count, or ``None`` when absent or expired."""
        item = self._store.get(key)
        if item is None:
            self._record("cache_misses_total")
            return None

        expires_at, raw = item
        if self.clock() >= expires_at:
            self._store.pop(key, None)
            self._record("cache_misses_total")
            return None

        count = decode_count(raw)
        if count is None:
            self._record("cache_misses_total")
            return None

        self._record("cache_hits_total")
        return count

    async def set(self, key: str, value: int, ttl_seconds: int) -> bool:
        """Cache a count with an expiry. Returns whether the write succeeded."""
        try:
            encoded = encode_count(value)
        except ValueError as e:
            self.logger.error("Memory cache error", operation="set", key=key, error=str(e))
            self._record("cache_errors_total", operation="set")
            return False

        now = self.clock()
        self._purge_expired(now)
        self._store[key] = (now + ttl_seconds, encoded)
        return True

    async def health_check(self) -> bool:
        return True

    def _purge_expired(self, now: float):
        expired = [key for key, (expires_at, _) in self._store.items() if now >= expires_at]
        for key in expired:
            del self._store[key]

    def __len__(self) -> int:
        return len(self._store)

    def _record(self, metric_name: str, **labels):
        if self.metrics is not None:
            self.metrics.increment_counter(metric_name, cache_type=self.cache_type, **labels)
