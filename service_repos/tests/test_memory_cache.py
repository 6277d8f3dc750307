"""
Unit tests for the in-memory cache gateway.
"""

import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_repos.app.cache.memory_cache import InMemoryCache
from shared.metrics import MetricsCollector
from shared.test_helpers import FakeClock


class TestInMemoryCache:
    """Test cases for InMemoryCache."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        return InMemoryCache(clock=clock)

    @pytest.mark.asyncio
    async def test_get_absent_key(self, cache):
        assert await cache.get("octocat") is None

    @pytest.mark.asyncio
    async def test_value_visible_until_ttl_elapses(self, cache, clock):
        assert await cache.set("octocat", 8, 3600) is True

        assert await cache.get("octocat") == 8
        clock.advance(3599)
        assert await cache.get("octocat") == 8
        clock.advance(1)
        assert await cache.get("octocat") is None
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_overwrite_resets_expiry(self, cache, clock):
        await cache.set("octocat", 8, 10)
        clock.advance(5)
        await cache.set("octocat", 9, 10)
        clock.advance(6)

        assert await cache.get("octocat") == 9

    @pytest.mark.asyncio
    async def test_zero_is_stored(self, cache):
        await cache.set("empty", 0, 60)

        assert await cache.get("empty") == 0

    @pytest.mark.asyncio
    async def test_set_rejects_invalid_count(self, cache):
        assert await cache.set("octocat", -5, 60) is False
        assert await cache.get("octocat") is None

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, cache, clock):
        await cache.set("a", 1, 10)
        await cache.set("b", 2, 100)
        clock.advance(50)

        assert await cache.get("a") is None
        assert await cache.get("b") == 2

    @pytest.mark.asyncio
    async def test_records_hits_and_misses(self, clock):
        metrics = MetricsCollector("repos")
        cache = InMemoryCache(metrics=metrics, clock=clock)

        await cache.get("octocat")
        await cache.set("octocat", 8, 60)
        await cache.get("octocat")

        labels = {"cache_type": "memory"}
        assert metrics.registry.get_sample_value("cache_misses_total", labels) == 1.0
        assert metrics.registry.get_sample_value("cache_hits_total", labels) == 1.0

    @pytest.mark.asyncio
    async def test_stop_clears_entries(self, cache):
        await cache.set("octocat", 8, 60)
        await cache.stop()

        assert await cache.get("octocat") is None
        assert await cache.health_check() is True

    @pytest.mark.asyncio
    async def test_set_purges_expired_entries(self, cache, clock):
        """Expired keys that are never read again do not accumulate."""
        for i in range(10):
            await cache.set(f"user{i}", i, 60)
        clock.advance(60)

        await cache.set("octocat", 8, 60)

        assert len(cache) == 1
        assert await cache.get("octocat") == 8
