"""
Unit tests for the cache-aside repository lookup.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_repos.app.domain.models import LookupSource, ResolutionOutcome, ResolutionResult
from service_repos.app.domain.repo_lookup import RepoLookupService
from shared.metrics import MetricsCollector
from shared.test_helpers import RecordingCache, UnavailableCache, StubResolver


class YieldingCache(RecordingCache):
    """Suspends after every read so concurrent lookups interleave."""

    async def get(self, key):
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


class TestRepoLookupService:
    """Test cases for RepoLookupService."""

    @pytest.fixture
    def cache(self):
        return RecordingCache()

    @pytest.fixture
    def resolver(self):
        return StubResolver(
            ResolutionResult.not_found(),
            results={"octocat": ResolutionResult.found(8)}
        )

    @pytest.fixture
    def lookup_service(self, cache, resolver):
        return RepoLookupService(cache, resolver)

    @pytest.mark.asyncio
    async def test_cache_hit_skips_upstream(self, cache, resolver, lookup_service):
        cache.entries["octocat"] = 8

        result = await lookup_service.lookup("octocat")

        assert result.outcome is ResolutionOutcome.FOUND
        assert result.count == 8
        assert result.source is LookupSource.CACHE
        assert resolver.calls == []
        assert cache.set_calls == []

    @pytest.mark.asyncio
    async def test_miss_resolves_and_writes_back(self, cache, resolver, lookup_service):
        result = await lookup_service.lookup("octocat")

        assert result.count == 8
        assert result.source is LookupSource.UPSTREAM
        assert resolver.calls == ["octocat"]
        assert cache.set_calls == [("octocat", 8, 3600)]

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, cache, lookup_service):
        result = await lookup_service.lookup("ghost")

        assert result.outcome is ResolutionOutcome.NOT_FOUND
        assert result.source is None
        assert cache.set_calls == []

    @pytest.mark.asyncio
    async def test_upstream_error_is_not_cached(self, cache):
        lookup_service = RepoLookupService(cache, StubResolver(ResolutionResult.upstream_error()))

        result = await lookup_service.lookup("octocat")

        assert result.outcome is ResolutionOutcome.UPSTREAM_ERROR
        assert cache.set_calls == []

    @pytest.mark.asyncio
    async def test_failed_write_still_returns_count(self, resolver):
        cache = UnavailableCache()
        lookup_service = RepoLookupService(cache, resolver)

        result = await lookup_service.lookup("octocat")

        assert result.count == 8
        assert cache.set_calls == [("octocat", 8, 3600)]

    @pytest.mark.asyncio
    async def test_cached_zero_is_a_hit(self, cache, resolver, lookup_service):
        cache.entries["empty"] = 0

        result = await lookup_service.lookup("empty")

        assert result.count == 0
        assert result.source is LookupSource.CACHE
        assert resolver.calls == []

    @pytest.mark.asyncio
    async def test_concurrent_misses_both_resolve(self, resolver):
        """No coalescing: each miss goes upstream and the last write wins."""
        cache = YieldingCache()
        lookup_service = RepoLookupService(cache, resolver)

        results = await asyncio.gather(
            lookup_service.lookup("octocat"),
            lookup_service.lookup("octocat")
        )

        assert [r.count for r in results] == [8, 8]
        assert resolver.calls == ["octocat", "octocat"]
        assert len(cache.set_calls) == 2
        assert cache.entries["octocat"] == 8

    @pytest.mark.asyncio
    async def test_records_upstream_metrics(self, cache, resolver):
        metrics = MetricsCollector("repos")
        lookup_service = RepoLookupService(cache, resolver, metrics=metrics)

        await lookup_service.lookup("octocat")
        await lookup_service.lookup("ghost")

        registry = metrics.registry
        assert registry.get_sample_value("upstream_requests_total", {"outcome": "found"}) == 1.0
        assert registry.get_sample_value("upstream_requests_total", {"outcome": "not_found"}) == 1.0
        assert registry.get_sample_value("upstream_request_duration_seconds_count") == 2.0

    @pytest.mark.asyncio
    async def test_uses_configured_ttl(self, cache, resolver):
        lookup_service = RepoLookupService(cache, resolver, ttl_seconds=120)

        await lookup_service.lookup("octocat")

        assert cache.set_calls == [("octocat", 8, 120)]

    @pytest.mark.asyncio
    async def test_cache_get_called_with_username(self, resolver):
        cache = RecordingCache()
        cache.get = AsyncMock(return_value=3)
        lookup_service = RepoLookupService(cache, resolver)

        result = await lookup_service.lookup("someone")

        cache.get.assert_called_once_with("someone")
        assert result.count == 3


def test_found_rejects_negative_count():
    with pytest.raises(ValueError):
        ResolutionResult.found(-1)


def test_is_found():
    assert ResolutionResult.found(0).is_found
    assert not ResolutionResult.not_found().is_found
    assert not ResolutionResult.upstream_error().is_found
