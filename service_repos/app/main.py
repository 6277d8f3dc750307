"""
Repos service: public repository counts for GitHub users.
"""

from typing import Optional

from fastapi.responses import HTMLResponse, JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig, get_config
from shared.errors import INTERNAL_ERROR_CONTENT
from shared.logging import set_lookup_context

from .adapters.github_client import GitHubClient
from .cache.memory_cache import InMemoryCache
from .cache.redis_cache import RedisCache
from .domain.models import LookupSource, ResolutionOutcome
from .domain.rendering import render_repo_count, render_not_found
from .domain.repo_lookup import RepoLookupService


class ReposService(BaseService):
    """Repos service implementation.

    The cache and the upstream resolver are built once here and handed to
    the lookup service; tests pass their own.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        cache=None,
        resolver=None
    ):
        super().__init__("repos", config or get_config("repos"))

        self.cache = cache if cache is not None else self._build_cache()
        self.resolver = resolver if resolver is not None else GitHubClient(
            self.config.github_api_url,
            timeout=self.config.upstream_timeout
        )
        self.lookup_service = RepoLookupService(
            self.cache,
            self.resolver,
            metrics=self.metrics,
            ttl_seconds=self.config.cache_ttl_seconds
        )

        self._setup_repos_routes()

    def _build_cache(self):
        backend = self.config.cache_backend.lower()
        if backend == "memory":
            return InMemoryCache(metrics=self.metrics)
        if backend != "redis":
            self.logger.warning("Unknown cache backend, using redis", backend=backend)
        return RedisCache(
            self.config.redis_dsn,
            metrics=self.metrics,
            socket_timeout=self.config.cache_socket_timeout
        )

    def _setup_repos_routes(self):
        """Set up repos-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "repos",
                "message": "GitHub public repository counter",
                "version": "1.0.0",
                "capabilities": ["caching", "github_lookup"]
            }

        @self.app.get("/repos/{username}")
        async def get_repos(username: str):
            """Public repository count for a GitHub user."""
            set_lookup_context(username)
            result = await self.lookup_service.lookup(username)

            if result.outcome is ResolutionOutcome.FOUND:
                return HTMLResponse(
                    render_repo_count(username, result.count),
                    headers={"X-Cache": "HIT" if result.source is LookupSource.CACHE else "MISS"}
                )

            if result.outcome is ResolutionOutcome.NOT_FOUND:
                return HTMLResponse(render_not_found(username), status_code=404)

            self.metrics.record_error("UPSTREAM_ERROR")
            return JSONResponse(status_code=500, content=INTERNAL_ERROR_CONTENT)

    async def _check_dependencies(self):
        """Check repos service dependencies."""
        dependencies = {}

        try:
            dependencies["cache"] = "ok" if await self.cache.health_check() else "error"
        except Exception:
            dependencies["cache"] = "error"

        return dependencies

    async def start(self):
        """Start repos service components."""
        await self.cache.start()
        await self.resolver.start()
        self.logger.info("Repos service started", port=self.port)

    async def stop(self):
        """Stop repos service components."""
        await self.resolver.stop()
        await self.cache.stop()
        self.logger.info("Repos service stopped")


def create_app(config: Optional[ServiceConfig] = None, cache=None, resolver=None):
    """Create repos service application."""
    service = ReposService(config, cache=cache, resolver=resolver)
    return service.app


def main():
    service = ReposService()
    service.run()


if __name__ == "__main__":
    main()
