"""
GitHub REST client for the repos service.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from shared.logging import get_logger
from shared.errors import UpstreamNotFoundError, UpstreamServiceError

from ..domain.models import ResolutionResult

PUBLIC_REPOS_FIELD = "public_repos"


class GitHubClient:
    """Resolves a username to its public repository count.

    One request per resolution, no retries. All failures are reported as a
    ``ResolutionResult``; ``resolve`` never raises.
    """

    def __init__(
        self,
        api_url: str = "https://api.github.com",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("repos.github_client")
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.api_url,
                timeout=self.timeout,
                transport=self.transport,
                headers={
                    "Accept": "application/vnd.github+json",
                    "User-Agent": "repos-service/1.0.0"
                }
            )
        return self._client

    async def start(self):
        self._get_client()
        self.logger.info("GitHub client started", api_url=self.api_url)

    async def stop(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self.logger.info("GitHub client stopped")

    async def resolve(self, username: str) -> ResolutionResult:
        """Resolve the public repository count of ``username``."""
        self.logger.info("Fetching data", username=username)
        try:
            count = await self.fetch_public_repos(username)
        except UpstreamNotFoundError as e:
            self.logger.info("GitHub user not found", username=username, **e.details)
            return ResolutionResult.not_found()
        except UpstreamServiceError as e:
            self.logger.error("Error fetching data", username=username, error=e.message, **e.details)
            return ResolutionResult.upstream_error()

        return ResolutionResult.found(count)

    async def fetch_public_repos(self, username: str) -> int:
        """Fetch the count, raising ``UpstreamNotFoundError`` or ``UpstreamServiceError``."""
        try:
            response = await self._get_client().get(f"/users/{quote(username, safe='')}")
        except httpx.HTTPError as e:
            raise UpstreamServiceError(
                "GitHub unavailable",
                details={"http_error": type(e).__name__}
            ) from e

        if response.status_code == 404:
            raise UpstreamNotFoundError(username, details={"status_code": 404})

        if not response.is_success:
            raise UpstreamServiceError(
                f"Unexpected status {response.status_code}",
                details={"status_code": response.status_code}
            )

        payload = self._parse_payload(response)

        count = payload.get(PUBLIC_REPOS_FIELD)
        if count is None:
            raise UpstreamNotFoundError(username, details={"status_code": response.status_code})

        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise UpstreamServiceError(
                f"Malformed {PUBLIC_REPOS_FIELD} value",
                details={"value": repr(count)}
            )

        return count

    def _parse_payload(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamServiceError("Malformed JSON payload") from e

        if not isinstance(payload, dict):
            raise UpstreamServiceError(
                "Unexpected payload shape",
                details={"type": type(payload).__name__}
            )
        return payload
