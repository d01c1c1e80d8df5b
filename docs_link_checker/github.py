"""
Async client for GitHub repository metadata.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import httpx

from docs_link_checker.errors import GitHubAPIError

GITHUB_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "docs-link-checker/0.1.0"


def parse_github_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a GitHub API timestamp such as ``2020-01-31T12:00:00Z``.

    Args:
        value: Timestamp string from the API

    Returns:
        Aware UTC datetime, or None if the value is missing or unparseable
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class RepositoryMetadata:
    """The parts of ``GET /repos/{org}/{repo}`` the checker looks at."""
    status_code: int
    pushed_at: Optional[datetime] = None


class GitHubClient:
    """
    Thin async wrapper around the GitHub REST API.

    The client is built once and shared read-only by every concurrent check.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        http_client: Optional[httpx.AsyncClient] = None,
        base_url: str = GITHUB_API_URL,
    ):
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token sent as a bearer token (optional)
            user_agent: User-Agent header value
            http_client: Pre-built client to use instead of creating one
            base_url: API root
        """
        self.logger = logging.getLogger(__name__)
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        else:
            self.logger.warning(
                "No GitHub token configured; repository checks will hit the unauthenticated rate limit"
            )

        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(follow_redirects=True, timeout=None)

    async def get_repository(self, org: str, repo: str) -> RepositoryMetadata:
        """
        Fetch metadata for a repository.

        Args:
            org: Repository owner
            repo: Repository name

        Returns:
            Status code and push timestamp of the response

        Raises:
            GitHubAPIError: On transport failure, rejected credentials or rate limiting
        """
        url = f"{self.base_url}/repos/{org}/{repo}"

        try:
            response = await self.client.get(url, headers=self.headers, follow_redirects=True)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GET {url}: {e}") from e
        except httpx.InvalidURL as e:
            raise GitHubAPIError(f"GET {url}: invalid URL: {e}") from e

        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining is not None:
            self.logger.debug(
                f"GitHub rate limits: {remaining}/{response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code == 401:
            raise GitHubAPIError(f"GET {url}: 401 Bad credentials")

        if response.status_code in (403, 429):
            reset = response.headers.get("X-RateLimit-Reset")
            if remaining == "0" and reset:
                try:
                    reset_text = datetime.fromtimestamp(int(reset), tz=timezone.utc).isoformat()
                except ValueError:
                    reset_text = reset
                raise GitHubAPIError(
                    f"GET {url}: {response.status_code} API rate limit exceeded (resets at {reset_text})"
                )
            raise GitHubAPIError(f"GET {url}: {response.status_code} Forbidden")

        if response.status_code != 200:
            return RepositoryMetadata(status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(f"GET {url}: invalid JSON body: {e}") from e
        if not isinstance(data, dict):
            raise GitHubAPIError(f"GET {url}: unexpected response body")

        return RepositoryMetadata(
            status_code=response.status_code,
            pushed_at=parse_github_datetime(data.get("pushed_at")),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> 'GitHubClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
