"""
Pytest configuration and shared fixtures
"""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from docs_link_checker.checker import Checker
from docs_link_checker.github import GitHubClient

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def github_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def repo_payload(pushed_at: datetime, **extra) -> dict:
    payload = {"full_name": "foo/bar", "pushed_at": github_timestamp(pushed_at), "archived": False}
    payload.update(extra)
    return payload


def ok_link(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200)


def fresh_repo(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=repo_payload(NOW - timedelta(days=30)))


@pytest.fixture
def now():
    """Fixed evaluation time"""
    return NOW


@pytest.fixture
def make_github():
    """Factory for a GitHubClient backed by a mock transport"""
    def factory(handler, token="test-token"):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return GitHubClient(token=token, http_client=http_client)
    return factory


@pytest.fixture
def make_link_client():
    """Factory for a non-redirecting AsyncClient backed by a mock transport"""
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=False)
    return factory


@pytest.fixture
def make_checker(make_github, make_link_client):
    """
    Factory for a Checker with mocked GitHub and link endpoints.

    Call it from inside the coroutine under test so asyncio primitives bind to
    the running loop.
    """
    def factory(link_handler=ok_link, github_handler=fresh_repo, timeout=1.0, max_concurrency=50):
        return Checker(
            github=make_github(github_handler),
            http_client=make_link_client(link_handler),
            timeout=timeout,
            max_concurrency=max_concurrency,
            clock=lambda: NOW,
        )
    return factory
