"""
Network validators for GitHub repositories and generic links.

Each validator returns an ``(ok, message)`` outcome instead of raising; the
message is empty exactly when ``ok`` is True.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

import httpx

from docs_link_checker.errors import GitHubAPIError
from docs_link_checker.github import GitHubClient

logger = logging.getLogger(__name__)

Outcome = Tuple[bool, str]

PASSED: Outcome = (True, "")
STALE_MESSAGE = "stale (last commit more than a year ago)"
UNRESOLVED_MESSAGE = "unable to resolve"


def add_years(moment: datetime, years: int) -> datetime:
    """
    Calendar arithmetic: the same month, day and time ``years`` later.

    February 29 rolls over to March 1 in non-leap target years.
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)


def is_stale(pushed_at: Optional[datetime], now: datetime) -> bool:
    """
    Check whether a repository's last push is more than a year before ``now``.

    Args:
        pushed_at: Time of the last push, or None if the repository was never pushed
        now: Evaluation time

    Returns:
        True if ``pushed_at + 1 year < now``
    """
    if pushed_at is None:
        return True
    return add_years(pushed_at, 1) < now


def status_message(status_code: int) -> str:
    return f"got status code {status_code}"


async def validate_github(
    org: str,
    repo: str,
    client: GitHubClient,
    now: Optional[datetime] = None
) -> Outcome:
    """
    Check that a repository exists and has been pushed to within the last year.

    Args:
        org: Repository owner
        repo: Repository name
        client: Shared GitHub metadata client
        now: Evaluation time (defaults to the current UTC time)

    Returns:
        Outcome of the check
    """
    try:
        metadata = await client.get_repository(org, repo)
    except GitHubAPIError as e:
        return False, f"err: {str(e)!r}"

    if metadata.status_code != 200:
        return False, status_message(metadata.status_code)

    if now is None:
        now = datetime.now(timezone.utc)
    if is_stale(metadata.pushed_at, now):
        return False, STALE_MESSAGE

    return PASSED


async def validate_link(url: str, client: httpx.AsyncClient) -> Outcome:
    """
    Check that a URL answers 200 to a GET without following redirects.

    Only the status line and headers are read; the body is never downloaded.

    Args:
        url: URL to check
        client: Shared HTTP client configured not to follow redirects

    Returns:
        Outcome of the check
    """
    try:
        async with client.stream("GET", url, follow_redirects=False) as response:
            status_code = response.status_code
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
        # UnicodeError: hosts that fail IDNA encoding while the request is built
        logger.debug(f"GET {url} failed: {e!r}")
        return False, UNRESOLVED_MESSAGE

    if status_code != 200:
        return False, status_message(status_code)

    return PASSED
