"""
Routing of references to the GitHub repository check or the generic link check.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from docs_link_checker.errors import MalformedReferenceError
from docs_link_checker.models import Reference

GITHUB_HTTPS = "https://github.com/"
GITHUB_HTTP = "http://github.com/"

GITHUB = "github"
LINK = "link"


def is_github_url(url: str) -> bool:
    """
    Check if a URL points into github.com.

    Args:
        url: URL to check

    Returns:
        True if the URL starts with the http or https github.com prefix
    """
    return url.startswith(GITHUB_HTTPS) or url.startswith(GITHUB_HTTP)


def split_org_and_repo(url: str) -> Tuple[str, str]:
    """
    Split a GitHub repository URL into organization and repository.

    Args:
        url: URL starting with ``https://github.com/`` or ``http://github.com/``

    Returns:
        Tuple of (org, repo)

    Raises:
        MalformedReferenceError: If the remainder is not exactly ``<org>/<repo>``
    """
    for prefix in (GITHUB_HTTPS, GITHUB_HTTP):
        if url.startswith(prefix):
            parts = url[len(prefix):].split("/")
            if len(parts) == 2 and all(parts):
                return parts[0], parts[1]
            break

    raise MalformedReferenceError(url)


@dataclass(frozen=True)
class Route:
    """Where a reference should be validated."""
    kind: str
    org: Optional[str] = None
    repo: Optional[str] = None

    @property
    def is_github(self) -> bool:
        return self.kind == GITHUB


def classify(reference: Reference) -> Route:
    """
    Decide how a reference is validated.

    Args:
        reference: Extracted reference

    Returns:
        A GitHub route carrying org and repo, or a generic link route

    Raises:
        MalformedReferenceError: For a github.com URL that is not ``<org>/<repo>``
    """
    if not is_github_url(reference.url):
        return Route(kind=LINK)

    org, repo = split_org_and_repo(reference.url)
    return Route(kind=GITHUB, org=org, repo=repo)
