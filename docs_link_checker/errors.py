"""
Exceptions raised by the docs link checker.
"""


class LinkCheckerError(Exception):
    """Base class for link checker errors."""


class MalformedReferenceError(LinkCheckerError):
    """A GitHub URL that does not name exactly one organization and repository."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"malformed github reference: {url}")


class GitHubAPIError(LinkCheckerError):
    """The repository metadata request failed (transport, authentication or rate limit)."""


class ConfigError(LinkCheckerError):
    """Invalid or unreadable configuration."""
