"""
Docs link checker.

Scans documentation for hyperlinks and GitHub repository references,
validates each one concurrently and reports the broken or stale ones.
"""

from docs_link_checker.checker import Checker
from docs_link_checker.config import Settings, load_settings
from docs_link_checker.errors import (
    ConfigError,
    GitHubAPIError,
    LinkCheckerError,
    MalformedReferenceError,
)
from docs_link_checker.models import Check, Reference
from docs_link_checker.report import Report, write_report

__version__ = "0.1.0"

__all__ = [
    'Checker', 'Settings', 'load_settings',
    'Check', 'Reference', 'Report', 'write_report',
    'LinkCheckerError', 'MalformedReferenceError', 'GitHubAPIError', 'ConfigError',
]
