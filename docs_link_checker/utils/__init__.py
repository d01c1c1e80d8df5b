"""
Utilities for the docs link checker: logging setup and deadline helpers.
"""

from docs_link_checker.utils.logging import StructuredFormatter, ConsoleFormatter, setup_logger, log_check
from docs_link_checker.utils.timer import WallTimeTracker, race

__all__ = [
    # Logging
    'StructuredFormatter', 'ConsoleFormatter', 'setup_logger', 'log_check',

    # Deadlines
    'WallTimeTracker', 'race',
]
