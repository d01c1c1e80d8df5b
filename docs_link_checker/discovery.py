"""
Discovery of candidate documents under a directory.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Tuple

from docs_link_checker.config import DEFAULT_EXTENSIONS

logger = logging.getLogger(__name__)


def discover_files(root: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Iterator[Path]:
    """
    Find documents to check below ``root``.

    Directories whose name begins with a period are not entered.

    Args:
        root: Directory to walk
        extensions: File suffixes to accept, e.g. ``(".rst", ".txt")``

    Yields:
        Paths of matching regular files, in sorted order per directory
    """
    suffixes = tuple(ext.lower() for ext in extensions)

    def on_error(error: OSError) -> None:
        logger.error(f"Cannot read directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix.lower() in suffixes and path.is_file():
                yield path


def file_identifier(path: Path, root: Path) -> str:
    """Identifier for ``path`` in the report: its POSIX path relative to ``root``."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def discover_documents(root: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Iterator[Tuple[Path, str]]:
    """Yield (path, identifier) pairs for every document below ``root``."""
    for path in discover_files(root, extensions):
        yield path, file_identifier(path, root)
