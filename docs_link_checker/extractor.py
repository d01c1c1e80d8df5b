"""
Extraction of strict URLs from lines of text.
"""

import re
from typing import Iterable, Iterator

from docs_link_checker.models import Reference

# Strict grammar: an explicit scheme, a valid authority, then an optional
# path/query/fragment. Bare hosts such as ``www.example.com`` never match.
_SCHEME = r"[A-Za-z][A-Za-z0-9+.\-]*://"
_USERINFO = r"(?:[A-Za-z0-9\-._~%!$&*+,;=:]+@)?"
# ASCII alphanumerics or any non-ASCII character except whitespace and surrogates.
_HOST_CHAR = r"(?:[A-Za-z0-9]|(?![\s\ud800-\udfff])[\u00a1-\uffff])"
_LABEL = rf"{_HOST_CHAR}(?:(?:{_HOST_CHAR}|-)*{_HOST_CHAR})?"
_HOST = (
    r"(?:"
    r"\[[0-9A-Fa-f:.]+\]"
    rf"|{_LABEL}(?:\.{_LABEL})*"
    r")"
)
_PORT = r"(?::\d{1,5})?"
_PATH = r"(?:[/?#][^\s<>\"'`{}|\\^]*)?"

STRICT_URL_PATTERN = re.compile(
    rf"(?<![A-Za-z0-9+.\-]){_SCHEME}{_USERINFO}{_HOST}{_PORT}(?![A-Za-z0-9\-.]*[A-Za-z0-9\-]){_PATH}"
)

# Characters that end a sentence rather than a URL.
_TRAILING_PUNCTUATION = ".,;:!?*"
_BRACKETS = {")": "(", "]": "["}


def _trim(url: str) -> str:
    """Strip trailing punctuation and unbalanced closing brackets."""
    while url:
        last = url[-1]
        if last in _TRAILING_PUNCTUATION:
            url = url[:-1]
        elif last in _BRACKETS and url.count(last) > url.count(_BRACKETS[last]):
            url = url[:-1]
        else:
            break
    return url


def extract_urls(text: str) -> Iterator[str]:
    """
    Find strict URLs in a piece of text, left to right.

    Args:
        text: Text to scan

    Yields:
        Each URL found
    """
    for match in STRICT_URL_PATTERN.finditer(text):
        url = _trim(match.group(0))
        if url:
            yield url


def extract_references(line: str, line_number: int, file: str) -> Iterator[Reference]:
    """
    Extract references from one line.

    Args:
        line: Line of text
        line_number: 1-based line number
        file: Identifier of the file the line belongs to

    Yields:
        One Reference per URL, in order of appearance
    """
    for url in extract_urls(line):
        yield Reference(file=file, line=line_number, url=url)


def scan_lines(lines: Iterable[str], file: str) -> Iterator[Reference]:
    """
    Extract references from a sequence of lines, numbering them from 1.

    Args:
        lines: Lines of a document
        file: Identifier of the document

    Yields:
        References in document order
    """
    for line_number, line in enumerate(lines, start=1):
        yield from extract_references(line, line_number, file)


def scan_text(text: str, file: str) -> Iterator[Reference]:
    """Extract references from a whole document held in memory."""
    return scan_lines(text.splitlines(), file)
