"""
Data model for extracted references and their validation outcomes.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Reference:
    """
    A URL found in a document, with the file and 1-based line it came from.
    """
    file: str
    line: int
    url: str


@dataclass
class Check:
    """
    Validation outcome for one reference.

    A check starts unresolved (``ok`` False, empty ``message``) and is
    resolved exactly once through :meth:`succeed` or :meth:`fail`. After
    that ``ok`` is True exactly when ``message`` is empty.
    """
    file: str
    line: int
    url: str
    ok: bool = False
    message: str = ""
    resolved: bool = False

    @classmethod
    def for_reference(cls, reference: Reference) -> 'Check':
        """Create an unresolved check for a reference."""
        return cls(file=reference.file, line=reference.line, url=reference.url)

    def succeed(self) -> 'Check':
        """Mark the check as passed."""
        return self._resolve(True, "")

    def fail(self, message: str) -> 'Check':
        """
        Mark the check as failed.

        Args:
            message: Non-empty explanation of the failure

        Returns:
            The check itself
        """
        if not message:
            raise ValueError("a failing check needs a message")
        return self._resolve(False, message)

    def _resolve(self, ok: bool, message: str) -> 'Check':
        if self.resolved:
            raise RuntimeError(f"check for {self.url} at {self.file}:{self.line} already resolved")
        self.ok = ok
        self.message = message
        self.resolved = True
        return self

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "file": self.file,
            "line": self.line,
            "url": self.url,
            "ok": self.ok,
            "message": self.message,
        }
