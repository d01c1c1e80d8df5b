"""
Failure report: file -> line -> {url, message}.
"""

import json
import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from docs_link_checker.models import Check

logger = logging.getLogger(__name__)

LINE_WARNINGS_KEY = "line warnings"


class Report:
    """
    Nested mapping of failing checks.

    Only failing checks are recorded. Each (file, line) pair holds a single
    entry: a later failure on the same line replaces the earlier one.
    """

    def __init__(self):
        self._files: Dict[str, Dict[int, Dict[str, str]]] = {}

    def add(self, check: Check) -> bool:
        """
        Fold a check into the report.

        Args:
            check: A resolved check

        Returns:
            True if the check was recorded, False if it passed and was discarded
        """
        if check.ok:
            return False

        lines = self._files.setdefault(check.file, {})
        if check.line in lines:
            logger.debug(
                f"Replacing {lines[check.line]['url']} at {check.file}:{check.line} with {check.url}"
            )
        lines[check.line] = {"url": check.url, "message": check.message}
        return True

    def extend(self, checks: Iterable[Check]) -> None:
        for check in checks:
            self.add(check)

    def get(self, file: str, line: int) -> Optional[Dict[str, str]]:
        return self._files.get(file, {}).get(line)

    @property
    def files(self) -> Tuple[str, ...]:
        return tuple(sorted(self._files))

    def entries(self) -> Iterator[Tuple[str, int, Dict[str, str]]]:
        """Iterate over (file, line, entry) in file and line order."""
        for file in sorted(self._files):
            for line in sorted(self._files[file]):
                yield file, line, self._files[file][line]

    def __len__(self) -> int:
        return sum(len(lines) for lines in self._files.values())

    def __bool__(self) -> bool:
        return bool(self._files)

    def to_dict(self) -> Dict:
        """Render the report in its JSON shape."""
        return {
            file: {
                LINE_WARNINGS_KEY: {
                    str(line): dict(self._files[file][line])
                    for line in sorted(self._files[file])
                }
            }
            for file in sorted(self._files)
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def write_report(report: Report, outfile: Optional[str] = None) -> None:
    """
    Write the report as indented JSON.

    Args:
        report: The report to write
        outfile: Destination path; prints to stdout when not given
    """
    payload = report.to_json()
    if not outfile:
        print(payload)
        return

    logger.info(f"writing output to {outfile}")
    with open(outfile, "w", encoding="utf-8") as f:
        f.write(payload)
        f.write("\n")
