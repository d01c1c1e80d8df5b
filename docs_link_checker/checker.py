"""
Concurrent validation engine.

One task is dispatched per reference, each raced against a fixed deadline.
Per-file batches are joined and filtered to failures, and failures from all
files are folded into a single Report by one consumer task.
"""

import asyncio
import contextlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

import httpx

from docs_link_checker.classifier import classify
from docs_link_checker.config import DEFAULT_MAX_CONCURRENCY, DEFAULT_TIMEOUT, Settings
from docs_link_checker.discovery import discover_documents
from docs_link_checker.errors import MalformedReferenceError
from docs_link_checker.extractor import scan_text
from docs_link_checker.github import GitHubClient
from docs_link_checker.models import Check, Reference
from docs_link_checker.report import Report
from docs_link_checker.utils.logging import log_check
from docs_link_checker.utils.timer import WallTimeTracker, race
from docs_link_checker.validators import validate_github, validate_link

MALFORMED_MESSAGE = "malformed github reference: expected https://github.com/<org>/<repo>"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Checker:
    """
    Validates references concurrently against GitHub and arbitrary HTTP endpoints.

    Both clients are long-lived and shared by every task; the checker never
    mutates them.
    """

    def __init__(
        self,
        github: GitHubClient,
        http_client: httpx.AsyncClient,
        timeout: float = DEFAULT_TIMEOUT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the checker.

        Args:
            github: Repository metadata client
            http_client: Client for generic links; must not follow redirects
            timeout: Seconds each individual check may take
            max_concurrency: Maximum checks in flight at once; <= 0 for no limit
            clock: Returns the current aware UTC time, used for staleness
        """
        self.logger = logging.getLogger(__name__)
        self.github = github
        self.http_client = http_client
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self.clock = clock or utc_now
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
        self._owned: List = []

    @classmethod
    def from_settings(cls, settings: Settings, clock: Optional[Clock] = None) -> 'Checker':
        """
        Build a checker and its clients from settings.

        The returned checker owns the clients; close it with :meth:`aclose`
        or use it as an async context manager.
        """
        headers = {"User-Agent": settings.user_agent}
        limits = httpx.Limits(
            max_connections=settings.max_concurrency if settings.max_concurrency > 0 else None,
            max_keepalive_connections=20,
        )
        # Per-check deadlines are enforced by the race, not by httpx.
        http_client = httpx.AsyncClient(
            follow_redirects=False, timeout=None, headers=headers, limits=limits
        )
        github = GitHubClient(token=settings.github_token, user_agent=settings.user_agent)

        checker = cls(
            github=github,
            http_client=http_client,
            timeout=settings.timeout,
            max_concurrency=settings.max_concurrency,
            clock=clock,
        )
        checker._owned = [github, http_client]
        return checker

    async def aclose(self) -> None:
        for client in self._owned:
            await client.aclose()
        self._owned = []

    async def __aenter__(self) -> 'Checker':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @property
    def link_timeout_message(self) -> str:
        return f"timeout after {self.timeout:g} seconds"

    @property
    def github_timeout_message(self) -> str:
        return f"timeout ({self.timeout:g} seconds)"

    def _slot(self):
        if self._semaphore is None:
            return contextlib.nullcontext()
        return self._semaphore

    async def check_reference(self, reference: Reference) -> Check:
        """
        Validate one reference.

        Never raises for a per-reference problem: malformed GitHub URLs,
        transport errors, bad statuses and timeouts all become failing checks.

        Args:
            reference: Reference to validate

        Returns:
            The resolved check
        """
        check = Check.for_reference(reference)

        try:
            route = classify(reference)
        except MalformedReferenceError:
            return check.fail(MALFORMED_MESSAGE)

        # The deadline starts once a slot is held, not while queueing for one.
        async with self._slot():
            try:
                if route.is_github:
                    ok, message = await race(
                        validate_github(route.org, route.repo, self.github, now=self.clock()),
                        self.timeout,
                        (False, self.github_timeout_message),
                    )
                else:
                    ok, message = await race(
                        validate_link(reference.url, self.http_client),
                        self.timeout,
                        (False, self.link_timeout_message),
                    )
            except Exception as e:
                self.logger.error(f"Unexpected error checking {reference.url}: {e!r}", exc_info=True)
                ok, message = False, f"err: {str(e)!r}"

        return check.succeed() if ok else check.fail(message)

    async def check_references(self, references: Iterable[Reference]) -> List[Check]:
        """
        Validate a batch of references, typically all of one file.

        Every reference gets its own task; the batch completes when all of them
        have resolved.

        Args:
            references: References to validate

        Returns:
            The failing checks of the batch
        """
        references = list(references)
        if not references:
            return []

        checks = await asyncio.gather(*(self.check_reference(ref) for ref in references))
        failures = [check for check in checks if not check.ok]

        for check in failures:
            log_check(self.logger, check)
        self.logger.info(
            f"{references[0].file}: {len(references)} references, {len(failures)} failing"
        )
        return failures

    async def check_text(self, text: str, file: str) -> List[Check]:
        """Validate every reference in an in-memory document."""
        return await self.check_references(scan_text(text, file))

    async def check_file(self, path: Path, file: Optional[str] = None) -> List[Check]:
        """
        Validate every reference in a file.

        A file that cannot be read is logged and yields no checks.

        Args:
            path: File to read
            file: Identifier recorded on each check (defaults to the file name)

        Returns:
            The failing checks of the file
        """
        path = Path(path)
        if file is None:
            file = path.name

        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as e:
            self.logger.error(f"Skipping {path}: {e}")
            return []

        return await self.check_text(text, file)

    async def check_documents(
        self,
        documents: Iterable[Tuple[Path, str]],
        deadline: Optional[float] = None
    ) -> Report:
        """
        Validate many files concurrently and fold their failures into a Report.

        Args:
            documents: (path, identifier) pairs, possibly produced lazily
            deadline: Seconds after which no further files are dispatched;
                files already dispatched run to completion

        Returns:
            Report of every failing check
        """
        tracker = WallTimeTracker(deadline)
        queue: asyncio.Queue = asyncio.Queue()
        report = Report()
        folder = asyncio.create_task(self._fold(queue, report))
        tasks: List[asyncio.Task] = []

        try:
            for path, file in documents:
                if tracker.is_expired():
                    self.logger.warning(
                        f"Deadline of {tracker.wall_time_limit:g}s reached after {len(tasks)} files; "
                        f"no further files will be checked"
                    )
                    break
                tasks.append(asyncio.create_task(self._check_file_into(queue, path, file)))
                # Let dispatched files start while discovery continues.
                await asyncio.sleep(0)

            await asyncio.gather(*tasks)
            await queue.put(None)
            await folder
        except BaseException:
            for task in tasks:
                task.cancel()
            folder.cancel()
            raise

        self.logger.info(
            f"Checked {len(tasks)} files in {tracker.elapsed():.2f}s: "
            f"{len(report)} failing lines in {len(report.files)} files"
        )
        return report

    async def check_directory(
        self,
        root: Path,
        extensions: Iterable[str],
        deadline: Optional[float] = None
    ) -> Report:
        """Discover documents under ``root`` and validate them."""
        root = Path(root)
        extensions = tuple(extensions)
        self.logger.info(f"Checking {', '.join(extensions)} files under {root}")
        # os.walk blocks; keep it off the loop so in-flight checks are not starved.
        documents = await asyncio.to_thread(list, discover_documents(root, extensions))
        return await self.check_documents(documents, deadline=deadline)

    async def _check_file_into(self, queue: asyncio.Queue, path: Path, file: str) -> None:
        for check in await self.check_file(path, file):
            await queue.put(check)

    @staticmethod
    async def _fold(queue: asyncio.Queue, report: Report) -> None:
        # Sole writer of the report.
        while True:
            check = await queue.get()
            if check is None:
                return
            report.add(check)
