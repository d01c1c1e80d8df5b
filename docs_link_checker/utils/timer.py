import asyncio
import time
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class WallTimeTracker:
    """Tracks elapsed wall time against an optional limit."""

    def __init__(self, wall_time_limit: Optional[float]):
        """Initialize the wall time tracker.

        Args:
            wall_time_limit: Maximum allowed time in seconds, or None / a
                non-positive value for no limit
        """
        if wall_time_limit is not None and wall_time_limit <= 0:
            wall_time_limit = None
        self.wall_time_limit = wall_time_limit
        self.start_time = time.monotonic()

    def elapsed(self) -> float:
        """Get elapsed time since initialization.

        Returns:
            Elapsed time in seconds
        """
        return time.monotonic() - self.start_time

    def remaining(self) -> Optional[float]:
        """Get remaining time before limit is reached.

        Returns:
            Remaining time in seconds, or None when unlimited
        """
        if self.wall_time_limit is None:
            return None
        return max(0.0, self.wall_time_limit - self.elapsed())

    def is_expired(self) -> bool:
        """Check if the time limit has been reached.

        Returns:
            True if time limit has been reached, False otherwise
        """
        if self.wall_time_limit is None:
            return False
        return self.elapsed() >= self.wall_time_limit


async def race(awaitable: Awaitable[T], seconds: float, on_timeout: T) -> T:
    """Race an awaitable against a deadline.

    The awaitable runs as its own task. If it finishes first its result is
    returned. If the deadline fires first the task is cancelled, which aborts
    whatever network request it was suspended on, and ``on_timeout`` is
    returned instead.

    Args:
        awaitable: Coroutine or future producing the result
        seconds: Deadline in seconds
        on_timeout: Value returned when the deadline wins

    Returns:
        Either the awaitable's result or ``on_timeout``
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError:
        return on_timeout
