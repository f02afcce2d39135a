"""
Internal utility functions for whidbeytides.
"""

from datetime import datetime, timedelta
from typing import (
    Any,
    Awaitable,
    Callable,
    Optional,
    TypeVar,
)

from .config import WINDOW_DAYS_AHEAD, WINDOW_DAYS_BACK
from .models import TimeWindow

R = TypeVar("R")


def compute_window(now: Optional[datetime] = None) -> TimeWindow:
    """
    Build the 14-day prediction window centred on ``now``.

    The window runs from 7 days before ``now`` through 7 days after it and is
    recomputed on every load.

    Example:
        >>> window = compute_window(datetime(2024, 6, 8, 12, 0))
        >>> window.begin_date, window.end_date
        ('20240601', '20240615')
    """
    if now is None:
        now = datetime.now()
    return TimeWindow(
        begin=now - timedelta(days=WINDOW_DAYS_BACK),
        end=now + timedelta(days=WINDOW_DAYS_AHEAD),
    )


def add_sync_version(
    async_fn: Callable[..., Awaitable[R]],
) -> Callable[..., Awaitable[R]]:
    """
    A decorator that adds a .sync attribute to an async function, allowing it
    to be called synchronously.

    The .sync version runs the async function in a new asyncio event loop.

    Example:
        >>> @add_sync_version
        ... async def my_async_func(x):
        ...     return x * 2

        >>> # Async usage
        >>> result = await my_async_func(5)

        >>> # Sync usage
        >>> result = my_async_func.sync(5)
    """
    # Import here to avoid circular imports
    from .sync import AsyncSyncBridge

    def sync_wrapper(*args: Any, **kwargs: Any) -> R:
        """Synchronous wrapper for the async function."""
        return AsyncSyncBridge.run_async(async_fn, args=args, kwargs=kwargs)

    async_fn.sync = sync_wrapper  # type: ignore
    return async_fn
