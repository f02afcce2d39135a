"""
Synchronous wrapper functions for whidbeytides.

This module provides synchronous versions of the async loaders for callers
that cannot use async/await syntax. Under the hood, these functions use
asyncio to run the async code to completion.

Usage:
    # Instead of this async code:
    async with CoopsClient() as client:
        result = await load_tide_data("MLLW", "metric", client=client)

    # Use this sync code:
    from whidbeytides.sync import load_tide_data_sync
    result = load_tide_data_sync("MLLW", "metric")
"""

import asyncio
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from .config import DEFAULT_DATUM, DEFAULT_UNITS
from .models import ForecastPeriod, TideLoadResult

R = TypeVar("R")


class AsyncSyncBridge:
    """Runs async functions from synchronous code."""

    @staticmethod
    def run_async(
        async_fn: Callable[..., Awaitable[R]],
        args: tuple = (),
        kwargs: Optional[dict] = None,
    ) -> R:
        """Run an async function synchronously.

        Args:
            async_fn: Async function to run
            args: Positional arguments for the function
            kwargs: Keyword arguments for the function

        Returns:
            Result of running the async function

        Raises:
            RuntimeError: If called from within an existing event loop
        """
        if kwargs is None:
            kwargs = {}

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "Cannot use sync version from within an existing asyncio event loop. "
                "Use the async version instead."
            )

        async def _call() -> R:
            return await async_fn(*args, **kwargs)

        return asyncio.run(_call())


def load_tide_data_sync(
    datum: str = DEFAULT_DATUM,
    units: str = DEFAULT_UNITS,
    now: Optional[datetime] = None,
) -> TideLoadResult:
    """Synchronous version of load_tide_data.

    Examples:
        >>> result = load_tide_data_sync("MLLW", "metric")
        >>> result.notice
        'Showing verified high/low times alongside hourly predictions.'
    """
    from .reconcile import load_tide_data

    return AsyncSyncBridge.run_async(
        load_tide_data, args=(datum, units), kwargs={"now": now}
    )


def fetch_weather_forecast_sync(**kwargs: Any) -> List[ForecastPeriod]:
    """Synchronous version of fetch_weather_forecast."""
    from .weather import fetch_weather_forecast

    return AsyncSyncBridge.run_async(fetch_weather_forecast, kwargs=kwargs)


__all__ = [
    "AsyncSyncBridge",
    "load_tide_data_sync",
    "fetch_weather_forecast_sync",
]
