"""
Hourly/hilo reconciliation for the tide timeline.

Subordinate stations publish only high/low predictions, so the hourly request
is optimistic: if it fails or comes back empty the hilo series is reused as the
chart's line trace. The hilo request is mandatory and its failure propagates.
"""

import logging
from datetime import datetime
from typing import List, Optional

from .client import CoopsClient
from .config import DEFAULT_DATUM, DEFAULT_UNITS
from .exceptions import AcquisitionError
from .models import (
    HourlyOutcome,
    PredictionPoint,
    QueryOptions,
    Resolution,
    SeriesPair,
    TideLoadResult,
    TimeWindow,
)
from .utils import add_sync_version, compute_window

logger = logging.getLogger(__name__)

HOURLY_NOTICE = "Showing verified high/low times alongside hourly predictions."
HILO_ONLY_NOTICE = (
    "Station provides high/low predictions only; no hourly series available."
)


def coverage_notice(supports_hourly: bool) -> str:
    """User-facing note describing which series drive the chart."""
    return HOURLY_NOTICE if supports_hourly else HILO_ONLY_NOTICE


async def fetch_hourly(
    client: CoopsClient, window: TimeWindow, options: QueryOptions
) -> HourlyOutcome:
    """
    Try the hourly predictions request.

    Never raises for acquisition failures; an error or an empty series is
    reported as a degraded outcome.
    """
    try:
        points = await client.fetch_predictions(
            window, Resolution.HOURLY, options.datum, options.units
        )
    except AcquisitionError as e:
        logger.warning(f"Hourly predictions not available: {e}")
        return HourlyOutcome.degraded(str(e))

    outcome = HourlyOutcome.ok(points)
    if not outcome.supports_hourly:
        logger.warning(f"Hourly predictions not available: {outcome.reason}")
    return outcome


def reconcile(hourly: HourlyOutcome, markers: List[PredictionPoint]) -> SeriesPair:
    """Pick the series that drives the line trace."""
    if hourly.supports_hourly:
        return SeriesPair(primary=hourly.points, markers=markers, supports_hourly=True)
    return SeriesPair(primary=markers, markers=markers, supports_hourly=False)


async def _load(
    client: CoopsClient, window: TimeWindow, options: QueryOptions
) -> TideLoadResult:
    hourly = await fetch_hourly(client, window, options)

    # Always get high/low predictions; failure here aborts the load
    markers = await client.fetch_predictions(
        window, Resolution.HILO, options.datum, options.units
    )

    series = reconcile(hourly, markers)
    logger.info(
        f"Loaded {len(series.primary)} primary / {len(series.markers)} hilo points "
        f"(hourly={'yes' if series.supports_hourly else 'no'})"
    )
    return TideLoadResult(
        window=window,
        options=options,
        series=series,
        notice=coverage_notice(series.supports_hourly),
    )


@add_sync_version
async def load_tide_data(
    datum: str = DEFAULT_DATUM,
    units: str = DEFAULT_UNITS,
    client: Optional[CoopsClient] = None,
    now: Optional[datetime] = None,
) -> TideLoadResult:
    """
    Load and reconcile tide predictions for the 14-day window around ``now``.

    Args:
        datum: Vertical datum passed through to the service
        units: 'english' or 'metric'
        client: Optional CoopsClient instance. If not provided, a temporary
                client is created and closed afterwards.
        now: Anchor for the window; defaults to the current local time

    Returns:
        TideLoadResult with the reconciled SeriesPair and coverage notice

    Raises:
        AcquisitionError: If the high/low request fails

    Examples:
        >>> result = await load_tide_data("MLLW", "metric")
        >>> result.supports_hourly
        True
    """
    window = compute_window(now)
    options = QueryOptions(datum=datum, units=units)

    if client is not None:
        return await _load(client, window, options)

    async with CoopsClient() as temp_client:
        return await _load(temp_client, window, options)
