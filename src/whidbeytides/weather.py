"""
National Weather Service 7-day forecast for the station coordinates.

The NWS API resolves a lat/lon to a forecast office grid first
(``/points/{lat},{lon}``), then serves the forecast from the URL it returns.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import FORECAST_PERIOD_LIMIT, SANDY_POINT, ClientConfig
from .exceptions import WeatherError
from .models import ForecastPeriod, Station
from .utils import add_sync_version

logger = logging.getLogger(__name__)


def parse_forecast_periods(forecast: Dict[str, Any], limit: int) -> List[ForecastPeriod]:
    """Parse NOAA forecast periods into ForecastPeriod objects."""
    periods = (forecast.get("properties") or {}).get("periods") or []

    parsed = []
    for period in periods[:limit]:
        parsed.append(
            ForecastPeriod(
                name=period.get("name", ""),
                temperature=period.get("temperature"),
                temperature_unit=period.get("temperatureUnit", ""),
                short_forecast=period.get("shortForecast", ""),
                wind_speed=period.get("windSpeed") or "",
                wind_direction=period.get("windDirection") or "",
                icon=period.get("icon"),
            )
        )
    return parsed


class NWSClient:
    """Client for the api.weather.gov forecast endpoints."""

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self._client = httpx.AsyncClient(
            timeout=self.config.timeout,
            headers=self.config.headers(),
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "NWSClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _get_json(self, url: str, failure: str) -> Dict[str, Any]:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"{failure}: {e}")
            raise WeatherError(failure) from e

        if not isinstance(payload, dict):
            logger.warning(f"{failure}: expected a JSON object, got {type(payload).__name__}")
            raise WeatherError(failure)
        return payload

    async def get_forecast_url(self, latitude: float, longitude: float) -> str:
        """Resolve the forecast URL for a coordinate."""
        points = await self._get_json(
            f"{self.config.weather_base_url}/points/{latitude},{longitude}",
            "points lookup failed",
        )
        properties = points.get("properties") or {}
        forecast_url = properties.get("forecast") or properties.get("forecastGridData")
        if not forecast_url:
            raise WeatherError("forecast URL missing")
        return forecast_url

    async def get_forecast_periods(
        self, latitude: float, longitude: float, limit: int = FORECAST_PERIOD_LIMIT
    ) -> List[ForecastPeriod]:
        """
        Get the first ``limit`` forecast periods (day and night) for a coordinate.

        Raises:
            WeatherError: If either lookup fails
        """
        logger.info(f"Fetching weather forecast for ({latitude}, {longitude})")
        forecast_url = await self.get_forecast_url(latitude, longitude)
        forecast = await self._get_json(forecast_url, "forecast fetch failed")
        return parse_forecast_periods(forecast, limit)


@add_sync_version
async def fetch_weather_forecast(
    station: Station = SANDY_POINT,
    limit: int = FORECAST_PERIOD_LIMIT,
    client: Optional[NWSClient] = None,
) -> List[ForecastPeriod]:
    """
    Fetch the 7-day forecast (14 day/night periods) near a station.

    Args:
        station: Station whose coordinates are used
        limit: Maximum number of periods to return
        client: Optional NWSClient instance. If not provided, a temporary
                client is created and closed afterwards.

    Returns:
        List of ForecastPeriod objects
    """
    if client is not None:
        return await client.get_forecast_periods(station.latitude, station.longitude, limit)

    async with NWSClient() as temp_client:
        return await temp_client.get_forecast_periods(
            station.latitude, station.longitude, limit
        )
