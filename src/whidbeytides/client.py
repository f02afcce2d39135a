"""
NOAA CO-OPS predictions client for whidbeytides.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .config import SANDY_POINT, TIME_ZONE, ClientConfig
from .exceptions import AcquisitionError, TideConnectionError, ValidationError
from .models import TIMESTAMP_FORMAT, PredictionPoint, Resolution, TimeWindow

logger = logging.getLogger(__name__)


def parse_predictions(payload: Any) -> List[PredictionPoint]:
    """
    Convert a datagetter JSON body into prediction points.

    Raises:
        ValidationError: If the body has no ``predictions`` array.
    """
    if not isinstance(payload, dict):
        raise ValidationError(
            f"Expected JSON object, got {type(payload).__name__}"
        )

    rows = payload.get("predictions")
    if not isinstance(rows, list):
        raise ValidationError(
            f"Missing 'predictions' array. Available keys: {list(payload.keys())}"
        )

    points = []
    for row in rows:
        try:
            timestamp = row["t"]
            if not timestamp:
                continue
            datetime.strptime(timestamp, TIMESTAMP_FORMAT)
            points.append(
                PredictionPoint(
                    timestamp=timestamp,
                    value=float(row["v"]),
                    type=row.get("type") or None,
                )
            )
        except (KeyError, ValueError, TypeError, AttributeError):
            # Skip invalid prediction rows but don't fail completely
            logger.debug(f"Skipping malformed prediction row: {row!r}")
            continue

    return points


class CoopsClient:
    """
    Client for tide predictions from the NOAA CO-OPS Data API.

    Documentation: https://api.tidesandcurrents.noaa.gov/api/prod/

    Usage:
        async with CoopsClient() as client:
            points = await client.fetch_predictions(window, Resolution.HILO, "MLLW", "english")
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.station = SANDY_POINT
        self._client = httpx.AsyncClient(
            timeout=self.config.timeout,
            headers=self.config.headers(),
        )

    @property
    def timeout(self) -> float:
        return self.config.timeout

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "CoopsClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def build_request_params(
        self,
        window: TimeWindow,
        resolution: Optional[Resolution],
        datum: str,
        units: str,
    ) -> Dict[str, str]:
        """
        Build the datagetter query parameters for a predictions request.

        Args:
            window: Date range to request
            resolution: Resolution.HOURLY, Resolution.HILO, or None to let the
                        service pick its default interval
            datum: Vertical datum (e.g. 'MLLW'), passed through unchanged
            units: 'english' or 'metric', passed through unchanged

        Returns:
            Ordered parameter dictionary
        """
        params = {
            "product": "predictions",
            "application": self.config.application,
            "begin_date": window.begin_date,
            "end_date": window.end_date,
            "datum": datum,
            "station": self.station.station_id,
            "time_zone": TIME_ZONE,
            "units": units,
            "format": "json",
        }
        if resolution is not None:
            params["interval"] = resolution.interval
        return params

    def build_request_url(
        self,
        window: TimeWindow,
        resolution: Optional[Resolution],
        datum: str,
        units: str,
    ) -> str:
        """Full request URL, useful for logging and debugging."""
        params = self.build_request_params(window, resolution, datum, units)
        return str(httpx.URL(self.config.base_url, params=params))

    async def _make_request(self, params: Dict[str, str]) -> Any:
        """Make a request to the datagetter endpoint with error handling."""
        try:
            response = await self._client.get(self.config.base_url, params=params)
            response.raise_for_status()
            payload = response.json()

        except httpx.TimeoutException as e:
            raise TideConnectionError(
                f"Request timeout after {self.timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = self._error_message(e.response) or f"HTTP {status}"
            raise AcquisitionError(message, status_code=status) from e
        except httpx.RequestError as e:
            raise TideConnectionError(f"Network error: {e}") from e
        except ValueError as e:
            # JSONDecodeError, or UnicodeDecodeError for non-UTF-8 bodies
            raise AcquisitionError(f"Invalid JSON response: {e}") from e

        if isinstance(payload, dict) and payload.get("error"):
            error = payload["error"]
            if isinstance(error, dict):
                message = error.get("message") or "API error"
            else:
                message = str(error)
            raise AcquisitionError(message)

        return payload

    @staticmethod
    def _error_message(response: Any) -> Optional[str]:
        """Pull ``error.message`` out of an error response body, if there is one."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return body["error"].get("message")
        return None

    async def fetch_predictions(
        self,
        window: TimeWindow,
        resolution: Optional[Resolution],
        datum: str,
        units: str,
    ) -> List[PredictionPoint]:
        """
        Fetch tide predictions for the station.

        Args:
            window: Date range to request
            resolution: Resolution.HOURLY for one value per hour,
                        Resolution.HILO for high/low turning points only
            datum: Vertical datum
            units: Unit system

        Returns:
            List of PredictionPoint objects (possibly empty)

        Raises:
            AcquisitionError: On non-success status or an error payload
        """
        params = self.build_request_params(window, resolution, datum, units)
        interval = params.get("interval", "default")
        logger.info(
            f"Fetching {interval} predictions for station {self.station.station_id} "
            f"({window.begin_date}-{window.end_date}, {datum}, {units})"
        )

        payload = await self._make_request(params)

        try:
            points = parse_predictions(payload)
        except ValidationError as e:
            logger.warning(f"Treating response as empty: {e}")
            points = []

        logger.debug(f"Parsed {len(points)} {interval} predictions")
        return points
