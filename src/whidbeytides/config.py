"""
Configuration for the predictions and weather clients.

The station is fixed; datum and units are chosen per request.
"""

from dataclasses import dataclass
from typing import Tuple

from .models import QueryOptions, Station

SANDY_POINT = Station(
    station_id="9447856",
    name="Sandy Point, Saratoga Passage",
    latitude=48.035,  # 48° 2.1' N
    longitude=-122.377,  # 122° 22.6' W
)

# Local standard/daylight time at the station
TIME_ZONE = "lst_ldt"

DEFAULT_OPTIONS = QueryOptions()
DEFAULT_DATUM = DEFAULT_OPTIONS.datum
DEFAULT_UNITS = DEFAULT_OPTIONS.units

DATUM_CHOICES: Tuple[str, ...] = ("MLLW", "MHHW", "MHW", "MSL", "MTL", "MLW", "NAVD", "STND")
UNIT_CHOICES: Tuple[str, ...] = ("english", "metric")

WINDOW_DAYS_BACK = 7
WINDOW_DAYS_AHEAD = 7

# 7 days, day + night
FORECAST_PERIOD_LIMIT = 14


@dataclass
class ClientConfig:
    """Settings shared by the HTTP clients."""

    base_url: str = "https://api.tidesandcurrents.noaa.gov/api/prod/datagetter"
    weather_base_url: str = "https://api.weather.gov"
    application: str = "whidbeytides"
    timeout: float = 30.0
    user_agent: str = "whidbeytides/0.1.0"

    def headers(self) -> dict:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
