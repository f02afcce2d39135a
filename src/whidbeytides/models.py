"""
Data models for tide predictions and weather forecasts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class Station:
    """A NOAA CO-OPS tide station."""

    station_id: str
    name: str
    latitude: float
    longitude: float


class Resolution(Enum):
    """Prediction interval requested from the service."""

    HOURLY = "60"
    HILO = "hilo"

    @property
    def interval(self) -> str:
        return self.value


@dataclass
class PredictionPoint:
    """A single predicted water level.

    ``timestamp`` is station-local time as returned by the service
    (``YYYY-MM-DD HH:MM``, daylight saving already applied).
    """

    timestamp: str
    value: float
    type: Optional[str] = None  # 'H' or 'L' for hilo predictions

    @property
    def local_datetime(self) -> datetime:
        return datetime.strptime(self.timestamp, TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive date range for a predictions request."""

    begin: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.begin:
            raise ValueError(
                f"Window end {self.end:%Y-%m-%d} is before begin {self.begin:%Y-%m-%d}"
            )

    @property
    def begin_date(self) -> str:
        return self.begin.strftime("%Y%m%d")

    @property
    def end_date(self) -> str:
        return self.end.strftime("%Y%m%d")

    @property
    def span(self) -> timedelta:
        return self.end - self.begin

    def __contains__(self, moment: datetime) -> bool:
        return self.begin <= moment <= self.end


@dataclass(frozen=True)
class QueryOptions:
    """User-selected vertical datum and unit system."""

    datum: str = "MLLW"
    units: str = "english"


@dataclass
class SeriesPair:
    """Reconciled series for the chart and the high/low table.

    ``markers`` is always the hilo sequence. Without hourly coverage
    ``primary`` is the very same list as ``markers``.
    """

    primary: List[PredictionPoint]
    markers: List[PredictionPoint]
    supports_hourly: bool

    @property
    def primary_is_markers(self) -> bool:
        return self.primary is self.markers


@dataclass
class HourlyOutcome:
    """Result of the optional hourly predictions call."""

    points: List[PredictionPoint] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def ok(cls, points: List[PredictionPoint]) -> "HourlyOutcome":
        if not points:
            return cls.degraded("no hourly predictions returned")
        return cls(points=list(points))

    @classmethod
    def degraded(cls, reason: str) -> "HourlyOutcome":
        return cls(points=[], reason=reason)

    @property
    def supports_hourly(self) -> bool:
        return bool(self.points)


@dataclass
class TideLoadResult:
    """Everything a refresh produces for the tide section."""

    window: TimeWindow
    options: QueryOptions
    series: SeriesPair
    notice: str

    @property
    def supports_hourly(self) -> bool:
        return self.series.supports_hourly


@dataclass
class ForecastPeriod:
    """One named period (e.g. 'Tonight') of a National Weather Service forecast."""

    name: str
    temperature: Optional[float]
    temperature_unit: str
    short_forecast: str
    wind_speed: str = ""
    wind_direction: str = ""
    icon: Optional[str] = None
