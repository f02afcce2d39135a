"""
Tide predictions and weather forecast for Sandy Point, South Whidbey Island.

Fetches NOAA CO-OPS tide predictions (hourly when the station publishes them,
high/low turning points always) and the National Weather Service 7-day
forecast, and shapes them into chart and table data.
"""

try:
    from importlib import metadata

    __version__ = metadata.version(__name__)
except Exception:
    __version__ = "unknown"

from .client import CoopsClient, parse_predictions
from .config import (
    DEFAULT_DATUM,
    DEFAULT_UNITS,
    SANDY_POINT,
    TIME_ZONE,
    ClientConfig,
)
from .dashboard import ChartSlot, TextRenderer, TideDashboard
from .exceptions import (
    AcquisitionError,
    TideConnectionError,
    TideDataError,
    ValidationError,
    WeatherError,
)
from .models import (
    ForecastPeriod,
    HourlyOutcome,
    PredictionPoint,
    QueryOptions,
    Resolution,
    SeriesPair,
    Station,
    TideLoadResult,
    TimeWindow,
)
from .presentation import (
    ChartData,
    ChartDataset,
    ChartPoint,
    TableRow,
    build_chart_data,
    build_table_rows,
    format_height,
    points_to_dataframe,
    rows_to_dataframe,
    type_label,
    unit_label,
)
from .reconcile import coverage_notice, fetch_hourly, load_tide_data, reconcile
from .utils import compute_window
from .weather import NWSClient, fetch_weather_forecast

__all__ = [
    "__version__",
    "CoopsClient",
    "parse_predictions",
    "ClientConfig",
    "DEFAULT_DATUM",
    "DEFAULT_UNITS",
    "SANDY_POINT",
    "TIME_ZONE",
    "ChartSlot",
    "TextRenderer",
    "TideDashboard",
    "AcquisitionError",
    "TideConnectionError",
    "TideDataError",
    "ValidationError",
    "WeatherError",
    "ForecastPeriod",
    "HourlyOutcome",
    "PredictionPoint",
    "QueryOptions",
    "Resolution",
    "SeriesPair",
    "Station",
    "TideLoadResult",
    "TimeWindow",
    "ChartData",
    "ChartDataset",
    "ChartPoint",
    "TableRow",
    "build_chart_data",
    "build_table_rows",
    "format_height",
    "points_to_dataframe",
    "rows_to_dataframe",
    "type_label",
    "unit_label",
    "coverage_notice",
    "fetch_hourly",
    "load_tide_data",
    "reconcile",
    "compute_window",
    "NWSClient",
    "fetch_weather_forecast",
]
