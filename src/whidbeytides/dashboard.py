"""
Refresh controller tying the reconciliation pipeline to a renderer.

The dashboard owns the single live chart handle and discards results from
refreshes that were superseded while in flight.
"""

import asyncio
import logging
import sys
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Protocol, TextIO, Tuple

from .client import CoopsClient
from .exceptions import AcquisitionError, WeatherError
from .models import ForecastPeriod, QueryOptions, TideLoadResult
from .presentation import (
    ChartData,
    TableRow,
    build_chart_data,
    build_table_rows,
    rows_to_dataframe,
)
from .reconcile import load_tide_data
from .weather import NWSClient, fetch_weather_forecast

logger = logging.getLogger(__name__)


class ChartHandle(Protocol):
    def destroy(self) -> None: ...


class Renderer(Protocol):
    """Surface the dashboard draws onto."""

    def create_chart(self, chart_data: ChartData) -> ChartHandle: ...

    def render_table(self, rows: List[TableRow]) -> None: ...

    def show_notice(self, text: str) -> None: ...

    def show_error(self, message: str) -> None: ...

    def render_weather(self, periods: List[ForecastPeriod]) -> None: ...

    def show_weather_error(self, message: str) -> None: ...


class ChartSlot:
    """Holds at most one chart handle, destroying the old one before a new one is built."""

    def __init__(self) -> None:
        self._handle: Optional[ChartHandle] = None

    @property
    def current(self) -> Optional[ChartHandle]:
        return self._handle

    def replace(self, factory: Callable[[], ChartHandle]) -> ChartHandle:
        self.release()
        self._handle = factory()
        return self._handle

    def release(self) -> None:
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.destroy()


class TideDashboard:
    """
    Tide and weather dashboard for the fixed station.

    Datum and unit changes only take effect on the next refresh.

    Usage:
        dashboard = TideDashboard(TextRenderer())
        dashboard.set_units("metric")
        await dashboard.refresh()
    """

    def __init__(
        self,
        renderer: Renderer,
        client: Optional[CoopsClient] = None,
        weather_client: Optional[NWSClient] = None,
        options: Optional[QueryOptions] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.renderer = renderer
        self.client = client
        self.weather_client = weather_client
        self.options = options or QueryOptions()
        self.chart_slot = ChartSlot()
        self._clock = clock
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def set_datum(self, datum: str) -> None:
        self.options = replace(self.options, datum=datum)

    def set_units(self, units: str) -> None:
        self.options = replace(self.options, units=units)

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.info(
                f"Discarding refresh #{generation}; refresh #{self._generation} is newer"
            )
            return True
        return False

    async def refresh(self) -> Optional[TideLoadResult]:
        """
        Reload tide data and render it.

        Returns:
            The rendered TideLoadResult, or None if the load failed or was
            superseded by a later refresh
        """
        self._generation += 1
        generation = self._generation
        options = self.options

        try:
            result = await load_tide_data(
                options.datum, options.units, client=self.client, now=self._clock()
            )
        except AcquisitionError as e:
            if self._is_stale(generation):
                return None
            logger.error(f"Tide data load failed: {e}")
            self.chart_slot.release()
            self.renderer.show_error(e.message)
            return None

        if self._is_stale(generation):
            return None

        self.render(result)
        return result

    def render(self, result: TideLoadResult) -> None:
        """Hand a loaded result to the chart and table mappers."""
        units = result.options.units
        chart_data = build_chart_data(result.series, units)
        rows = build_table_rows(result.series.markers, units)

        self.renderer.show_notice(result.notice)
        self.chart_slot.replace(lambda: self.renderer.create_chart(chart_data))
        self.renderer.render_table(rows)

    async def refresh_weather(self) -> List[ForecastPeriod]:
        """Reload the weather forecast; failures are shown inline, not raised."""
        try:
            periods = await fetch_weather_forecast(client=self.weather_client)
        except WeatherError as e:
            self.renderer.show_weather_error(f"Weather forecast unavailable ({e.message}).")
            return []

        self.renderer.render_weather(periods)
        return periods

    async def initial_load(self) -> Tuple[Optional[TideLoadResult], List[ForecastPeriod]]:
        """First load: tides and weather together."""
        tides, weather = await asyncio.gather(self.refresh(), self.refresh_weather())
        return tides, weather

    def close(self) -> None:
        self.chart_slot.release()


class TextChart:
    """Chart handle for terminal output."""

    def __init__(self, chart_data: ChartData):
        self.chart_data = chart_data
        self.destroyed = False

    def destroy(self) -> None:
        self.destroyed = True

    def summary(self) -> List[str]:
        lines = []
        for dataset in self.chart_data.datasets:
            values = dataset.values
            if values:
                lines.append(
                    f"{dataset.label}: {len(values)} points, "
                    f"min {min(values):.2f} / max {max(values):.2f} {self.chart_data.unit_label}"
                )
            else:
                lines.append(f"{dataset.label}: no points")
        return lines


class TextRenderer:
    """Plain-text renderer used by the command line interface."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _write(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def create_chart(self, chart_data: ChartData) -> TextChart:
        chart = TextChart(chart_data)
        for line in chart.summary():
            self._write(line)
        return chart

    def render_table(self, rows: List[TableRow]) -> None:
        if not rows:
            self._write("No high/low predictions.")
            return
        self._write(rows_to_dataframe(rows).to_string(index=False))

    def show_notice(self, text: str) -> None:
        self._write(text)

    def separator(self) -> None:
        self._write()

    def show_error(self, message: str) -> None:
        self._write(f"Error: {message}")

    def render_weather(self, periods: List[ForecastPeriod]) -> None:
        for period in periods:
            wind = f"{period.wind_speed} {period.wind_direction}".strip()
            self._write(
                f"{period.name}: {period.temperature}°{period.temperature_unit}, "
                f"{period.short_forecast}. Winds: {wind}"
            )

    def show_weather_error(self, message: str) -> None:
        self._write(message)
