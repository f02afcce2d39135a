"""
Tests for the hourly/hilo reconciliation pipeline.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from whidbeytides.client import CoopsClient
from whidbeytides.exceptions import AcquisitionError, TideConnectionError
from whidbeytides.models import HourlyOutcome, QueryOptions, Resolution
from whidbeytides.reconcile import (
    HILO_ONLY_NOTICE,
    HOURLY_NOTICE,
    coverage_notice,
    fetch_hourly,
    load_tide_data,
    reconcile,
)
from whidbeytides.utils import compute_window

from .conftest import GARBLED_BODY, HILO_PAYLOAD, fake_coops_client


class TestComputeWindow:
    """Test the 14-day window."""

    @pytest.mark.parametrize(
        "now",
        [
            datetime(2024, 6, 8, 12, 30),
            datetime(2024, 1, 1, 0, 0, 1),
            datetime(2024, 2, 29, 23, 59),
            datetime(2024, 3, 10, 2, 30),  # US spring-forward day
            datetime(2023, 12, 31, 18, 0),
        ],
    )
    def test_span_and_containment(self, now):
        window = compute_window(now)

        assert window.end - window.begin == timedelta(days=14)
        assert window.begin < now < window.end
        assert now in window

    def test_compact_dates(self):
        window = compute_window(datetime(2024, 6, 8, 9, 0))
        assert window.begin_date == "20240601"
        assert window.end_date == "20240615"

    def test_defaults_to_current_time(self):
        before = datetime.now()
        window = compute_window()
        after = datetime.now()

        assert before - timedelta(days=7) <= window.begin <= after - timedelta(days=7)
        assert window.span == timedelta(days=14)


class TestFetchHourly:
    """Test the optional hourly request."""

    @pytest.mark.asyncio
    async def test_points_returned(self, window, hourly_points):
        client = fake_coops_client(hourly_points, [])
        outcome = await fetch_hourly(client, window, QueryOptions())

        assert outcome.supports_hourly
        assert outcome.points == hourly_points
        assert outcome.reason is None

    @pytest.mark.asyncio
    async def test_empty_is_degraded(self, window):
        client = fake_coops_client([], [])
        outcome = await fetch_hourly(client, window, QueryOptions())

        assert not outcome.supports_hourly
        assert outcome.reason == "no hourly predictions returned"

    @pytest.mark.asyncio
    async def test_error_is_degraded(self, window):
        client = fake_coops_client(AcquisitionError("No Predictions data was found."), [])
        outcome = await fetch_hourly(client, window, QueryOptions())

        assert not outcome.supports_hourly
        assert outcome.reason == "No Predictions data was found."

    @pytest.mark.asyncio
    async def test_connection_error_is_degraded(self, window):
        client = fake_coops_client(TideConnectionError("Request timeout after 30.0s"), [])
        outcome = await fetch_hourly(client, window, QueryOptions())

        assert not outcome.supports_hourly


class TestReconcile:
    """Test the coverage decision."""

    def test_hourly_drives_primary(self, hourly_points, hilo_points):
        series = reconcile(HourlyOutcome.ok(hourly_points), hilo_points)

        assert series.supports_hourly
        assert series.primary == hourly_points
        assert series.markers is hilo_points
        assert not series.primary_is_markers

    def test_markers_reused_without_hourly(self, hilo_points):
        series = reconcile(HourlyOutcome.degraded("HTTP 400"), hilo_points)

        assert not series.supports_hourly
        assert series.primary is series.markers
        assert series.primary_is_markers

    def test_notice_text(self):
        assert coverage_notice(True) == HOURLY_NOTICE
        assert coverage_notice(False) == HILO_ONLY_NOTICE
        assert HOURLY_NOTICE != HILO_ONLY_NOTICE


class TestLoadTideData:
    """Test the full load operation."""

    @pytest.mark.asyncio
    async def test_hourly_and_hilo(self, now, hourly_points, hilo_points):
        client = fake_coops_client(hourly_points, hilo_points)

        result = await load_tide_data("MLLW", "english", client=client, now=now)

        assert result.supports_hourly is True
        assert len(result.series.primary) == len(hourly_points)
        assert len(result.series.markers) == len(hilo_points)
        assert result.notice == HOURLY_NOTICE
        assert result.window == compute_window(now)
        assert result.options.datum == "MLLW"
        assert result.options.units == "english"

    @pytest.mark.asyncio
    async def test_hourly_empty(self, now, hilo_points):
        client = fake_coops_client([], hilo_points)

        result = await load_tide_data("MLLW", "metric", client=client, now=now)

        assert result.supports_hourly is False
        assert result.series.primary is result.series.markers
        assert result.series.markers == hilo_points
        assert result.notice == HILO_ONLY_NOTICE

    @pytest.mark.asyncio
    async def test_hourly_failure_swallowed(self, now, hilo_points):
        client = fake_coops_client(AcquisitionError("HTTP 500"), hilo_points)

        result = await load_tide_data(client=client, now=now)

        assert result.supports_hourly is False
        assert result.series.primary == hilo_points

    @pytest.mark.asyncio
    async def test_hilo_failure_propagates(self, now, hourly_points):
        client = fake_coops_client(
            hourly_points, AcquisitionError("No data was found.")
        )

        with pytest.raises(AcquisitionError) as exc_info:
            await load_tide_data(client=client, now=now)

        assert str(exc_info.value) == "No data was found."

    @pytest.mark.asyncio
    async def test_hilo_always_requested_after_hourly(self, now, hilo_points):
        client = fake_coops_client(AcquisitionError("HTTP 500"), hilo_points)

        await load_tide_data("MSL", "metric", client=client, now=now)

        calls = client.fetch_predictions.call_args_list
        assert [c.args[1] for c in calls] == [Resolution.HOURLY, Resolution.HILO]
        for c in calls:
            assert c.args[0] == compute_window(now)
            assert c.args[2:] == ("MSL", "metric")

    @pytest.mark.asyncio
    async def test_temporary_client(self, now, hilo_points):
        mock_client = fake_coops_client([], hilo_points)

        with patch("whidbeytides.reconcile.CoopsClient") as mock_client_class:
            mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_client)
            mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)

            result = await load_tide_data(now=now)

        assert result.series.markers == hilo_points
        mock_client_class.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_undecodable_hourly_body_degrades(self, now):
        def handler(request):
            if request.url.params["interval"] == "hilo":
                return httpx.Response(200, json=HILO_PAYLOAD)
            return httpx.Response(200, content=GARBLED_BODY)

        async with CoopsClient() as client:
            await client._client.aclose()
            client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            result = await load_tide_data(client=client, now=now)

        assert result.supports_hourly is False
        assert result.notice == HILO_ONLY_NOTICE
        assert [p.type for p in result.series.markers] == ["H", "L", "H", "L"]
        assert result.series.primary_is_markers

    def test_sync_version_attached(self):
        assert callable(load_tide_data.sync)
