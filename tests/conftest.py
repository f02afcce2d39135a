"""
Shared fixtures for whidbeytides tests.
"""

from datetime import datetime
from typing import List
from unittest.mock import AsyncMock, Mock

import pytest

from whidbeytides.client import CoopsClient
from whidbeytides.models import PredictionPoint, Resolution, TimeWindow
from whidbeytides.utils import compute_window

HILO_PAYLOAD = {
    "predictions": [
        {"t": "2024-06-01 03:12", "v": "9.874", "type": "H"},
        {"t": "2024-06-01 09:47", "v": "-1.208", "type": "L"},
        {"t": "2024-06-01 16:05", "v": "8.431", "type": "H"},
        {"t": "2024-06-01 21:30", "v": "4.902", "type": "L"},
    ]
}

HOURLY_PAYLOAD = {
    "predictions": [
        {"t": "2024-06-01 00:00", "v": "6.102"},
        {"t": "2024-06-01 01:00", "v": "7.815"},
        {"t": "2024-06-01 02:00", "v": "9.230"},
    ]
}


# JSON-shaped but not valid UTF-8
GARBLED_BODY = b'{"predictions": [\xff\xfe]}'


def make_response(payload):
    """Mock httpx response returning ``payload`` from .json()."""
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


def make_points(payload) -> List[PredictionPoint]:
    return [
        PredictionPoint(timestamp=row["t"], value=float(row["v"]), type=row.get("type"))
        for row in payload["predictions"]
    ]


def fake_coops_client(hourly, hilo):
    """
    Mock CoopsClient whose fetch_predictions answers per resolution.

    ``hourly`` / ``hilo`` are either lists of points or exceptions to raise.
    """
    client = AsyncMock(spec=CoopsClient)

    async def fetch(window, resolution, datum, units):
        result = hourly if resolution is Resolution.HOURLY else hilo
        if isinstance(result, Exception):
            raise result
        return result

    client.fetch_predictions.side_effect = fetch
    return client


@pytest.fixture
def client():
    """Create a test client with a mocked transport."""
    client = CoopsClient()
    client._client = AsyncMock()
    return client


@pytest.fixture
def now():
    return datetime(2024, 6, 8, 12, 30)


@pytest.fixture
def window(now) -> TimeWindow:
    return compute_window(now)


@pytest.fixture
def hilo_points() -> List[PredictionPoint]:
    return make_points(HILO_PAYLOAD)


@pytest.fixture
def hourly_points() -> List[PredictionPoint]:
    return make_points(HOURLY_PAYLOAD)


class RecordingRenderer:
    """Renderer that records what the dashboard asked it to draw."""

    def __init__(self):
        self.charts = []
        self.tables = []
        self.notices = []
        self.errors = []
        self.weather = []
        self.weather_errors = []

    def create_chart(self, chart_data):
        handle = Mock()
        handle.chart_data = chart_data
        self.charts.append(handle)
        return handle

    def render_table(self, rows):
        self.tables.append(rows)

    def show_notice(self, text):
        self.notices.append(text)

    def show_error(self, message):
        self.errors.append(message)

    def render_weather(self, periods):
        self.weather.append(periods)

    def show_weather_error(self, message):
        self.weather_errors.append(message)


@pytest.fixture
def renderer():
    return RecordingRenderer()
