"""
Chart and table mapping for reconciled tide series.

These functions shape a SeriesPair into plain data structures; drawing them is
left to whichever renderer is plugged into the dashboard.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .models import PredictionPoint, SeriesPair

if TYPE_CHECKING:
    import pandas as pd

logger = logging.getLogger(__name__)

LINE_COLOR = "#2a76d2"
LINE_FILL = "rgba(42,118,210,0.15)"
MARKER_BORDER = "#d27a2a"

MARKER_COLORS = {
    "H": "rgba(25,150,25,0.9)",
    "L": "rgba(200,60,60,0.9)",
}
UNKNOWN_MARKER_COLOR = "rgba(128,128,128,0.9)"

TYPE_LABELS = {"H": "High", "L": "Low"}

TABLE_COLUMNS = ["Date", "Time", "Type", "Height"]


def unit_label(units: str) -> str:
    """'m' for metric, 'ft' for anything else."""
    return "m" if units == "metric" else "ft"


def format_height(value: float, units: str) -> str:
    """
    Format a height with two decimals and its unit label.

    Example:
        >>> format_height(3.14159, "metric")
        '3.14 m'
    """
    return f"{value:.2f} {unit_label(units)}"


def type_label(tag: Optional[str]) -> str:
    """Table label for a hilo tag. Only 'H' and 'L' are translated."""
    if tag is None:
        return ""
    return TYPE_LABELS.get(tag, tag)


def marker_color(tag: Optional[str]) -> str:
    return MARKER_COLORS.get(tag or "", UNKNOWN_MARKER_COLOR)


@dataclass
class ChartPoint:
    """An (x, y) pair on the tide chart."""

    x: datetime
    y: float
    type: Optional[str] = None
    color: Optional[str] = None


@dataclass
class ChartDataset:
    """One trace of the tide chart."""

    label: str
    kind: str  # 'line' or 'scatter'
    points: List[ChartPoint]
    border_color: str
    background_color: str
    fill: bool = False
    tension: float = 0.0
    point_radius: int = 0
    show_line: bool = True

    @property
    def values(self) -> List[float]:
        return [p.y for p in self.points]


@dataclass
class ChartData:
    """Everything a chart renderer needs for the tide timeline."""

    labels: List[datetime]
    datasets: List[ChartDataset]
    unit_label: str
    y_axis_title: str
    x_axis_unit: str = "day"
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def line(self) -> ChartDataset:
        return self.datasets[0]

    @property
    def markers(self) -> ChartDataset:
        return self.datasets[1]

    def tooltip(self, point: ChartPoint) -> str:
        return f"{point.y:.2f} {self.unit_label}"


def build_chart_data(series: SeriesPair, units: str) -> ChartData:
    """
    Map a SeriesPair onto a line trace plus a high/low scatter overlay.

    The line uses hourly points when available, otherwise the hilo points so
    the level changes are still visible. Marker points carry their H/L tag and
    a per-tag colour.
    """
    label_unit = unit_label(units)

    line_points = [
        ChartPoint(x=p.local_datetime, y=p.value) for p in series.primary
    ]
    marker_points = [
        ChartPoint(x=p.local_datetime, y=p.value, type=p.type, color=marker_color(p.type))
        for p in series.markers
    ]

    if series.supports_hourly:
        line_label = f"Hourly predictions ({label_unit})"
    else:
        line_label = f"High/Low points ({label_unit})"

    line = ChartDataset(
        label=line_label,
        kind="line",
        points=line_points,
        border_color=LINE_COLOR,
        background_color=LINE_FILL,
        fill=True,
        tension=0.3,
        point_radius=0,
    )
    markers = ChartDataset(
        label="High / Low markers",
        kind="scatter",
        points=marker_points,
        border_color=MARKER_BORDER,
        background_color=UNKNOWN_MARKER_COLOR,
        point_radius=3,
        show_line=False,
    )

    logger.debug(
        f"Chart data: {len(line_points)} line points, {len(marker_points)} markers"
    )
    return ChartData(
        labels=[p.x for p in line_points],
        datasets=[line, markers],
        unit_label=label_unit,
        y_axis_title=f"Height ({label_unit})",
        options={"legend_position": "top", "begin_at_zero": False},
    )


@dataclass
class TableRow:
    """One row of the high/low table."""

    date: str
    time: str
    type: str
    height: str

    def as_list(self) -> List[str]:
        return [self.date, self.time, self.type, self.height]


def build_table_rows(markers: List[PredictionPoint], units: str) -> List[TableRow]:
    """High/low table rows in the order the service returned them."""
    rows = []
    for point in markers:
        moment = point.local_datetime
        rows.append(
            TableRow(
                date=moment.strftime("%Y-%m-%d"),
                time=moment.strftime("%H:%M"),
                type=type_label(point.type),
                height=format_height(point.value, units),
            )
        )
    return rows


def rows_to_dataframe(rows: List[TableRow]) -> "pd.DataFrame":
    """High/low table as a pandas DataFrame."""
    import pandas as pd

    return pd.DataFrame([row.as_list() for row in rows], columns=TABLE_COLUMNS)


def points_to_dataframe(points: List[PredictionPoint]) -> "pd.DataFrame":
    """Prediction points as a DataFrame indexed by local time."""
    import pandas as pd

    df = pd.DataFrame(
        {
            "time": pd.to_datetime([p.timestamp for p in points]),
            "value": pd.to_numeric([p.value for p in points]),
            "type": [p.type for p in points],
        }
    )
    return df.set_index("time")
