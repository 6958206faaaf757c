"""
fxpanel/chart.py – Line chart renderer.

render() is a pure function from a rate series and a canvas size to a list of
immutable draw commands. It keeps no state between calls: every render starts
with a Clear of the whole canvas, so re-rendering with new data is a full
redraw. Any 2-D backend (Cairo, SVG, a test) can replay the commands in order.

Layout
------
    +-----------------------------------------------+
    |            2026-02-07 to 2026-02-16           |  title
    | 1.0220 ---------------------------------------|
    |        |       *                              |  6 horizontal grid lines,
    |        |  *         *                         |  labelled with the rate
    |        | *        *   *  *    *---*           |
    | 0.9980 +-----------------------------------   |
    |        |  |  |  |  |  |  |  |  |  |           |  one tick per point
    |       07/02  09/02  11/02  13/02  16/02       |  thinned, rotated labels
    +-----------------------------------------------+

Only points with a rate are plotted. They are spaced evenly by their position
in the filtered list, not by calendar distance.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Union

import polars as pl

Color = tuple[float, float, float, float]

BACKGROUND: Color = (0.1, 0.1, 0.1, 0.9)
AXIS: Color = (0.5, 0.5, 0.5, 1.0)
GRID_HORIZONTAL: Color = (0.3, 0.3, 0.3, 0.5)
GRID_VERTICAL: Color = (0.3, 0.3, 0.3, 0.3)
LINE: Color = (0.5, 0.8, 1.0, 1.0)
MARKER: Color = (0.3, 0.6, 1.0, 1.0)
LABEL: Color = (0.8, 0.8, 0.8, 1.0)
TITLE: Color = (0.9, 0.9, 0.9, 1.0)


class Padding(NamedTuple):
    top: float
    right: float
    bottom: float
    left: float


PADDING = Padding(top=20, right=20, bottom=60, left=70)

Y_STEPS = 5
RATE_PADDING = 0.1  # fraction of the rate range added above and below
LABEL_WIDTH = 35  # approximate pixels one rotated date label needs
LABEL_ANGLE = math.pi / 6
MARKER_RADIUS = 3
TICK_LENGTH = 5

AXIS_WIDTH = 1.0
GRID_WIDTH = 0.5
LINE_WIDTH = 2.0
LABEL_FONT_SIZE = 10
TITLE_FONT_SIZE = 12


# ---------------------------------------------------------------------------
# Draw commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Clear:
    width: float
    height: float
    color: Color


@dataclass(frozen=True, slots=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    width: float


@dataclass(frozen=True, slots=True)
class Polyline:
    points: tuple[tuple[float, float], ...]
    color: Color
    width: float


@dataclass(frozen=True, slots=True)
class Arc:
    """Filled arc from ``start`` to ``end`` radians; a full circle by default."""

    x: float
    y: float
    radius: float
    color: Color
    start: float = 0.0
    end: float = 2 * math.pi


@dataclass(frozen=True, slots=True)
class Text:
    x: float
    y: float
    text: str
    color: Color
    size: float
    angle: float = 0.0
    align: str = "left"  # "center" centres the text horizontally on x


DrawCommand = Union[Clear, Line, Polyline, Arc, Text]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ChartGeometry:
    """Pixel mapping for one render call. Never stored between renders."""

    width: float
    height: float
    padding: Padding
    count: int
    min_rate: float
    max_rate: float
    rate_padding: float

    @classmethod
    def fit(
        cls,
        min_rate: float,
        max_rate: float,
        count: int,
        width: float,
        height: float,
        padding: Padding = PADDING,
    ) -> "ChartGeometry":
        rate_range = max_rate - min_rate
        if rate_range > 0:
            rate_padding = rate_range * RATE_PADDING
        else:
            # flat series: centre the line instead of dividing by zero
            rate_padding = abs(max_rate) * RATE_PADDING or 1.0
        return cls(width, height, padding, count, min_rate, max_rate, rate_padding)

    @property
    def plot_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def plot_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    @property
    def low(self) -> float:
        return self.min_rate - self.rate_padding

    @property
    def high(self) -> float:
        return self.max_rate + self.rate_padding

    @property
    def baseline(self) -> float:
        return self.height - self.padding.bottom

    def x(self, index: int) -> float:
        return self.padding.left + index * self.plot_width / (self.count - 1)

    def y(self, rate: float) -> float:
        return self.padding.top + (self.high - rate) * self.plot_height / (self.high - self.low)

    def grid_value(self, step: int) -> float:
        return self.high - step * (self.high - self.low) / Y_STEPS

    def grid_y(self, step: int) -> float:
        return self.padding.top + step * self.plot_height / Y_STEPS


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def label_indices(count: int, plot_width: float, label_width: float = LABEL_WIDTH) -> list[int]:
    """
    Indices of the points that get a date label.

    Every point is labelled when there is room. Otherwise the first and last
    point always are, and the remaining label slots are spread at even index
    steps in between. The result is ascending with no duplicates.
    """
    available = math.floor(plot_width / label_width)
    if available >= count:
        return list(range(count))

    indices = {0, count - 1}
    if available > 1:
        step = (count - 1) / (available - 1)
        indices.update(_round_half_up(i * step) for i in range(1, available - 1))
    return sorted(indices)


def short_date(day: str) -> str:
    """'2026-02-17' -> '17/02'"""
    _, month, dom = day.split("-")
    return f"{dom}/{month}"


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------

def render(series: pl.DataFrame, width: float, height: float) -> list[DrawCommand]:
    """
    Draw ``series`` (columns ``date``, ``rate``) on a ``width`` x ``height`` canvas.

    With fewer than two rated points only the cleared background is drawn.
    """
    commands: list[DrawCommand] = [Clear(width, height, BACKGROUND)]

    valid = series.drop_nulls("rate")
    if valid.height < 2:
        return commands

    rates: list[float] = valid["rate"].to_list()
    dates: list[str] = valid["date"].to_list()
    geo = ChartGeometry.fit(min(rates), max(rates), len(rates), width, height)

    commands.extend(_axes(geo))
    commands.extend(_horizontal_grid(geo))
    commands.extend(
        Line(geo.x(i), geo.padding.top, geo.x(i), geo.baseline, GRID_VERTICAL, GRID_WIDTH)
        for i in range(geo.count)
    )

    points = tuple((geo.x(i), geo.y(rate)) for i, rate in enumerate(rates))
    commands.append(Polyline(points, LINE, LINE_WIDTH))
    commands.extend(Arc(x, y, MARKER_RADIUS, MARKER) for x, y in points)

    commands.extend(_date_labels(geo, dates))

    commands.append(
        Text(width / 2, geo.padding.top - 5, f"{dates[0]} to {dates[-1]}",
             TITLE, TITLE_FONT_SIZE, align="center")
    )
    return commands


def _axes(geo: ChartGeometry) -> list[DrawCommand]:
    left = geo.padding.left
    return [
        Line(left, geo.padding.top, left, geo.baseline, AXIS, AXIS_WIDTH),
        Line(left, geo.baseline, geo.width - geo.padding.right, geo.baseline, AXIS, AXIS_WIDTH),
    ]


def _horizontal_grid(geo: ChartGeometry) -> list[DrawCommand]:
    commands: list[DrawCommand] = []
    for step in range(Y_STEPS + 1):
        y = geo.grid_y(step)
        commands.append(
            Line(geo.padding.left, y, geo.width - geo.padding.right, y, GRID_HORIZONTAL, GRID_WIDTH)
        )
        commands.append(Text(5, y + 4, f"{geo.grid_value(step):.4f}", LABEL, LABEL_FONT_SIZE))
    return commands


def _date_labels(geo: ChartGeometry, dates: list[str]) -> list[DrawCommand]:
    labelled = set(label_indices(geo.count, geo.plot_width))
    commands: list[DrawCommand] = []
    for i, day in enumerate(dates):
        x = geo.x(i)
        commands.append(Line(x, geo.baseline, x, geo.baseline + TICK_LENGTH, LABEL, AXIS_WIDTH))
        if i in labelled:
            commands.append(
                Text(x, geo.baseline + 10, short_date(day), LABEL, LABEL_FONT_SIZE, angle=LABEL_ANGLE)
            )
    return commands
