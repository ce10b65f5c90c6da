"""
Mapping of aligned series onto the logical chart canvas.

All lines of one chart share a single ``PlotFrame`` so that the price, the
averages and the band edges are drawn against the same vertical scale. Points
are emitted as ``"x,y"`` strings ready for an SVG ``polyline``; missing values
are skipped, which leaves a visible gap instead of a drop to zero.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Optional

from advisor_chart.core.types import PlotFrame, PricePoint, SignalPoint
from advisor_chart.indicators.crossover import Crossover

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "build_frame",
    "format_coordinate",
    "to_points",
    "to_polyline",
    "place_signals",
]

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 760
DEFAULT_HEIGHT = 220


def format_coordinate(value: float) -> str:
    """
    Shortest text form of a coordinate.

    Whole numbers are written without a fractional part (``220`` rather than
    ``220.0``); everything else uses Python's round-trip float repr.
    """
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def build_frame(
    series: Iterable[Sequence[Optional[float]]],
    length: int,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
) -> PlotFrame:
    """
    Build the shared frame for every series drawn together.

    Args:
        series: The series that will be plotted simultaneously
        length: Number of sessions on the x axis
        width: Canvas width
        height: Canvas height

    Returns:
        PlotFrame spanning the minimum and maximum non-null value. With no
        values at all the frame is flat at zero.
    """
    minimum = math.inf
    maximum = -math.inf
    for values in series:
        for v in values:
            if v is None:
                continue
            minimum = min(minimum, v)
            maximum = max(maximum, v)

    if minimum > maximum:
        minimum = maximum = 0.0

    return PlotFrame(
        minimum=float(minimum),
        maximum=float(maximum),
        width=width,
        height=height,
        length=length,
    )


def to_points(values: Sequence[Optional[float]], frame: PlotFrame) -> list[str]:
    """
    Map one series to ``"x,y"`` strings.

    Raises:
        ValueError: If the series is not as long as the frame.
    """
    if len(values) != frame.length:
        raise ValueError(
            f"Series has {len(values)} points but the frame spans {frame.length}"
        )
    if not frame.is_plottable:
        return []

    points = []
    for i, v in enumerate(values):
        if v is None:
            continue
        x = format_coordinate(frame.map_x(i))
        y = format_coordinate(frame.map_y(v))
        points.append(f"{x},{y}")
    return points


def to_polyline(values: Sequence[Optional[float]], frame: PlotFrame) -> str:
    """Space-separated polyline points for one series."""
    return " ".join(to_points(values, frame))


def place_signals(
    crossovers: Iterable[Crossover],
    prices: Sequence[PricePoint],
    frame: PlotFrame,
) -> list[SignalPoint]:
    """Put each crossover on the price line of ``frame``."""
    if not frame.is_plottable:
        return []

    signals = []
    for crossover in crossovers:
        point = prices[crossover.index]
        signals.append(
            SignalPoint(
                x=frame.map_x(crossover.index),
                y=frame.map_y(point.close),
                type=crossover.type,
                date=point.date,
                price=point.close,
                index=crossover.index,
            )
        )
    logger.debug("Placed %d signal markers", len(signals))
    return signals
