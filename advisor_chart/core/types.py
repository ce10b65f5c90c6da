"""
Type definitions and data classes shared by the overlay engine.

The list-based ``Series`` alias is the public representation of a windowed
statistic: it is aligned index-for-index with the price points and uses
``None`` where the window is not yet filled.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

__all__ = [
    "Series",
    "SignalType",
    "PricePoint",
    "BollingerBand",
    "SignalPoint",
    "PlotFrame",
    "ChartOverlay",
]

Series = list[Optional[float]]


class SignalType(str, Enum):
    """Direction of a moving-average crossover."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class PricePoint:
    """One closing price for one trading session."""

    date: str
    close: float

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "close": self.close}


@dataclass(frozen=True)
class BollingerBand:
    """Upper and lower envelope around a moving average."""

    upper: Series
    lower: Series
    middle: Series = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.upper)


@dataclass(frozen=True)
class SignalPoint:
    """
    A detected crossover placed on the price line.

    Attributes:
        x: Canvas x coordinate of the crossover session
        y: Canvas y coordinate of the closing price of that session
        type: BUY when the fast average crossed above the slow one, SELL otherwise
        date: Trading date of the session
        price: Closing price of the session
        index: Position of the session in the price sequence
    """

    x: float
    y: float
    type: SignalType
    date: str
    price: float
    index: int = -1

    @property
    def label(self) -> str:
        """Tooltip text shown next to the marker."""
        return f"{self.type.value} | {self.date} | ${self.price:.2f}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "type": self.type.value,
            "date": self.date,
            "price": self.price,
        }


@dataclass(frozen=True)
class PlotFrame:
    """
    Affine frame mapping (index, value) pairs onto the logical canvas.

    ``minimum`` and ``maximum`` span every value drawn together so that all
    lines share one vertical scale. ``length`` is the number of sessions.
    """

    minimum: float
    maximum: float
    width: float
    height: float
    length: int

    @property
    def is_flat(self) -> bool:
        return self.maximum == self.minimum

    @property
    def is_plottable(self) -> bool:
        return self.length > 1

    def map_x(self, index: int) -> float:
        return (index / (self.length - 1)) * self.width

    def map_y(self, value: float) -> float:
        # a flat range has no vertical extent, draw it through the middle
        if self.is_flat:
            return self.height / 2
        return self.height - ((value - self.minimum) / (self.maximum - self.minimum)) * self.height


@dataclass(frozen=True)
class ChartOverlay:
    """
    Everything the rendering layer needs to draw one advisor chart.

    The five polyline strings are ``"x,y"`` pairs separated by single spaces;
    an empty string means the line is hidden or has nothing to plot.
    """

    price: str = ""
    fast: str = ""
    slow: str = ""
    bb_upper: str = ""
    bb_lower: str = ""
    signals: list[SignalPoint] = field(default_factory=list)
    frame: Optional[PlotFrame] = None
    params: Optional[Any] = None

    @property
    def polylines(self) -> dict[str, str]:
        return {
            "price": self.price,
            "fast": self.fast,
            "slow": self.slow,
            "bbUpper": self.bb_upper,
            "bbLower": self.bb_lower,
        }

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = dict(self.polylines)
        result["signals"] = [signal.to_dict() for signal in self.signals]
        return result
