"""
Overlay engine for the advisor chart.

The engine takes the closing-price history of one analysis request, computes
the fast and slow moving averages, the Bollinger band and the crossover
signals, and maps every visible line onto one shared canvas frame. Each call
is a full, independent recomputation; nothing is cached here (see
``advisor_chart.core.session`` for that).
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import pandas as pd

from advisor_chart.core.datafeed import to_frame
from advisor_chart.core.registry import RegistrationError, create
from advisor_chart.core.types import ChartOverlay, PricePoint
from advisor_chart.indicators import bollinger_bands, detect_crossovers, moving_average
from advisor_chart.visual.coordinates import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    build_frame,
    place_signals,
    to_polyline,
)

__all__ = [
    "EngineError",
    "IndicatorSpec",
    "OverlayEngine",
    "OverlayParams",
    "OverlayVisibility",
    "resolve_multiplier",
    "resolve_period",
]

logger = logging.getLogger(__name__)

DEFAULT_FAST = 20
DEFAULT_SLOW = 50
DEFAULT_BOLLINGER = 20
DEFAULT_MULTIPLIER = 2.0

# smallest windows that still draw a meaningful line
MIN_FAST = 2
MIN_SLOW = 3
MIN_BOLLINGER = 5


class EngineError(Exception):
    """Raised when there are issues with engine operations."""

    pass


def resolve_period(raw: Any, default: int, minimum: int) -> int:
    """
    Turn a user-entered window length into a usable one.

    Missing, non-numeric, non-finite and zero values fall back to ``default``;
    fractional values are truncated; the result is never below ``minimum``.

    Example:
        >>> resolve_period("abc", 20, 2)
        20
        >>> resolve_period("1", 20, 2)
        2
    """
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value == 0:
        value = default

    period = int(value)
    if period < minimum:
        logger.warning("Window %r is below the minimum of %d, using %d", raw, minimum, minimum)
        return minimum
    return period


def resolve_multiplier(raw: Any, default: float = DEFAULT_MULTIPLIER) -> float:
    """
    Turn a band multiplier into a usable one.

    Non-numeric and non-finite values fall back to ``default``. Negative values
    would swap the upper and lower band, so they are clamped to zero.
    """
    try:
        k = float(raw)
    except (TypeError, ValueError):
        k = default
    if not math.isfinite(k):
        k = default
    if k < 0:
        logger.warning("Band multiplier %r is negative, using 0", raw)
        return 0.0
    return k


@dataclass(frozen=True)
class IndicatorSpec:
    """
    An extra registered indicator to add to the indicator table.

    ``params`` is kept as sorted key/value pairs so specs compare by value.
    """

    type: str
    params: tuple = ()

    @property
    def kwargs(self) -> dict[str, Any]:
        return dict(self.params)

    @classmethod
    def from_config(cls, entry: dict[str, Any]) -> "IndicatorSpec":
        params = {key: value for key, value in entry.items() if key != "type"}
        return cls(type=entry["type"], params=tuple(sorted(params.items())))


@dataclass(frozen=True)
class OverlayVisibility:
    """Which overlays are drawn on the chart."""

    price: bool = True
    fast: bool = True
    slow: bool = True
    bollinger: bool = True
    signals: bool = True

    @property
    def any_line(self) -> bool:
        return self.price or self.fast or self.slow or self.bollinger


@dataclass(frozen=True)
class OverlayParams:
    """
    Parameters of one overlay computation.

    Attributes:
        fast: Window of the fast moving average
        slow: Window of the slow moving average
        bollinger: Window of the Bollinger band
        k: Band width in standard deviations
        width: Logical canvas width
        height: Logical canvas height
        visible: Overlay visibility flags
        indicators: Extra registered indicators for ``compute_frame``
    """

    fast: Any = DEFAULT_FAST
    slow: Any = DEFAULT_SLOW
    bollinger: Any = DEFAULT_BOLLINGER
    k: float = DEFAULT_MULTIPLIER
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    visible: OverlayVisibility = field(default_factory=OverlayVisibility)
    indicators: tuple[IndicatorSpec, ...] = ()

    def resolved(self) -> "OverlayParams":
        """Copy with every window clamped to a usable integer and k to a non-negative float."""
        return replace(
            self,
            fast=resolve_period(self.fast, DEFAULT_FAST, MIN_FAST),
            slow=resolve_period(self.slow, DEFAULT_SLOW, MIN_SLOW),
            bollinger=resolve_period(self.bollinger, DEFAULT_BOLLINGER, MIN_BOLLINGER),
            k=resolve_multiplier(self.k),
        )

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> "OverlayParams":
        """Build parameters from a validated overlay configuration."""
        canvas = cfg.get("canvas") or {}
        windows = cfg.get("windows") or {}
        visible = cfg.get("visible") or {}
        return cls(
            fast=windows.get("fast", DEFAULT_FAST),
            slow=windows.get("slow", DEFAULT_SLOW),
            bollinger=windows.get("bollinger", DEFAULT_BOLLINGER),
            k=cfg.get("band_multiplier", DEFAULT_MULTIPLIER),
            width=canvas.get("width", DEFAULT_WIDTH),
            height=canvas.get("height", DEFAULT_HEIGHT),
            visible=OverlayVisibility(**visible),
            indicators=tuple(IndicatorSpec.from_config(e) for e in cfg.get("indicators") or []),
        )


class OverlayEngine:
    """
    Computes the advisor chart overlays for a price history.

    Example:
        >>> engine = OverlayEngine(OverlayParams(fast=2, slow=4))
        >>> overlay = engine.run(points)
        >>> overlay.signals[0].type
        <SignalType.SELL: 'SELL'>
    """

    def __init__(self, params: Optional[OverlayParams] = None):
        self.params = params or OverlayParams()

    def run(self, points: Sequence[PricePoint]) -> ChartOverlay:
        """
        Compute polylines and signal markers for ``points``.

        Args:
            points: Price history in chronological order

        Returns:
            ChartOverlay with one polyline string per line (empty when hidden
            or not plottable) and the visible crossover signals.

        Raises:
            EngineError: If the computation fails
        """
        try:
            return self._run(points)
        except EngineError:
            raise
        except Exception as e:
            raise EngineError(f"Overlay computation failed: {e}") from e

    def _run(self, points: Sequence[PricePoint]) -> ChartOverlay:
        params = self.params.resolved()
        visible = params.visible
        closes = [p.close for p in points]
        n = len(closes)

        fast = moving_average(closes, params.fast)
        slow = moving_average(closes, params.slow)
        band = bollinger_bands(closes, params.bollinger, params.k)

        plotted = []
        if visible.price or visible.signals or not visible.any_line:
            plotted.append(closes)
        if visible.fast:
            plotted.append(fast)
        if visible.slow:
            plotted.append(slow)
        if visible.bollinger:
            plotted.extend([band.upper, band.lower])

        frame = build_frame(plotted, n, params.width, params.height)
        logger.debug(
            "Recomputed overlay: %d points, fast=%d slow=%d bollinger=%d k=%s",
            n, params.fast, params.slow, params.bollinger, params.k,
        )

        if not frame.is_plottable:
            if n == 1:
                logger.warning("Only one price point, nothing to plot")
            return ChartOverlay(frame=frame, params=params)

        signals = []
        if visible.signals:
            signals = place_signals(detect_crossovers(fast, slow), points, frame)

        return ChartOverlay(
            price=to_polyline(closes, frame) if visible.price else "",
            fast=to_polyline(fast, frame) if visible.fast else "",
            slow=to_polyline(slow, frame) if visible.slow else "",
            bb_upper=to_polyline(band.upper, frame) if visible.bollinger else "",
            bb_lower=to_polyline(band.lower, frame) if visible.bollinger else "",
            signals=signals,
            frame=frame,
            params=params,
        )

    def compute_frame(self, points: Sequence[PricePoint]) -> pd.DataFrame:
        """
        Indicator table for DataFrame consumers.

        Columns: ``close``, ``fast``, ``slow``, ``signal``, ``bb_middle``,
        ``bb_upper`` and ``bb_lower``, indexed by session date, followed by the
        output columns of each extra indicator in ``params.indicators`` (for
        example ``SMA_100``). Missing values are NaN here, as usual for pandas.

        Raises:
            EngineError: If an indicator is not registered, gets an unknown
                parameter, fails, or repeats a column already in the table
        """
        params = self.params.resolved()
        df = to_frame(points)

        built_in = [
            (IndicatorSpec("MA_CROSS", (("fast", params.fast), ("slow", params.slow))),
             ["fast", "slow", "signal"]),
            (IndicatorSpec("BBANDS", (("k", params.k), ("length", params.bollinger))),
             ["bb_middle", "bb_upper", "bb_lower"]),
        ]
        extra = [(spec, None) for spec in params.indicators]

        for spec, columns in built_in + extra:
            output = self._compute_indicator(spec, df)
            if columns is not None:
                output.columns = columns
            clash = sorted(set(output.columns) & set(df.columns))
            if clash:
                raise EngineError(f"Indicator {spec.type} repeats columns {clash}")
            df = df.join(output, how="left")

        return df

    def _compute_indicator(self, spec: IndicatorSpec, df: pd.DataFrame) -> pd.DataFrame:
        try:
            indicator = create(spec.type, **spec.kwargs)
        except RegistrationError as e:
            raise EngineError(f"Indicator {spec.type} is not available: {e}") from e
        try:
            return indicator.compute(df)
        except Exception as e:
            raise EngineError(f"Failed to compute indicator {spec.type}: {e}") from e
