"""
Simple Moving Average (SMA) overlay.

The fast and slow lines of the advisor chart are plain SMAs over closing
prices. Values are computed with the ta library and returned as ``None``-padded
lists so that the start of the series, where the window is not yet filled,
stays a gap on the chart instead of turning into a zero.
"""

import math
from collections.abc import Iterable, Sequence

import pandas as pd
import ta.trend as ta_trend

from advisor_chart.core.base_indicator import BaseIndicator
from advisor_chart.core.registry import register
from advisor_chart.core.types import Series

__all__ = ["SMA", "moving_average", "to_optional_series"]


def to_optional_series(values: Iterable[float]) -> Series:
    """Convert pandas/numpy output to a list where NaN becomes ``None``."""
    return [None if v is None or math.isnan(v) else float(v) for v in values]


def moving_average(values: Sequence[float], period: int) -> Series:
    """
    Trailing simple moving average.

    Args:
        values: Closing prices in chronological order
        period: Number of sessions in the window

    Returns:
        A list as long as ``values``. Index ``i`` holds the mean of
        ``values[i - period + 1 : i + 1]``, or ``None`` when ``i < period - 1``.
        A period below 1 or longer than the input yields only ``None``.
    """
    n = len(values)
    if n == 0:
        return []
    if period < 1:
        return [None] * n

    close = pd.Series(list(values), dtype=float)
    sma = ta_trend.SMAIndicator(close=close, window=int(period), fillna=False)
    return to_optional_series(sma.sma_indicator())


@register("SMA")
class SMA(BaseIndicator):
    """
    Simple Moving Average indicator.

    Attributes:
        length (int): The number of sessions in the averaging window
    """

    @classmethod
    def params(cls):
        """Return default parameters for SMA indicator."""
        return {"length": 20}

    def __init__(self, length=20):
        self.length = length

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Compute the SMA column.

        Args:
            df (pd.DataFrame): Price DataFrame with a 'close' column

        Returns:
            pd.DataFrame: ``SMA_{length}`` column, NaN where the window is not filled
        """
        close = self._require_close(df)

        result = pd.DataFrame(index=df.index)
        result[f"SMA_{self.length}"] = pd.Series(
            moving_average(close.tolist(), self.length), index=df.index, dtype=float
        )
        return result
