"""
Bollinger Band overlay.

The band is an SMA envelope shifted by ``k`` population standard deviations
(divided by the window length, not length - 1) of the same window. The ta
library's ``BollingerBands`` uses exactly that definition.
"""

from collections.abc import Sequence

import pandas as pd
import ta.volatility as ta_volatility

from advisor_chart.core.base_indicator import BaseIndicator
from advisor_chart.core.registry import register
from advisor_chart.core.types import BollingerBand
from advisor_chart.indicators.sma import to_optional_series

__all__ = ["BBANDS", "bollinger_bands"]

DEFAULT_MULTIPLIER = 2.0


def bollinger_bands(
    values: Sequence[float], period: int, k: float = DEFAULT_MULTIPLIER
) -> BollingerBand:
    """
    Compute upper and lower Bollinger bands.

    Args:
        values: Closing prices in chronological order
        period: Window length shared by the average and the deviation
        k: Width multiplier applied to the standard deviation

    Returns:
        BollingerBand whose ``upper``, ``lower`` and ``middle`` lists are as
        long as ``values`` and ``None`` wherever the moving average is.
    """
    n = len(values)
    if n == 0:
        return BollingerBand(upper=[], lower=[], middle=[])
    if period < 1:
        empty = [None] * n
        return BollingerBand(upper=list(empty), lower=list(empty), middle=list(empty))

    close = pd.Series(list(values), dtype=float)
    bands = ta_volatility.BollingerBands(
        close=close, window=int(period), window_dev=k, fillna=False
    )

    middle = to_optional_series(bands.bollinger_mavg())
    upper = to_optional_series(bands.bollinger_hband())
    lower = to_optional_series(bands.bollinger_lband())

    # keep the three lines null at exactly the same positions
    for i, mid in enumerate(middle):
        if mid is None:
            upper[i] = None
            lower[i] = None

    return BollingerBand(upper=upper, lower=lower, middle=middle)


@register("BBANDS")
class BBANDS(BaseIndicator):
    """
    Bollinger Bands indicator.

    Attributes:
        length (int): Window length of the average and the deviation
        k (float): Number of standard deviations between middle and edges
    """

    @classmethod
    def params(cls):
        """Return default parameters for Bollinger Bands."""
        return {"length": 20, "k": DEFAULT_MULTIPLIER}

    def __init__(self, length=20, k=DEFAULT_MULTIPLIER):
        self.length = length
        self.k = k

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        close = self._require_close(df)
        band = bollinger_bands(close.tolist(), self.length, self.k)

        prefix = f"BB_{self.length}"
        result = pd.DataFrame(index=df.index)
        result[f"{prefix}_middle"] = pd.Series(band.middle, index=df.index, dtype=float)
        result[f"{prefix}_upper"] = pd.Series(band.upper, index=df.index, dtype=float)
        result[f"{prefix}_lower"] = pd.Series(band.lower, index=df.index, dtype=float)
        return result
