"""
Fast/slow moving-average crossover detection.

A BUY fires on the first session where the fast average is strictly above the
slow one after being at or below it; a SELL is the mirror image. A session
where the two averages are equal counts as the prior state for both
directions, so a tie never produces a signal itself.
"""

from collections.abc import Sequence
from typing import NamedTuple, Optional

import pandas as pd

from advisor_chart.core.base_indicator import BaseIndicator
from advisor_chart.core.registry import register
from advisor_chart.core.types import SignalType
from advisor_chart.indicators.sma import moving_average

__all__ = ["Crossover", "MA_CROSS", "detect_crossovers"]


class Crossover(NamedTuple):
    index: int
    type: SignalType


def detect_crossovers(
    fast: Sequence[Optional[float]], slow: Sequence[Optional[float]]
) -> list[Crossover]:
    """
    Find every session where the fast series crosses the slow one.

    Args:
        fast: Short-window series, ``None`` where undefined
        slow: Long-window series aligned with ``fast``

    Returns:
        Crossovers in ascending index order, at most one per index.

    Raises:
        ValueError: If the two series have different lengths.
    """
    if len(fast) != len(slow):
        raise ValueError(
            f"Fast and slow series must be aligned, got {len(fast)} and {len(slow)} points"
        )

    crossovers = []
    for i in range(1, len(fast)):
        f_prev, s_prev, f_now, s_now = fast[i - 1], slow[i - 1], fast[i], slow[i]
        if f_prev is None or s_prev is None or f_now is None or s_now is None:
            continue
        if f_prev <= s_prev and f_now > s_now:
            crossovers.append(Crossover(i, SignalType.BUY))
        elif f_prev >= s_prev and f_now < s_now:
            crossovers.append(Crossover(i, SignalType.SELL))
    return crossovers


@register("MA_CROSS")
class MA_CROSS(BaseIndicator):
    """
    Moving-average crossover indicator.

    Produces the two averages and a ``signal`` column holding "BUY", "SELL"
    or None for every session.

    Attributes:
        fast (int): Window of the fast average
        slow (int): Window of the slow average
    """

    @classmethod
    def params(cls):
        """Return default parameters for the crossover indicator."""
        return {"fast": 20, "slow": 50}

    def __init__(self, fast=20, slow=50):
        self.fast = fast
        self.slow = slow

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        close = self._require_close(df).tolist()
        fast_ma = moving_average(close, self.fast)
        slow_ma = moving_average(close, self.slow)

        signals: list[Optional[str]] = [None] * len(close)
        for crossover in detect_crossovers(fast_ma, slow_ma):
            signals[crossover.index] = crossover.type.value

        prefix = f"MA_CROSS_{self.fast}_{self.slow}"
        result = pd.DataFrame(index=df.index)
        result[f"{prefix}_fast"] = pd.Series(fast_ma, index=df.index, dtype=float)
        result[f"{prefix}_slow"] = pd.Series(slow_ma, index=df.index, dtype=float)
        result[f"{prefix}_signal"] = pd.Series(signals, index=df.index, dtype=object)
        return result
