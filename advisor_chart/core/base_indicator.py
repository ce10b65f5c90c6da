"""
Abstract base class for the overlay indicators.

Every indicator that can be drawn on the advisor chart implements this
contract so the engine can build a single indicator table for renderers that
work on DataFrames (the matplotlib chart, CSV/JSON exports).
"""

from abc import ABC, abstractmethod
from typing import Any

import pandas as pd

__all__ = ["BaseIndicator"]


class BaseIndicator(ABC):
    """
    Contract shared by all overlay indicators.

    Concrete indicators provide two things:

    1. ``params()``: a class method returning the default parameters
    2. ``compute()``: the calculation itself, on a DataFrame with a ``close``
       column, returning new columns on the same index

    Example:
        ```python
        from advisor_chart.core.base_indicator import BaseIndicator
        from advisor_chart.core.registry import register

        @register("MAX")
        class RollingMax(BaseIndicator):
            @classmethod
            def params(cls) -> dict:
                return {"length": 20}

            def __init__(self, length: int = 20):
                self.length = length

            def compute(self, df: pd.DataFrame) -> pd.DataFrame:
                result = pd.DataFrame(index=df.index)
                result[f"MAX_{self.length}"] = df["close"].rolling(self.length).max()
                return result
        ```

    Notes:
        - Column names are prefixed with the indicator name and its parameters
        - Output is indexed exactly like the input
        - Insufficient history is NaN in DataFrame form; the list-based
          functions in ``advisor_chart.indicators`` expose it as ``None``
    """

    @classmethod
    @abstractmethod
    def params(cls) -> dict[str, Any]:
        """
        Return the default parameters of the indicator.

        Keys must match the constructor's keyword arguments. The method is pure
        and does not depend on instance state.
        """
        pass

    @abstractmethod
    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Compute the indicator columns for ``df``.

        Args:
            df: DataFrame sorted by date with at least a ``close`` column.

        Returns:
            DataFrame with the same index as ``df`` holding the indicator columns.

        Raises:
            ValueError: If ``df`` has no ``close`` column.
        """
        pass

    @staticmethod
    def _require_close(df: pd.DataFrame) -> pd.Series:
        if "close" not in df.columns:
            raise ValueError("Input DataFrame must contain a 'close' column")
        return df["close"].astype(float)
