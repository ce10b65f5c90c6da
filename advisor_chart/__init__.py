"""Indicator overlay engine for trading-advisor price charts."""

from advisor_chart.core.engine import (
    EngineError,
    IndicatorSpec,
    OverlayEngine,
    OverlayParams,
    OverlayVisibility,
    resolve_multiplier,
    resolve_period,
)
from advisor_chart.core.session import OverlaySession

__version__ = "0.1.0"

__all__ = [
    "EngineError",
    "IndicatorSpec",
    "OverlayEngine",
    "OverlayParams",
    "OverlayVisibility",
    "OverlaySession",
    "resolve_multiplier",
    "resolve_period",
]
