"""Core framework components for the advisor chart engine."""

from .base_indicator import BaseIndicator
from .registry import RegistrationError, get, register
from .types import BollingerBand, ChartOverlay, PlotFrame, PricePoint, SignalPoint, SignalType

__all__ = [
    "BaseIndicator",
    "register",
    "get",
    "RegistrationError",
    "PricePoint",
    "BollingerBand",
    "SignalPoint",
    "SignalType",
    "PlotFrame",
    "ChartOverlay",
]
