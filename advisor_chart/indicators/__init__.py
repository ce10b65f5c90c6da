"""Overlay indicators for the advisor chart."""

# Import indicators to register them automatically
from advisor_chart.indicators.bollinger import BBANDS, bollinger_bands
from advisor_chart.indicators.crossover import MA_CROSS, Crossover, detect_crossovers
from advisor_chart.indicators.sma import SMA, moving_average

__all__ = [
    "SMA",
    "BBANDS",
    "MA_CROSS",
    "Crossover",
    "moving_average",
    "bollinger_bands",
    "detect_crossovers",
]
