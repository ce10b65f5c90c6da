"""Test fixtures for the advisor chart engine."""

from .sample_data import (
    ZIGZAG_VALUES,
    create_advisor_payload,
    create_flat_values,
    create_price_points,
    create_trending_values,
    points_from_values,
    trading_dates,
)

__all__ = [
    "ZIGZAG_VALUES",
    "create_advisor_payload",
    "create_flat_values",
    "create_price_points",
    "create_trending_values",
    "points_from_values",
    "trading_dates",
]
