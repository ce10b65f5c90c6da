"""
Chart rendering for the advisor overlays.

- coordinates: shared plot frame and polyline point strings
- svg_renderer: standalone SVG documents in the logical canvas
- theme_manager: colours and stroke widths shared by all renderers
- chart_renderer: matplotlib figures (imported on demand, it pulls in matplotlib)
"""

from advisor_chart.visual.coordinates import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    build_frame,
    format_coordinate,
    place_signals,
    to_points,
    to_polyline,
)
from advisor_chart.visual.svg_renderer import render_svg, save_svg
from advisor_chart.visual.theme_manager import ThemeManager

__all__ = [
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "build_frame",
    "format_coordinate",
    "to_points",
    "to_polyline",
    "place_signals",
    "render_svg",
    "save_svg",
    "ThemeManager",
]
