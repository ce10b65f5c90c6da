"""
SVG rendering of a computed chart overlay.

The output is a standalone SVG document in the overlay's logical canvas: the
dashed band edges first, then the slow and fast averages, the price line on
top, and one circle per crossover signal with its tooltip as ``<title>``.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from advisor_chart.core.types import ChartOverlay, SignalType
from advisor_chart.visual.coordinates import DEFAULT_HEIGHT, DEFAULT_WIDTH, format_coordinate
from advisor_chart.visual.theme_manager import ThemeManager

__all__ = ["render_svg", "save_svg"]

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _polyline(parent: ET.Element, points: str, color: str, width: float,
              dash: Optional[str] = None, name: str = "") -> None:
    if not points:
        return
    attrs = {
        "fill": "none",
        "stroke": color,
        "stroke-width": format_coordinate(width),
        "points": points,
    }
    if dash:
        attrs["stroke-dasharray"] = dash
    if name:
        attrs["class"] = name
    ET.SubElement(parent, "polyline", attrs)


def render_svg(overlay: ChartOverlay, theme_name: str = "default",
               theme_manager: Optional[ThemeManager] = None) -> str:
    """
    Render ``overlay`` as an SVG document string.

    Args:
        overlay: Engine output
        theme_name: Theme used for colours and stroke widths
        theme_manager: Optional manager holding custom themes

    Returns:
        The SVG markup.
    """
    theme = (theme_manager or ThemeManager()).get_theme(theme_name)
    frame = overlay.frame
    width = frame.width if frame is not None else DEFAULT_WIDTH
    height = frame.height if frame is not None else DEFAULT_HEIGHT

    svg = ET.Element("svg", {
        "xmlns": SVG_NAMESPACE,
        "viewBox": f"0 0 {format_coordinate(width)} {format_coordinate(height)}",
        "width": format_coordinate(width),
        "height": format_coordinate(height),
    })
    ET.SubElement(svg, "rect", {
        "width": "100%",
        "height": "100%",
        "fill": theme["background_color"],
    })

    _polyline(svg, overlay.bb_upper, theme["band_color"], theme["band_width"],
              dash=theme["band_dash"], name="bb-upper")
    _polyline(svg, overlay.bb_lower, theme["band_color"], theme["band_width"],
              dash=theme["band_dash"], name="bb-lower")
    _polyline(svg, overlay.slow, theme["slow_color"], theme["average_width"], name="slow")
    _polyline(svg, overlay.fast, theme["fast_color"], theme["average_width"], name="fast")
    _polyline(svg, overlay.price, theme["price_color"], theme["price_width"], name="price")

    for signal in overlay.signals:
        color = theme["buy_color"] if signal.type is SignalType.BUY else theme["sell_color"]
        group = ET.SubElement(svg, "g", {"class": f"signal {signal.type.value.lower()}"})
        ET.SubElement(group, "circle", {
            "cx": format_coordinate(signal.x),
            "cy": format_coordinate(signal.y),
            "r": format_coordinate(theme["marker_radius"]),
            "fill": color,
        })
        title = ET.SubElement(group, "title")
        title.text = signal.label

    return ET.tostring(svg, encoding="unicode")


def save_svg(overlay: ChartOverlay, path: Union[str, Path], theme_name: str = "default",
             theme_manager: Optional[ThemeManager] = None) -> Path:
    """Render ``overlay`` and write it to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_svg(overlay, theme_name, theme_manager), encoding="utf-8")
    logger.info("Saved SVG chart to %s", path)
    return path
