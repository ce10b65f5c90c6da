"""
Matplotlib renderer for the advisor chart.

Draws the indicator table produced by ``OverlayEngine.compute_frame`` as a
static figure: price line, fast and slow averages, the Bollinger envelope and
BUY/SELL markers. Useful for reports where an SVG polyline is not enough.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import pandas as pd

from advisor_chart.core.engine import OverlayVisibility
from advisor_chart.visual.theme_manager import ThemeManager

__all__ = ["ChartRenderer", "VisualizationConfig"]

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["close", "fast", "slow", "signal", "bb_upper", "bb_lower"]
BUILT_IN_COLUMNS = set(REQUIRED_COLUMNS) | {"bb_middle"}


def extra_columns(df: pd.DataFrame) -> list:
    """Numeric columns of ``df`` that are not part of the built-in overlays."""
    return [
        col for col in df.columns
        if col not in BUILT_IN_COLUMNS and pd.api.types.is_numeric_dtype(df[col])
    ]


@dataclass
class VisualizationConfig:
    """
    Configuration for figure rendering.

    Attributes:
        title: Chart title
        width: Figure width in inches
        height: Figure height in inches
        dpi: Resolution for saved images
        theme: Theme name for styling
        save_path: Optional path to save the chart
        format: File format for saved images
        visible: Which overlays to draw
    """
    title: str = "Price Chart + Indicators + Signals"
    width: float = 12
    height: float = 4.5
    dpi: int = 150
    theme: str = "default"
    save_path: Optional[Union[str, Path]] = None
    format: str = "png"
    visible: OverlayVisibility = field(default_factory=OverlayVisibility)


class ChartRenderer:
    """
    Renders an indicator table as a matplotlib figure.

    Example:
        ```python
        engine = OverlayEngine(OverlayParams(fast=10, slow=30))
        df = engine.compute_frame(points)

        renderer = ChartRenderer(VisualizationConfig(title="BTC-USD"))
        fig = renderer.render(df)
        renderer.save(fig, "btc.png")
        ```
    """

    def __init__(self, config: Optional[VisualizationConfig] = None,
                 theme_manager: Optional[ThemeManager] = None):
        self.config = config or VisualizationConfig()
        self.theme_manager = theme_manager or ThemeManager()
        self.theme = self.theme_manager.get_theme(self.config.theme)

    def validate_data(self, df: pd.DataFrame) -> None:
        missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing_cols:
            raise ValueError(f"Missing required columns: {missing_cols}")

    def render(self, df: pd.DataFrame) -> plt.Figure:
        """
        Draw the chart.

        Columns beyond the built-in overlays (for example ``SMA_100`` from an
        ``indicators`` entry in the overlay config) are drawn as extra lines.

        Args:
            df: Indicator table indexed by date

        Returns:
            The matplotlib figure; the caller closes it.

        Raises:
            ValueError: If required columns are missing
        """
        self.validate_data(df)
        theme = self.theme
        visible = self.config.visible

        with plt.rc_context(self.theme_manager.matplotlib_style(self.config.theme)):
            fig, ax = plt.subplots(figsize=(self.config.width, self.config.height))

            if df.empty:
                ax.text(0.5, 0.5, "No price data", transform=ax.transAxes,
                        ha="center", va="center")
            else:
                if visible.bollinger:
                    self._draw_bands(ax, df)
                self._draw_extra_lines(ax, df)
                if visible.slow:
                    ax.plot(df.index, df["slow"], color=theme["slow_color"],
                            linewidth=theme["average_width"], label="MA Slow")
                if visible.fast:
                    ax.plot(df.index, df["fast"], color=theme["fast_color"],
                            linewidth=theme["average_width"], label="MA Fast")
                if visible.price:
                    ax.plot(df.index, df["close"], color=theme["price_color"],
                            linewidth=theme["price_width"], label="Price")
                if visible.signals:
                    self._draw_signals(ax, df)
                self._setup_axis(ax)
                if ax.get_legend_handles_labels()[0]:
                    ax.legend(loc="upper left")

            fig.suptitle(self.config.title)
        return fig

    def _draw_bands(self, ax: plt.Axes, df: pd.DataFrame) -> None:
        theme = self.theme
        ax.fill_between(df.index, df["bb_lower"], df["bb_upper"],
                        color=theme["band_color"], alpha=theme["band_fill_alpha"], linewidth=0)
        for column, label in (("bb_upper", "Bollinger"), ("bb_lower", "_nolegend_")):
            ax.plot(df.index, df[column], color=theme["band_color"], linestyle="--",
                    linewidth=theme["band_width"], label=label)

    def _draw_extra_lines(self, ax: plt.Axes, df: pd.DataFrame) -> None:
        colors = self.theme["extra_colors"]
        for i, column in enumerate(extra_columns(df)):
            ax.plot(df.index, df[column], color=colors[i % len(colors)],
                    linewidth=self.theme["band_width"], label=column)

    def _draw_signals(self, ax: plt.Axes, df: pd.DataFrame) -> None:
        theme = self.theme
        size = (theme["marker_radius"] * 2) ** 2
        for signal, marker, color in (("BUY", "^", theme["buy_color"]),
                                      ("SELL", "v", theme["sell_color"])):
            points = df[df["signal"] == signal]
            if points.empty:
                continue
            ax.scatter(points.index, points["close"], marker=marker, s=size, color=color,
                       edgecolors="white", linewidth=1, zorder=5, label=signal)

    def _setup_axis(self, ax: plt.Axes) -> None:
        theme = self.theme
        locator = mdates.AutoDateLocator()
        ax.xaxis.set_major_locator(locator)
        ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
        ax.yaxis.set_major_formatter(plt.FuncFormatter(lambda x, p: f"${x:,.2f}"))
        # ticks are built lazily at draw time, after the rc context has closed
        ax.tick_params(colors=theme["text_color"])
        ax.grid(True, alpha=theme["grid_alpha"], color=theme["grid_color"])
        ax.set_ylabel("Price ($)")

    def save(self, fig: plt.Figure, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save ``fig`` to ``path`` (or the configured save path).

        Raises:
            ValueError: If no path is given or configured
        """
        target = path or self.config.save_path
        if target is None:
            raise ValueError("No save path given")
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(target, dpi=self.config.dpi, format=target.suffix.lstrip(".") or self.config.format,
                    facecolor=fig.get_facecolor(), bbox_inches="tight")
        logger.info("Saved chart to %s", target)
        return target
