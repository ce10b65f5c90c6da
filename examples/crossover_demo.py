#!/usr/bin/env python3
"""
Moving-Average Crossover Chart Demo

This script draws the advisor chart for two synthetic price histories:
1. A cyclical market where the fast and slow averages cross several times
2. A steady uptrend where they never cross

For each history it prints the detected BUY/SELL signals, writes the SVG
chart and a matplotlib PNG, then shows how a session reuses the overlay when
the parameters do not change.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from advisor_chart import OverlayEngine, OverlayParams, OverlaySession
from advisor_chart.core.datafeed import load_price_points
from advisor_chart.visual.chart_renderer import ChartRenderer, VisualizationConfig
from advisor_chart.visual.svg_renderer import save_svg

OUTPUT_DIR = Path("demo_output")


def create_cyclical_data(periods=260, base_price=40000, amplitude=4000):
    """Create a synthetic daily close series that oscillates around a base price."""
    np.random.seed(42)

    t = np.linspace(0, 6 * np.pi, periods)
    noise = np.random.normal(0, 250, periods)
    close_prices = base_price + np.sin(t) * amplitude + noise

    dates = pd.bdate_range(start="2023-01-02", periods=periods)
    return pd.DataFrame({"close": close_prices}, index=pd.Index(dates, name="date"))


def create_trending_data(periods=260, base_price=150, daily_gain=0.4):
    """Create a synthetic steadily rising close series."""
    close_prices = base_price + daily_gain * np.arange(periods)
    dates = pd.bdate_range(start="2023-01-02", periods=periods)
    return pd.DataFrame({"date": dates, "close": close_prices})


def draw(name, df, params):
    points = load_price_points(df)
    engine = OverlayEngine(params)
    overlay = engine.run(points)

    print(f"\n{name}: {len(points)} sessions, fast={overlay.params.fast} slow={overlay.params.slow}")
    if overlay.signals:
        for signal in overlay.signals:
            print(f"  {signal.label}")
    else:
        print("  No crossover signals")

    svg_path = save_svg(overlay, OUTPUT_DIR / f"{name}.svg")

    renderer = ChartRenderer(VisualizationConfig(title=name.replace("_", " ").title(),
                                                 visible=params.visible))
    fig = renderer.render(engine.compute_frame(points))
    png_path = renderer.save(fig, OUTPUT_DIR / f"{name}.png")
    plt.close(fig)

    print(f"  Saved {svg_path} and {png_path}")
    return points


def main():
    print("Advisor Chart Crossover Demo")
    print("=" * 40)

    params = OverlayParams(fast=20, slow=50, bollinger=20, k=2)
    cyclical = draw("cyclical_market", create_cyclical_data(), params)
    draw("trending_market", create_trending_data(), params)

    print("\nSession reuse")
    session = OverlaySession(cyclical, params)
    session.overlay()
    session.overlay()
    session.overlay(fast="20")
    print(f"  Three requests with the same windows: {session.recomputations} computation(s)")
    session.toggle(bollinger=False)
    session.overlay(k=3)
    print(f"  After hiding the band and widening it: {session.recomputations} computation(s)")


if __name__ == "__main__":
    main()
