"""CLI for drawing advisor charts from saved price data."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from advisor_chart.core.datafeed import (
    DataFeedError,
    load_advisor_snapshot,
    load_price_points,
)
from advisor_chart.core.engine import EngineError, OverlayEngine, OverlayParams
from advisor_chart.core.schema import ConfigValidationError, load_config
from advisor_chart.visual.svg_renderer import render_svg, save_svg

logger = logging.getLogger(__name__)

OVERLAYS = ["price", "fast", "slow", "bollinger", "signals"]
FORMATS = ["svg", "png", "json"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="advisor-chart",
        description="Draw price charts with moving averages, Bollinger bands and crossover signals",
    )
    parser.add_argument("input", help="Advisor payload or price history (.json or .csv)")
    parser.add_argument("--config", help="Path to YAML overlay configuration")
    parser.add_argument("--fast", help="Fast moving-average window (default 20)")
    parser.add_argument("--slow", help="Slow moving-average window (default 50)")
    parser.add_argument("--bb-period", dest="bb_period", help="Bollinger window (default 20)")
    parser.add_argument("--k", type=float,
                        help="Bollinger width in standard deviations (default 2, negative becomes 0)")
    parser.add_argument("--width", type=float, help="Canvas width (default 760)")
    parser.add_argument("--height", type=float, help="Canvas height (default 220)")
    parser.add_argument("--hide", nargs="+", choices=OVERLAYS, default=[],
                        help="Overlays to leave out")
    parser.add_argument("--theme", help="Theme name (default, dark)")
    parser.add_argument("--format", choices=FORMATS, default="svg", help="Output format")
    parser.add_argument("--output", "-o",
                        help="Output file, '-' for stdout (svg/json only). "
                             "Defaults to the input name with the format's extension")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def _build_params(args: argparse.Namespace, config: dict) -> OverlayParams:
    params = OverlayParams.from_config(config)

    overrides = {
        "fast": args.fast,
        "slow": args.slow,
        "bollinger": args.bb_period,
        "k": args.k,
        "width": args.width,
        "height": args.height,
    }
    params = replace(params, **{k: v for k, v in overrides.items() if v is not None})

    if args.hide:
        hidden = {name: False for name in args.hide}
        params = replace(params, visible=replace(params.visible, **hidden))
    return params


def _load_points(path: Path):
    """Return (points, title) for an input file."""
    if path.suffix.lower() == ".json":
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, dict) and payload.get("ticker"):
            snapshot = load_advisor_snapshot(payload)
            title = snapshot.ticker
            if snapshot.recommendation:
                title = f"{title} ({snapshot.recommendation})"
            return snapshot.chart, title
        return load_price_points(payload), path.stem
    return load_price_points(path), path.stem


def _write_text(text: str, output: str) -> None:
    if output == "-":
        sys.stdout.write(text + "\n")
        return
    target = Path(output)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")


def run(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    config = load_config(args.config) if args.config else {}
    params = _build_params(args, config)
    theme = args.theme or config.get("theme", "default")

    points, title = _load_points(input_path)
    logger.info("Loaded %d price points from %s", len(points), input_path)

    engine = OverlayEngine(params)
    overlay = engine.run(points)

    output = args.output or str(input_path.with_suffix(f".{args.format}"))
    if args.format == "svg":
        if output == "-":
            _write_text(render_svg(overlay, theme), output)
        else:
            save_svg(overlay, output, theme)
    elif args.format == "json":
        _write_text(json.dumps(overlay.to_dict(), indent=2), output)
    else:
        if output == "-":
            print("Error: PNG output needs a file path", file=sys.stderr)
            return 1
        import matplotlib.pyplot as plt

        from advisor_chart.visual.chart_renderer import ChartRenderer, VisualizationConfig

        renderer = ChartRenderer(VisualizationConfig(title=title, theme=theme,
                                                     visible=params.visible))
        fig = renderer.render(engine.compute_frame(points))
        try:
            renderer.save(fig, output)
        finally:
            plt.close(fig)

    if output != "-":
        print(f"Chart written to {output}")
        for signal in overlay.signals:
            print(f"  {signal.label}")
        if not overlay.signals and params.visible.signals:
            print("  No crossover signals")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the advisor-chart command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return run(args)
    except (DataFeedError, ConfigValidationError, EngineError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
