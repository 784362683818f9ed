#!/usr/bin/env python3
"""CLI wrapper that loads run metrics, applies filters and plots Q-scores.

Uses:
- metrics_loader.load_metrics
- config_manager.load_config / PlotConfig
- qscore_plot.plot_qscore_histogram

The resulting plot geometry is printed to stdout as JSON (or as a short text
summary with --summary). Nothing is written to disk.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from qscore_histogram.core.config_manager import PlotConfig, load_config
from qscore_histogram.core.errors import QScorePlotError
from qscore_histogram.core.filter_options import FilterOptions
from qscore_histogram.core.metrics_loader import load_metrics
from qscore_histogram.core.plot_data import PlotData
from qscore_histogram.core.qscore_plot import plot_qscore_histogram

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Plot the Q-score histogram of a sequencing run"
    )
    parser.add_argument("metrics", help="Run metrics JSON file")
    parser.add_argument("--config", default=None, help="Plot config JSON file")
    parser.add_argument("--lane", type=int, default=None, help="Lane to plot")
    parser.add_argument("--tile", type=int, default=None, help="Tile to plot")
    parser.add_argument("--surface", type=int, default=None, help="Surface to plot")
    parser.add_argument("--read", type=int, default=None, help="Read to plot")
    parser.add_argument(
        "--cycle", type=int, default=None, help="Last cycle to include"
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a text summary instead of JSON",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    return parser


def resolve_config(args: argparse.Namespace) -> PlotConfig:
    """Load the config file (if any) and apply CLI filter overrides.

    Raises:
        ValueError: If the resulting configuration is invalid
    """
    config = load_config(config_file=args.config) if args.config else PlotConfig()

    for name in ("lane", "tile", "surface", "read", "cycle"):
        value = getattr(args, name)
        if value is not None:
            setattr(config.filter, name, value)
    if args.debug:
        config.debug = True

    is_valid, errors = config.validate()
    if not is_valid:
        raise ValueError("Invalid configuration:\n  " + "\n  ".join(errors))
    return config


def describe_filters(options: FilterOptions) -> str:
    return ", ".join(
        [
            options.lane_description(),
            options.tile_description(),
            options.surface_description(),
            options.read_description(),
            "All Cycles" if options.all_cycles() else f"Cycle <= {options.cycle}",
        ]
    )


def format_summary(data: PlotData) -> str:
    """Render plot data as a short human readable summary."""
    if not data.series:
        return "No Q-score data to plot"

    lines = [data.title, f"{data.x_label} vs {data.y_label}"]
    for point in data[0]:
        if point.width is None:
            lines.append(f"  Q{point.x:g}: {point.y:.3f}")
        else:
            upper = point.x + point.width - 1
            lines.append(f"  Q{point.x:g}-{upper:g}: {point.y:.3f}")
    if data.x_range:
        lines.append(f"x range: {data.x_range[0]:g} - {data.x_range[1]:g}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        metrics = load_metrics(args.metrics)
        options = FilterOptions.from_config(config.filter)
        options.validate(metrics.run_info)
        logger.debug("filters: %s", describe_filters(options))

        data = PlotData()
        plot_qscore_histogram(metrics, options, data, config=config)
    except (QScorePlotError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.summary:
        print(format_summary(data))
    else:
        print(json.dumps(data.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
