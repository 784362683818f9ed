#!/usr/bin/env python3
"""Vertical axis autoscaling for plot data."""

from qscore_histogram.core.config_manager import DEFAULT_AXIS_CONFIG
from qscore_histogram.core.plot_data import PlotData


def auto_scale_y(
    data: PlotData,
    zero_min: bool = True,
    padding: float = DEFAULT_AXIS_CONFIG.y_padding,
) -> None:
    """Set the y range to cover every point of every series.

    The upper bound is padded by ``padding``. The lower bound is 0 when
    ``zero_min`` is set, otherwise the smallest height. Plots without points
    keep their current y range.
    """
    heights = [p.y for series in data for p in series]
    if not heights:
        return
    y_min = 0.0 if zero_min else min(heights)
    data.set_yrange(y_min, max(heights) * padding)
