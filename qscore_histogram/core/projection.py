#!/usr/bin/env python3
"""Histogram to bar geometry projection.

Three layouts are supported:

- Unbinned: one bar per Q-score slot, x is the 1-based Q-score.
- Compressed bins: the bin table has one entry per histogram slot.
- Uncompressed (legacy) bins: each bin names its slot through ``value - 1``.

The layout is resolved once into a ``BinningMode`` before projecting.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from qscore_histogram.core.errors import IndexOutOfBoundsError
from qscore_histogram.core.metrics import QualityBin
from qscore_histogram.core.plot_data import BarPoint, PlotSeries, PlottablePoint

logger = logging.getLogger(__name__)


class BinningMode(Enum):
    UNBINNED = "unbinned"
    COMPRESSED = "compressed"
    UNCOMPRESSED = "uncompressed"


def resolve_binning_mode(
    bins: Sequence[QualityBin], histogram: np.ndarray
) -> BinningMode:
    if not bins:
        return BinningMode.UNBINNED
    if len(bins) == histogram.shape[0]:
        return BinningMode.COMPRESSED
    return BinningMode.UNCOMPRESSED


def plot_unbinned_histogram(histogram: np.ndarray, series: PlotSeries) -> float:
    """Write one bar per nonzero Q-score into ``series``.

    Args:
        histogram: Q-score histogram, slot i holds Q-score i+1
        series: Output series, its points are replaced

    Returns:
        Max x-value (last bar + 1), or 0 when nothing was plotted
    """
    points: List[PlottablePoint] = [
        BarPoint(x=float(i + 1), y=float(histogram[i]))
        for i in np.flatnonzero(histogram)
    ]
    series.set_points(points)
    if not points:
        return 0.0
    return points[-1].x + 1


def _bar(q_bin: QualityBin, height: float) -> BarPoint:
    return BarPoint(x=float(q_bin.lower), y=float(height), width=float(q_bin.width))


def plot_binned_histogram(
    bins: Sequence[QualityBin],
    histogram: np.ndarray,
    series: PlotSeries,
    mode: Optional[BinningMode] = None,
) -> float:
    """Write one bar per nonzero bin into ``series``.

    Args:
        bins: Non-empty bin table
        histogram: Q-score histogram
        series: Output series, its points are replaced
        mode: Pre-resolved binning mode (resolved here when omitted)

    Returns:
        Max right edge (x + width) over the plotted bars, or 0

    Raises:
        IndexOutOfBoundsError: If an uncompressed bin points outside the histogram
    """
    if mode is None:
        mode = resolve_binning_mode(bins, histogram)

    points: List[PlottablePoint] = []
    if mode is BinningMode.COMPRESSED:
        for q_bin, height in zip(bins, histogram):
            if height == 0:
                continue
            points.append(_bar(q_bin, height))
    elif mode is BinningMode.UNCOMPRESSED:
        size = histogram.shape[0]
        for q_bin in bins:
            index = q_bin.value - 1
            if index < 0 or index >= size:
                raise IndexOutOfBoundsError(f"{index} < {size}")
            if histogram[index] == 0:
                continue
            points.append(_bar(q_bin, histogram[index]))
    else:
        raise ValueError("plot_binned_histogram requires a non-empty bin table")

    series.set_points(points)
    return max((p.x + p.width for p in points), default=0.0)


def project_histogram(
    bins: Sequence[QualityBin], histogram: np.ndarray, series: PlotSeries
) -> float:
    """Project with whichever layout the bin table implies."""
    mode = resolve_binning_mode(bins, histogram)
    logger.debug("projecting %d slots as %s", histogram.shape[0], mode.value)
    if mode is BinningMode.UNBINNED:
        return plot_unbinned_histogram(histogram, series)
    return plot_binned_histogram(bins, histogram, series, mode)
