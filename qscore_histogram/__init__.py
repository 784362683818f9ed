"""Q-score histogram plot logic for sequencing run-quality dashboards."""

from .core.filter_options import FilterOptions
from .core.plot_data import BarPoint, PlotData, PlotSeries
from .core.qscore_plot import plot_qscore_histogram

__all__ = [
    "FilterOptions",
    "BarPoint",
    "PlotData",
    "PlotSeries",
    "plot_qscore_histogram",
]
