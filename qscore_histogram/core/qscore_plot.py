#!/usr/bin/env python3
"""Q-score histogram plot assembly.

Selects the metric source for the requested filter, builds and scales the
Q-score distribution, projects it to bars and fills in the axis labels,
ranges and title.

Two collaborators can be swapped out by the caller:

- ``aggregate`` derives lane-level metrics from per-tile metrics when the run
  did not ship them (default: ``create_q_metrics_by_lane``)
- ``autoscale`` sets the vertical range from the finished series
  (default: ``auto_scale_y`` without a zero floor)
"""

import logging
from typing import Callable, Optional

from qscore_histogram.core.aggregation import create_q_metrics_by_lane
from qscore_histogram.core.autoscale import auto_scale_y
from qscore_histogram.core.config_manager import PlotConfig
from qscore_histogram.core.distribution import populate_distribution, scale_histogram
from qscore_histogram.core.filter_options import FilterOptions
from qscore_histogram.core.metrics import QualityMetricSet, RunInfo, RunMetrics
from qscore_histogram.core.plot_data import BAR, PlotData, PlotSeries
from qscore_histogram.core.projection import project_histogram

logger = logging.getLogger(__name__)

Aggregator = Callable[[QualityMetricSet], QualityMetricSet]
AutoScaler = Callable[[PlotData], None]


def get_first_filtered_cycle(run_info: RunInfo, options: FilterOptions) -> int:
    """First cycle of the selected read, 1 when all reads are selected.

    Raises:
        InvalidReadError: If the selected read is not part of the run
    """
    if options.all_reads():
        return 1
    return run_info.read(options.read).first_cycle


def get_last_filtered_cycle(
    run_info: RunInfo, options: FilterOptions, max_cycle: int
) -> int:
    """Last cycle based on the read selection, clamped by a selected cycle.

    Args:
        run_info: Run info with reads information
        options: Options to filter the data
        max_cycle: Maximum cycle present in the metrics

    Returns:
        Last cycle to keep

    Raises:
        InvalidReadError: If the selected read is not part of the run
    """
    if options.all_reads():
        last_cycle = max_cycle
    else:
        last_cycle = run_info.read(options.read).last_cycle
    if not options.all_cycles():
        last_cycle = min(last_cycle, options.cycle)
    return last_cycle


def compose_title(run_info: RunInfo, options: FilterOptions) -> str:
    """Barcode, lane, then read and surface when they narrow the plot."""
    title = run_info.flowcell.barcode
    if title:
        title += " "
    title += options.lane_description()
    if options.is_specific_read():
        title += " " + options.read_description()
    if run_info.flowcell.surface_count > 1 and options.is_specific_surface():
        title += " " + options.surface_description()
    return title


def _default_autoscale(data: PlotData, config: PlotConfig) -> None:
    auto_scale_y(data, zero_min=False, padding=config.axis.y_padding)


def plot_qscore_histogram(
    metrics: RunMetrics,
    options: FilterOptions,
    data: PlotData,
    config: Optional[PlotConfig] = None,
    aggregate: Aggregator = create_q_metrics_by_lane,
    autoscale: Optional[AutoScaler] = None,
) -> None:
    """Plot a histogram of Q-scores into ``data``.

    When no quality metrics are available (and none can be derived) ``data``
    is left fully cleared. That is a normal outcome, not an error.

    Args:
        metrics: Run metrics; ``q_by_lane_metrics`` is filled in place when it
            has to be derived
        options: Options to filter the data
        data: Output plot data, overwritten
        config: Scale, axis and series settings (defaults when omitted)
        aggregate: Per-tile to per-lane aggregation collaborator
        autoscale: Vertical range collaborator

    Raises:
        InvalidReadError: If the selected read is not part of the run
        IndexOutOfBoundsError: If the bin table does not match the histogram
    """
    config = config or PlotConfig()

    data.clear()
    run_info = metrics.run_info
    first_cycle = get_first_filtered_cycle(run_info, options)

    series = data.add_series(
        PlotSeries(
            title=config.series.title,
            color=config.series.color,
            series_type=BAR,
        )
    )
    for option in config.series.options:
        series.add_option(option)

    if options.is_specific_surface():
        source = metrics.q_metrics
    else:
        if metrics.q_by_lane_metrics.size() == 0:
            metrics.q_by_lane_metrics = aggregate(metrics.q_metrics)
        source = metrics.q_by_lane_metrics

    if source.size() == 0:
        logger.debug("no quality metrics to plot")
        data.clear()
        return

    last_cycle = get_last_filtered_cycle(run_info, options, source.max_cycle())
    histogram = populate_distribution(source, options, first_cycle, last_cycle)
    axis_scale = scale_histogram(histogram, config.scale)
    max_x_value = project_histogram(source.bins, histogram, series)
    logger.debug(
        "plotted %d bars in %s, max x %.1f", len(series), axis_scale, max_x_value
    )

    if autoscale is None:
        _default_autoscale(data, config)
    else:
        autoscale(data)

    if max_x_value > 0:
        data.set_xrange(config.axis.x_min, max_x_value * config.axis.x_padding)
    else:
        data.set_xrange(config.axis.x_min, config.axis.x_min + config.axis.min_x_span)

    data.x_label = config.axis.x_label
    data.y_label = config.axis.y_label_template.format(scale=axis_scale)
    data.title = compose_title(run_info, options)
