#!/usr/bin/env python3
"""Q-score distribution building and magnitude normalization.

Counts from a full run can sum past billions of base calls, so the histogram
is always accumulated as float64.
"""

import logging
from typing import Iterable, Optional

import numpy as np

from qscore_histogram.core.config_manager import ScaleConfig, DEFAULT_SCALE_CONFIG
from qscore_histogram.core.filter_options import FilterOptions
from qscore_histogram.core.metrics import AccumulatableRecord

logger = logging.getLogger(__name__)


def populate_distribution(
    records: Iterable[AccumulatableRecord],
    options: FilterOptions,
    first_cycle: int,
    last_cycle: int,
) -> np.ndarray:
    """Sum the counts of every record inside the filter and cycle window.

    The histogram is sized from the first record; all records are assumed to
    carry the same number of Q-score slots.

    Args:
        records: Quality records (per tile or per lane)
        options: Lane/tile/surface selection
        first_cycle: First cycle to keep (inclusive)
        last_cycle: Last cycle to keep (inclusive)

    Returns:
        float64 histogram, or an empty array when there are no records
    """
    histogram: Optional[np.ndarray] = None
    kept = 0
    for record in records:
        if histogram is None:
            histogram = np.zeros(record.size(), dtype=np.float64)
        if not options.valid_tile(record):
            continue
        if record.cycle < first_cycle or record.cycle > last_cycle:
            continue
        record.accumulate_into(histogram)
        kept += 1

    if histogram is None:
        return np.zeros(0, dtype=np.float64)

    logger.debug(
        "accumulated %d records over cycles %d-%d into %d bins",
        kept,
        first_cycle,
        last_cycle,
        histogram.shape[0],
    )
    return histogram


def scale_histogram(
    histogram: np.ndarray, config: ScaleConfig = DEFAULT_SCALE_CONFIG
) -> str:
    """Scale the histogram in place and return the unit label.

    Heights are first expressed in millions; if the tallest bar would still
    need 5+ digits the histogram is expressed in billions instead.

    Args:
        histogram: float histogram, modified in place
        config: Divisors and threshold

    Returns:
        "million" or "billion"
    """
    histogram /= config.million_divisor
    max_height = float(histogram.max()) if histogram.size else 0.0
    if max_height < config.billion_threshold:
        return config.million_label
    histogram /= config.billion_divisor
    return config.billion_label
