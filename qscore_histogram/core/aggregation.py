#!/usr/bin/env python3
"""Derive lane-level quality metrics from per-tile metrics."""

import logging
from typing import Dict, Tuple

import numpy as np

from qscore_histogram.core.metrics import QualityMetricSet, QualityRecord

logger = logging.getLogger(__name__)


def create_q_metrics_by_lane(per_tile: QualityMetricSet) -> QualityMetricSet:
    """Sum per-tile histograms into one record per (lane, cycle).

    Aggregated records use tile 0 and surface 0. The bin table is carried
    over unchanged. Output is ordered by lane then cycle.

    Args:
        per_tile: Per-tile quality metrics

    Returns:
        New lane-level metric set (empty when ``per_tile`` is empty)
    """
    sums: Dict[Tuple[int, int], np.ndarray] = {}
    for record in per_tile:
        key = (record.lane, record.cycle)
        if key not in sums:
            sums[key] = np.zeros(record.size(), dtype=np.float64)
        record.accumulate_into(sums[key])

    records = [
        QualityRecord(lane=lane, tile=0, cycle=cycle, counts=counts)
        for (lane, cycle), counts in sorted(sums.items())
    ]
    logger.debug(
        "aggregated %d tile records into %d lane records", len(per_tile), len(records)
    )
    return QualityMetricSet(records=records, bins=list(per_tile.bins))
