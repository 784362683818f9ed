#!/usr/bin/env python3
"""Tests for building RunMetrics from JSON."""

import json
import os
import tempfile
import unittest

import numpy as np

from qscore_histogram.core.errors import InvalidFilterOptionError, InvalidReadError
from qscore_histogram.core.filter_options import FilterOptions
from qscore_histogram.core.metrics_loader import (
    FieldNormalizer,
    load_metrics,
    metrics_from_dict,
)

SAMPLE_DOC = {
    "run_info": {
        "flowcell": {"Barcode": "HABCDEFXX", "LaneCount": 2, "SurfaceCount": 2},
        "reads": [
            {"Number": 1, "FirstCycle": 1, "LastCycle": 3},
            {"Number": 2, "FirstCycle": 4, "LastCycle": 5},
        ],
    },
    "bins": [
        {"Lower": 1, "Upper": 14, "Value": 7},
        {"Lower": 15, "Upper": 30, "Value": 25},
    ],
    "q_metrics": [
        {"Lane": 1, "Tile": 1101, "Cycle": 1, "QScoreHist": [0, 4, 0]},
        {"lane": 1, "tile": 2101, "cycle": 2, "counts": [1, 0, 2]},
    ],
}


class TestFieldNormalizer(unittest.TestCase):
    def test_aliases(self):
        normalizer = FieldNormalizer()
        self.assertEqual(normalizer.get_value({"Lane": 3}, "lane"), 3)
        self.assertEqual(normalizer.get_value({"lane": 4, "Lane": 3}, "lane"), 4)
        self.assertEqual(normalizer.get_value({"lane": None, "Lane": 2}, "lane"), 2)
        self.assertEqual(normalizer.get_value({}, "lane", 9), 9)
        self.assertEqual(normalizer.get_value({"extra": 1}, "extra"), 1)

    def test_require_missing(self):
        with self.assertRaises(ValueError):
            FieldNormalizer().require({"Tile": 1}, "lane")

    def test_get_int_rejects_garbage(self):
        with self.assertRaises(ValueError):
            FieldNormalizer().get_int({"Lane": "one"}, "lane")


class TestMetricsFromDict(unittest.TestCase):
    """Tests for metrics_from_dict and load_metrics."""

    def test_parses_run_info(self):
        metrics = metrics_from_dict(SAMPLE_DOC)
        run_info = metrics.run_info
        self.assertEqual(run_info.flowcell.barcode, "HABCDEFXX")
        self.assertEqual(run_info.flowcell.surface_count, 2)
        self.assertEqual(run_info.read(2).first_cycle, 4)
        self.assertEqual(run_info.flowcell.lane_count, 2)
        self.assertEqual(run_info.read(2).last_cycle, 5)
        with self.assertRaises(InvalidReadError):
            run_info.read(3)

    def test_parses_records_and_surfaces(self):
        metrics = metrics_from_dict(SAMPLE_DOC)
        records = metrics.q_metrics.records
        self.assertEqual(len(records), 2)
        np.testing.assert_array_equal(records[0].counts, [0, 4, 0])
        self.assertEqual([r.surface for r in records], [1, 2])
        self.assertEqual(metrics.q_metrics.max_cycle(), 2)
        self.assertEqual(metrics.q_by_lane_metrics.size(), 0)

    def test_parses_bins(self):
        bins = metrics_from_dict(SAMPLE_DOC).q_metrics.bins
        self.assertEqual(
            [(b.lower, b.upper, b.value) for b in bins], [(1, 14, 7), (15, 30, 25)]
        )
        self.assertEqual(bins[0].width, 14)

    def test_reads_from_lengths(self):
        metrics = metrics_from_dict(
            {"run_info": {"reads_cycles": [10, 6, 10]}}
        )
        reads = metrics.run_info.reads
        self.assertEqual(
            [(r.first_cycle, r.last_cycle) for r in reads],
            [(1, 10), (11, 16), (17, 26)],
        )
        self.assertEqual([r.number for r in reads], [1, 2, 3])

    def test_five_digit_naming_alias(self):
        doc = {
            "run_info": {"flowcell": {"NamingMethod": "FiveDigit"}},
            "q_metrics": [{"lane": 1, "tile": 21304, "cycle": 1, "counts": [1]}],
        }
        metrics = metrics_from_dict(doc)
        self.assertEqual(metrics.run_info.flowcell.naming_method, "five_digit")
        self.assertEqual(metrics.q_metrics.records[0].surface, 2)

    def test_lane_count_from_records_when_absent(self):
        doc = {
            "run_info": {"flowcell": {"Barcode": "FC2"}, "reads_cycles": [3]},
            "q_metrics": [
                {"lane": 1, "tile": 1101, "cycle": 1, "counts": [1, 2]},
                {"lane": 2, "tile": 1101, "cycle": 1, "counts": [3, 4]},
            ],
        }
        run_info = metrics_from_dict(doc).run_info
        self.assertEqual(run_info.flowcell.lane_count, 2)
        FilterOptions(lane=2).validate(run_info)
        with self.assertRaises(InvalidFilterOptionError):
            FilterOptions(lane=3).validate(run_info)

    def test_lane_count_defaults_to_one_without_records(self):
        run_info = metrics_from_dict({"run_info": {"reads_cycles": [3]}}).run_info
        self.assertEqual(run_info.flowcell.lane_count, 1)

    def test_explicit_lane_count_is_kept(self):
        doc = {
            "run_info": {"flowcell": {"LaneCount": 8}},
            "q_metrics": [{"lane": 1, "tile": 1101, "cycle": 1, "counts": [1]}],
        }
        self.assertEqual(metrics_from_dict(doc).run_info.flowcell.lane_count, 8)

    def test_missing_field(self):
        with self.assertRaises(ValueError):
            metrics_from_dict({"q_metrics": [{"lane": 1, "cycle": 1}]})

    def test_load_metrics_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            json.dump(SAMPLE_DOC, f)
            path = f.name
        try:
            metrics = load_metrics(path)
            self.assertEqual(metrics.q_metrics.size(), 2)
        finally:
            os.remove(path)

    def test_load_metrics_missing_file(self):
        with self.assertRaises(ValueError):
            load_metrics("/nonexistent/metrics.json")


if __name__ == "__main__":
    unittest.main()
