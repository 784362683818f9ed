#!/usr/bin/env python3
"""Integration tests for the qscore-histogram CLI."""

import json
import logging
import os
import shutil
import tempfile
import unittest
from io import StringIO
from unittest.mock import patch

from qscore_histogram.cli.main import build_parser, format_summary, main, resolve_config
from qscore_histogram.core.plot_data import PlotData


METRICS_DOC = {
    "run_info": {
        "flowcell": {"barcode": "HTEST", "lane_count": 1, "surface_count": 2},
        "reads_cycles": [2, 2],
    },
    "q_metrics": [
        {"lane": 1, "tile": 1101, "cycle": c, "counts": [0, 2e6, 0, 1e6]}
        for c in range(1, 5)
    ],
}


class TestCLI(unittest.TestCase):
    """Run main() end to end against temporary metrics files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.metrics_path = os.path.join(self.temp_dir, "metrics.json")
        with open(self.metrics_path, "w") as f:
            json.dump(METRICS_DOC, f)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _run(self, *args, metrics_path=None):
        with patch("sys.stdout", new_callable=StringIO) as out, patch(
            "sys.stderr", new_callable=StringIO
        ) as err:
            code = main([metrics_path or self.metrics_path, *args])
        return code, out.getvalue(), err.getvalue()

    def test_json_output(self):
        code, out, _ = self._run()
        self.assertEqual(code, 0)
        plot = json.loads(out)
        self.assertEqual(plot["title"], "HTEST All Lanes")
        self.assertEqual(plot["y_label"], "Total (million)")
        self.assertEqual(
            plot["series"][0]["points"], [{"x": 2, "y": 8.0}, {"x": 4, "y": 4.0}]
        )

    def test_read_filter(self):
        code, out, _ = self._run("--read", "2")
        self.assertEqual(code, 0)
        plot = json.loads(out)
        self.assertEqual(plot["title"], "HTEST All Lanes Read 2")
        self.assertEqual(plot["series"][0]["points"][0], {"x": 2, "y": 4.0})

    def test_summary_output(self):
        code, out, _ = self._run("--summary", "--surface", "1")
        self.assertEqual(code, 0)
        self.assertIn("HTEST All Lanes Surface 1", out)
        self.assertIn("Q2: 8.000", out)

    def test_invalid_read_exits_with_error(self):
        code, out, err = self._run("--read", "7")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("invalid read selection", err)

    def test_invalid_lane_exits_with_error(self):
        code, _, err = self._run("--lane", "3")
        self.assertEqual(code, 1)
        self.assertIn("lane 3", err)

    def test_missing_metrics_file(self):
        code, _, err = self._run(
            metrics_path=os.path.join(self.temp_dir, "missing.json")
        )
        self.assertEqual(code, 1)
        self.assertIn("Metrics file not found", err)

    def test_config_file_and_overrides(self):
        config_path = os.path.join(self.temp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"filter": {"read": 1}, "series": {"title": "QS"}}, f)
        args = build_parser().parse_args(
            [self.metrics_path, "--config", config_path, "--cycle", "1"]
        )
        config = resolve_config(args)
        self.assertEqual(config.filter.read, 1)
        self.assertEqual(config.filter.cycle, 1)
        self.assertEqual(config.series.title, "QS")

    def test_debug_from_config_file_sets_log_level(self):
        config_path = os.path.join(self.temp_dir, "config.json")
        with open(config_path, "w") as f:
            json.dump({"debug": True}, f)
        with patch("qscore_histogram.cli.main.logging.basicConfig") as basic_config:
            code, _, _ = self._run("--config", config_path, "--summary")
        self.assertEqual(code, 0)
        basic_config.assert_called_once()
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.DEBUG)

    def test_log_level_defaults_to_warning(self):
        with patch("qscore_histogram.cli.main.logging.basicConfig") as basic_config:
            code, _, _ = self._run("--summary")
        self.assertEqual(code, 0)
        self.assertEqual(basic_config.call_args.kwargs["level"], logging.WARNING)

    def test_invalid_config_rejected(self):
        args = build_parser().parse_args([self.metrics_path, "--lane", "0"])
        with self.assertRaises(ValueError):
            resolve_config(args)


class TestFormatSummary(unittest.TestCase):
    def test_empty_plot(self):
        self.assertEqual(format_summary(PlotData()), "No Q-score data to plot")


if __name__ == "__main__":
    unittest.main()
