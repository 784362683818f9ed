#!/usr/bin/env python3
"""Build RunMetrics from JSON documents.

Binary InterOp parsing happens upstream; this module accepts the JSON export
of those metrics. Field names vary between exporters, so every lookup goes
through an alias table.
"""

import json
import os
from typing import Any, Dict, List, Optional

from qscore_histogram.core.metrics import (
    FlowcellInfo,
    QualityBin,
    QualityMetricSet,
    QualityRecord,
    ReadInfo,
    RunInfo,
    RunMetrics,
    build_reads,
    surface_from_tile,
)


# =============================================================================
# Field Alias Mappings
# =============================================================================

FIELD_ALIASES: Dict[str, List[str]] = {
    # Record coordinates
    "lane": ["lane", "Lane"],
    "tile": ["tile", "Tile"],
    "cycle": ["cycle", "Cycle"],
    "counts": ["counts", "qscore_hist", "QScoreHist", "histogram"],
    # Bin table
    "lower": ["lower", "Lower", "low"],
    "upper": ["upper", "Upper", "high"],
    "value": ["value", "Value"],
    # Reads
    "number": ["number", "Number", "read"],
    "first_cycle": ["first_cycle", "FirstCycle"],
    "last_cycle": ["last_cycle", "LastCycle"],
    # Flowcell
    "barcode": ["barcode", "Barcode", "flowcell_id", "FlowcellId"],
    "lane_count": ["lane_count", "LaneCount"],
    "surface_count": ["surface_count", "SurfaceCount"],
    "naming_method": ["naming_method", "NamingMethod", "TileNamingConvention"],
}

NAMING_METHOD_ALIASES: Dict[str, str] = {
    "FourDigit": "four_digit",
    "FiveDigit": "five_digit",
}


class FieldNormalizer:
    """Looks up fields by their normalized name, trying every known alias.

    Example:
        normalizer = FieldNormalizer()
        normalizer.get_value({"Lane": 1, "Tile": 1101}, "lane")  # -> 1
    """

    def __init__(self, aliases: Optional[Dict[str, List[str]]] = None):
        """Use ``aliases`` for the lookup table, FIELD_ALIASES when omitted."""
        self.aliases = aliases or FIELD_ALIASES

    def get_value(self, row: Dict[str, Any], field: str, default: Any = None) -> Any:
        """Read a record, bin or run info field under any of its exporter names.

        Aliases are tried in table order and null entries are skipped, so a
        ``{"lane": null, "Lane": 2}`` row yields 2. Fields missing from the
        table are read under their own name. Returns ``default`` when no alias
        holds a value.
        """
        if field not in self.aliases:
            return row.get(field, default)

        for alias in self.aliases[field]:
            if alias in row and row[alias] is not None:
                return row[alias]

        return default

    def require(self, row: Dict[str, Any], field: str) -> Any:
        """Get a field that must be present.

        Raises:
            ValueError: If no alias of the field is present
        """
        value = self.get_value(row, field)
        if value is None:
            raise ValueError(f"missing field '{field}' in {sorted(row)}")
        return value

    def get_int(self, row: Dict[str, Any], field: str, default: int = 0) -> int:
        value = self.get_value(row, field)
        if value is None:
            return default
        try:
            return int(value)
        except (ValueError, TypeError) as exc:
            raise ValueError(f"field '{field}' is not an integer: {value!r}") from exc


def parse_run_info(doc: Dict[str, Any], normalizer: FieldNormalizer) -> RunInfo:
    """Parse the run info section.

    Reads are given either explicitly or as a list of read lengths under
    ``reads_cycles``.
    A missing ``lane_count`` is left at 0 so ``metrics_from_dict`` can derive
    it from the records.
    """
    fc_doc = doc.get("flowcell", {})
    naming = str(normalizer.get_value(fc_doc, "naming_method", "four_digit"))
    flowcell = FlowcellInfo(
        barcode=str(normalizer.get_value(fc_doc, "barcode", "")),
        lane_count=normalizer.get_int(fc_doc, "lane_count", 0),
        surface_count=normalizer.get_int(fc_doc, "surface_count", 1),
        naming_method=NAMING_METHOD_ALIASES.get(naming, naming),
    )

    if "reads_cycles" in doc:
        reads = build_reads(doc["reads_cycles"])
    else:
        reads = [
            ReadInfo(
                number=int(normalizer.require(r, "number")),
                first_cycle=int(normalizer.require(r, "first_cycle")),
                last_cycle=int(normalizer.require(r, "last_cycle")),
            )
            for r in doc.get("reads", [])
        ]
    return RunInfo(flowcell=flowcell, reads=reads)


def parse_records(
    rows: List[Dict[str, Any]], normalizer: FieldNormalizer, naming_method: str
) -> List[QualityRecord]:
    records = []
    for row in rows:
        tile = normalizer.get_int(row, "tile", 0)
        records.append(
            QualityRecord(
                lane=int(normalizer.require(row, "lane")),
                tile=tile,
                cycle=int(normalizer.require(row, "cycle")),
                counts=normalizer.require(row, "counts"),
                surface=surface_from_tile(tile, naming_method),
            )
        )
    return records


def parse_bins(
    rows: List[Dict[str, Any]], normalizer: FieldNormalizer
) -> List[QualityBin]:
    return [
        QualityBin(
            lower=int(normalizer.require(row, "lower")),
            upper=int(normalizer.require(row, "upper")),
            value=int(normalizer.require(row, "value")),
        )
        for row in rows
    ]


def metrics_from_dict(
    doc: Dict[str, Any], normalizer: Optional[FieldNormalizer] = None
) -> RunMetrics:
    """Create RunMetrics from a parsed JSON document.

    When the flowcell does not state its lane count, the highest lane found in
    the records is used.

    Args:
        doc: Document with ``run_info``, ``q_metrics`` and optional ``bins``
            and ``q_by_lane_metrics`` sections
        normalizer: Field normalizer (defaults to FIELD_ALIASES)

    Returns:
        RunMetrics instance

    Raises:
        ValueError: If a required field is missing or malformed
    """
    normalizer = normalizer or FieldNormalizer()
    run_info = parse_run_info(doc.get("run_info", {}), normalizer)
    naming = run_info.flowcell.naming_method
    bins = parse_bins(doc.get("bins", []), normalizer)

    q_metrics = QualityMetricSet(
        records=parse_records(doc.get("q_metrics", []), normalizer, naming),
        bins=bins,
    )
    q_by_lane = QualityMetricSet(
        records=parse_records(doc.get("q_by_lane_metrics", []), normalizer, naming),
        bins=list(bins),
    )
    if run_info.flowcell.lane_count <= 0:
        run_info.flowcell.lane_count = max(
            (r.lane for r in q_metrics.records + q_by_lane.records), default=1
        )
    return RunMetrics(
        run_info=run_info, q_metrics=q_metrics, q_by_lane_metrics=q_by_lane
    )


def load_metrics(filepath: str) -> RunMetrics:
    """Load RunMetrics from a JSON file.

    Raises:
        ValueError: If the file does not exist or is malformed
    """
    if not os.path.exists(filepath):
        raise ValueError(f"Metrics file not found: {filepath}")
    with open(filepath, "r") as f:
        doc = json.load(f)
    return metrics_from_dict(doc)
