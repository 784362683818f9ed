#!/usr/bin/env python3
"""In-memory run metric model consumed by the Q-score plot logic.

Records are plain containers filled by a loader (see metrics_loader.py); this
module performs no file I/O.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Sequence

import numpy as np

from qscore_histogram.core.errors import InvalidReadError


# Tile number divisor giving the surface for each flowcell naming method
TILE_NAMING_METHODS: Dict[str, int] = {
    "four_digit": 1000,
    "five_digit": 10000,
}


def surface_from_tile(tile: int, naming_method: str = "four_digit") -> int:
    """Return the surface encoded in the leading digit of a tile number."""
    if tile <= 0:
        return 0
    divisor = TILE_NAMING_METHODS.get(naming_method)
    if divisor is None:
        raise ValueError(f"unknown tile naming method: {naming_method}")
    return tile // divisor


class AccumulatableRecord(Protocol):
    """Anything that can be filtered by cycle and summed into a histogram."""

    lane: int
    tile: int
    surface: int
    cycle: int

    def size(self) -> int: ...

    def accumulate_into(self, histogram: np.ndarray) -> None: ...


@dataclass(eq=False)
class QualityRecord:
    """Q-score counts for one lane/tile/cycle."""

    lane: int
    tile: int
    cycle: int
    counts: np.ndarray
    surface: int = 0

    def __post_init__(self):
        self.counts = np.asarray(self.counts, dtype=np.float64)

    def size(self) -> int:
        return int(self.counts.shape[0])

    def accumulate_into(self, histogram: np.ndarray) -> None:
        """Add this record's counts elementwise into ``histogram``."""
        np.add(histogram, self.counts, out=histogram)


@dataclass(frozen=True)
class QualityBin:
    """Inclusive Q-score range reported by the instrument."""

    lower: int
    upper: int
    value: int

    @property
    def width(self) -> int:
        return self.upper - self.lower + 1


@dataclass
class QualityMetricSet:
    """Ordered collection of quality records with an optional bin table."""

    records: List[QualityRecord] = field(default_factory=list)
    bins: List[QualityBin] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)

    def size(self) -> int:
        return len(self.records)

    def max_cycle(self) -> int:
        """Highest cycle observed, 0 for an empty set."""
        return max((r.cycle for r in self.records), default=0)


@dataclass
class ReadInfo:
    """A single read of the run and the cycles it spans."""

    number: int
    first_cycle: int
    last_cycle: int


@dataclass
class FlowcellInfo:
    """Flowcell layout relevant to filtering and titles."""

    barcode: str = ""
    lane_count: int = 1
    surface_count: int = 1
    naming_method: str = "four_digit"


@dataclass
class RunInfo:
    """Run metadata: the flowcell and the reads in cycle order."""

    flowcell: FlowcellInfo = field(default_factory=FlowcellInfo)
    reads: List[ReadInfo] = field(default_factory=list)

    def read(self, number: int) -> ReadInfo:
        """Look up a read by its 1-based number.

        Raises:
            InvalidReadError: If the run has no such read
        """
        for read in self.reads:
            if read.number == number:
                return read
        raise InvalidReadError(f"invalid read selection: {number}")

    def total_cycles(self) -> int:
        return max((r.last_cycle for r in self.reads), default=0)


@dataclass
class RunMetrics:
    """Run info plus the per-tile and lane-aggregated quality metrics."""

    run_info: RunInfo = field(default_factory=RunInfo)
    q_metrics: QualityMetricSet = field(default_factory=QualityMetricSet)
    q_by_lane_metrics: QualityMetricSet = field(default_factory=QualityMetricSet)


def build_reads(cycles_per_read: Sequence[int]) -> List[ReadInfo]:
    """Build consecutive reads from a list of read lengths."""
    reads = []
    first = 1
    for number, length in enumerate(cycles_per_read, start=1):
        reads.append(
            ReadInfo(
                number=number,
                first_cycle=first,
                last_cycle=first + length - 1,
            )
        )
        first += length
    return reads
