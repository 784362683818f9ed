#!/usr/bin/env python3
"""Filter options selecting which quality records contribute to a plot.

Each selection is either a specific 1-based id or ``ALL_IDS`` meaning
"everything". The descriptions are used to compose plot titles.
"""

from dataclasses import dataclass
from typing import List

from qscore_histogram.core.config_manager import ALL_IDS, FilterConfig
from qscore_histogram.core.errors import InvalidFilterOptionError
from qscore_histogram.core.metrics import AccumulatableRecord, RunInfo


@dataclass(frozen=True)
class FilterOptions:
    """Read-only lane/tile/surface/read/cycle selection."""

    lane: int = ALL_IDS
    tile: int = ALL_IDS
    surface: int = ALL_IDS
    read: int = ALL_IDS
    cycle: int = ALL_IDS

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FilterOptions":
        return cls(
            lane=config.lane,
            tile=config.tile,
            surface=config.surface,
            read=config.read,
            cycle=config.cycle,
        )

    def all_lanes(self) -> bool:
        return self.lane == ALL_IDS

    def all_tiles(self) -> bool:
        return self.tile == ALL_IDS

    def all_surfaces(self) -> bool:
        return self.surface == ALL_IDS

    def all_reads(self) -> bool:
        return self.read == ALL_IDS

    def all_cycles(self) -> bool:
        return self.cycle == ALL_IDS

    def is_specific_surface(self) -> bool:
        return not self.all_surfaces()

    def is_specific_read(self) -> bool:
        return not self.all_reads()

    def valid_tile(self, record: AccumulatableRecord) -> bool:
        """Check whether a record falls inside the lane/tile/surface selection."""
        return (
            (self.all_lanes() or record.lane == self.lane)
            and (self.all_tiles() or record.tile == self.tile)
            and (self.all_surfaces() or record.surface == self.surface)
        )

    def lane_description(self) -> str:
        return "All Lanes" if self.all_lanes() else f"Lane {self.lane}"

    def read_description(self) -> str:
        return "All Reads" if self.all_reads() else f"Read {self.read}"

    def surface_description(self) -> str:
        return "All Surfaces" if self.all_surfaces() else f"Surface {self.surface}"

    def tile_description(self) -> str:
        return "All Tiles" if self.all_tiles() else f"Tile {self.tile}"

    def validate(self, run_info: RunInfo) -> None:
        """Check every specific selection against the run layout.

        Raises:
            InvalidReadError: If the selected read is not part of the run
            InvalidFilterOptionError: If lane, surface or cycle is out of range
        """
        errors: List[str] = []
        flowcell = run_info.flowcell

        if not self.all_lanes() and not 1 <= self.lane <= flowcell.lane_count:
            errors.append(f"lane {self.lane} outside 1-{flowcell.lane_count}")
        if not self.all_surfaces() and not 1 <= self.surface <= flowcell.surface_count:
            errors.append(
                f"surface {self.surface} outside 1-{flowcell.surface_count}"
            )
        total_cycles = run_info.total_cycles()
        if not self.all_cycles() and not 1 <= self.cycle <= total_cycles:
            errors.append(f"cycle {self.cycle} outside 1-{total_cycles}")

        if not self.all_reads():
            # Raises InvalidReadError for an unknown read
            run_info.read(self.read)

        if errors:
            raise InvalidFilterOptionError("; ".join(errors))

