#!/usr/bin/env python3
"""Plot output containers: bar points, series and the plot itself.

These hold geometry only. Nothing here draws; a dashboard front-end consumes
``PlotData.to_dict()``.
"""

from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)


BAR = "bar"


@runtime_checkable
class PlottablePoint(Protocol):
    """Anything with an x position, a height and an optional width."""

    x: float
    y: float
    width: Optional[float]

    def to_dict(self) -> Dict[str, Any]: ...


@dataclass
class BarPoint:
    """A single bar: left edge ``x``, height ``y`` and optional ``width``."""

    x: float
    y: float
    width: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"x": self.x, "y": self.y}
        if self.width is not None:
            d["width"] = self.width
        return d


@dataclass
class PlotSeries:
    """Ordered points sharing one title, color and series type."""

    title: str = ""
    color: str = ""
    series_type: str = BAR
    options: List[str] = field(default_factory=list)
    points: List[PlottablePoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PlottablePoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> PlottablePoint:
        return self.points[index]

    def add_option(self, option: str) -> None:
        if option not in self.options:
            self.options.append(option)

    def set_points(self, points: Sequence[PlottablePoint]) -> None:
        """Replace the series geometry with exactly ``points``."""
        self.points = list(points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "color": self.color,
            "series_type": self.series_type,
            "options": list(self.options),
            "points": [p.to_dict() for p in self.points],
        }


@dataclass
class PlotData:
    """A plot: its series plus title, axis labels and axis ranges."""

    series: List[PlotSeries] = field(default_factory=list)
    title: str = ""
    x_label: str = ""
    y_label: str = ""
    x_range: Optional[Tuple[float, float]] = None
    y_range: Optional[Tuple[float, float]] = None

    def __len__(self) -> int:
        return len(self.series)

    def __iter__(self) -> Iterator[PlotSeries]:
        return iter(self.series)

    def __getitem__(self, index: int) -> PlotSeries:
        return self.series[index]

    def clear(self) -> None:
        """Reset to an empty plot with no series, labels or ranges."""
        self.series = []
        self.title = ""
        self.x_label = ""
        self.y_label = ""
        self.x_range = None
        self.y_range = None

    def add_series(self, series: PlotSeries) -> PlotSeries:
        self.series.append(series)
        return series

    def set_xrange(self, x_min: float, x_max: float) -> None:
        self.x_range = (float(x_min), float(x_max))

    def set_yrange(self, y_min: float, y_max: float) -> None:
        self.y_range = (float(y_min), float(y_max))

    def point_count(self) -> int:
        return sum(len(s) for s in self.series)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "x_label": self.x_label,
            "y_label": self.y_label,
            "x_range": list(self.x_range) if self.x_range else None,
            "y_range": list(self.y_range) if self.y_range else None,
            "series": [s.to_dict() for s in self.series],
        }
