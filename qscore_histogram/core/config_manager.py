#!/usr/bin/env python3
"""Configuration management for Q-score histogram plotting.

This module provides a unified configuration system that supports:
1. CLI arguments (via cli/main.py)
2. JSON configuration files (for dashboard integration)
3. Validation and defaults

The scale and axis sections hold the fixed constants used by the plot logic.
They are exposed here so there is a single source of truth for them, not so
that every dashboard tweaks them.
"""

import json
import os
from typing import Any, Dict, List, Optional
from datetime import datetime
from zoneinfo import ZoneInfo
from dataclasses import dataclass, field, asdict


ALL_IDS = -1


@dataclass
class ScaleConfig:
    """Histogram magnitude normalization constants."""

    million_divisor: float = 1e6
    billion_threshold: float = 10000.0  # Max scaled height before switching unit
    billion_divisor: float = 1000.0
    million_label: str = "million"
    billion_label: str = "billion"


@dataclass
class AxisConfig:
    """Axis labels and range padding."""

    x_min: float = 1.0  # Q-score 0 is never plotted
    x_padding: float = 1.1
    min_x_span: float = 1.0  # Used when there is nothing to plot
    y_padding: float = 1.1
    x_label: str = "Q Score"
    y_label_template: str = "Total ({scale})"


@dataclass
class SeriesConfig:
    """Bar series presentation."""

    title: str = "Q Score"
    color: str = ""
    options: List[str] = field(default_factory=lambda: ["Shifted"])


@dataclass
class FilterConfig:
    """Lane/tile/surface/read/cycle selection (-1 selects everything)."""

    lane: int = ALL_IDS
    tile: int = ALL_IDS
    surface: int = ALL_IDS
    read: int = ALL_IDS
    cycle: int = ALL_IDS


@dataclass
class PlotConfig:
    """Complete plot configuration."""

    scale: ScaleConfig = field(default_factory=ScaleConfig)
    axis: AxisConfig = field(default_factory=AxisConfig)
    series: SeriesConfig = field(default_factory=SeriesConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)
    debug: bool = False

    # Metadata
    created_at: Optional[str] = None
    version: str = "1.0"

    def __post_init__(self):
        """Initialize timestamp if not provided."""
        if self.created_at is None:
            self.created_at = datetime.now(ZoneInfo("UTC")).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def to_json(self, filepath: str, indent: int = 2) -> None:
        """Save configuration to JSON file.

        Args:
            filepath: Path to JSON file
            indent: JSON indentation level
        """
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlotConfig":
        """Create config from dictionary.

        Keys starting with ``_`` are treated as documentation and ignored.

        Args:
            data: Configuration dictionary

        Returns:
            PlotConfig instance
        """

        def filter_meta(d: dict) -> dict:
            """Remove keys starting with _ (documentation fields)."""
            return {k: v for k, v in d.items() if not k.startswith("_")}

        return cls(
            scale=ScaleConfig(**filter_meta(data.get("scale", {}))),
            axis=AxisConfig(**filter_meta(data.get("axis", {}))),
            series=SeriesConfig(**filter_meta(data.get("series", {}))),
            filter=FilterConfig(**filter_meta(data.get("filter", {}))),
            debug=bool(data.get("debug", False)),
            created_at=data.get("created_at"),
            version=data.get("version", "1.0"),
        )

    @classmethod
    def from_json(cls, filepath: str) -> "PlotConfig":
        """Load configuration from JSON file.

        Args:
            filepath: Path to JSON file

        Returns:
            PlotConfig instance
        """
        with open(filepath, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def validate(self) -> tuple[bool, list[str]]:
        """Validate configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if self.scale.million_divisor <= 0 or self.scale.billion_divisor <= 0:
            errors.append("scale divisors must be positive.")
        if self.scale.billion_threshold <= 0:
            errors.append("scale.billion_threshold must be positive.")
        if self.axis.x_padding < 1.0:
            errors.append(
                "axis.x_padding must be >= 1.0 (e.g., 1.1 for 10% headroom)."
            )
        if self.axis.min_x_span <= 0:
            errors.append("axis.min_x_span must be positive.")
        if "{scale}" not in self.axis.y_label_template:
            errors.append("axis.y_label_template must contain '{scale}'.")

        for name in ("lane", "tile", "surface", "read", "cycle"):
            value = getattr(self.filter, name)
            if value != ALL_IDS and value < 1:
                errors.append(
                    f"filter.{name} must be {ALL_IDS} (all) or >= 1. Got {value}."
                )

        return len(errors) == 0, errors


def load_config(
    config_file: Optional[str] = None,
    config_dict: Optional[Dict[str, Any]] = None,
) -> PlotConfig:
    """Load configuration from file or dictionary.

    Args:
        config_file: Path to JSON config file
        config_dict: Configuration dictionary (alternative to file)

    Returns:
        PlotConfig instance

    Raises:
        ValueError: If neither file nor dict provided, or if file doesn't exist
    """
    if config_file:
        if not os.path.exists(config_file):
            raise ValueError(f"Config file not found: {config_file}")
        return PlotConfig.from_json(config_file)
    elif config_dict:
        return PlotConfig.from_dict(config_dict)
    else:
        raise ValueError("Must provide either config_file or config_dict")


# =============================================================================
# Default Configuration Instances
# Other modules import these instead of duplicating values.
# =============================================================================

DEFAULT_SCALE_CONFIG = ScaleConfig()
DEFAULT_AXIS_CONFIG = AxisConfig()
DEFAULT_SERIES_CONFIG = SeriesConfig()
DEFAULT_FILTER_CONFIG = FilterConfig()
