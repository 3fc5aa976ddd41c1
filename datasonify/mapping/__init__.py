"""
Mapping module.

Normalize data ranges onto audio parameter ranges.
"""

from .range_mapper import map_range, log_map_range, RangeMapper
from .categorical import CategoricalMapper, parse_bands

__all__ = [
    "map_range",
    "log_map_range",
    "RangeMapper",
    "CategoricalMapper",
    "parse_bands"
]
