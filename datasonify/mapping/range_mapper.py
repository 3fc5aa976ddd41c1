"""
Range normalization for data sonification.

This module maps observations from a data range onto an audio parameter
range (MIDI pitch, frequency in Hz, sweep duration) with clamping, so that
every value of a dataset lands inside an audible, pleasant interval.
"""

import numpy as np
from typing import Optional, Sequence, Tuple, Union

from ..exceptions import MappingError

Number = Union[int, float]


def _validate_range(low: Number, high: Number, label: str) -> None:
    # NaN bounds fail this comparison as well
    if not low <= high:
        raise MappingError(f"{label} range is inverted or undefined: ({low}, {high})")
    if not (np.isfinite(low) and np.isfinite(high)):
        raise MappingError(f"{label} range must be finite: ({low}, {high})")


def _position(value: np.ndarray, source_min: Number, source_max: Number) -> np.ndarray:
    """Relative position of value inside the source range; 0 for a degenerate range."""
    if source_max == source_min:
        return np.zeros_like(value)
    span = float(source_max) - float(source_min)
    if np.isfinite(span):
        return (value - source_min) / span
    # Span overflows float64; halving every term keeps the ratio
    return (value / 2 - source_min / 2) / (source_max / 2 - source_min / 2)


def _as_output(result: np.ndarray) -> Union[float, np.ndarray]:
    if result.ndim == 0:
        return float(result)
    return result


def map_range(value: Union[Number, np.ndarray],
              source_min: Number, source_max: Number,
              target_min: Number, target_max: Number) -> Union[float, np.ndarray]:
    """
    Linearly map value(s) from a source range into a target range.
    
    A degenerate source range (``source_min == source_max``, e.g. a dataset
    with a single point or all-equal values) maps everything to
    ``target_min``. The result is always clamped to the target range, so
    slightly out-of-range inputs never produce out-of-range pitches.
    
    Args:
        value: Observation(s) to map (scalar or array)
        source_min: Lower bound of the data range
        source_max: Upper bound of the data range
        target_min: Lower bound of the output range
        target_max: Upper bound of the output range
        
    Returns:
        Mapped value(s) as float (scalar input) or array
        
    Raises:
        MappingError: If either range has min > max or non-finite bounds
        
    Examples:
        >>> map_range(200, 100, 300, 48, 72)
        60.0
        >>> map_range(7, 5, 5, 10, 20)  # degenerate source range
        10.0
        >>> map_range(1010, 0, 10, 0, 100)  # clamped
        100.0
    """
    _validate_range(source_min, source_max, "Source")
    _validate_range(target_min, target_max, "Target")
    
    value = np.asarray(value, dtype=float)
    position = np.clip(_position(value, source_min, source_max), 0.0, 1.0)
    
    span = float(target_max) - float(target_min)
    if np.isfinite(span):
        mapped = target_min + position * span
    else:
        mapped = target_min * (1.0 - position) + target_max * position
    # Exact upper endpoint regardless of float rounding in the interpolation
    mapped = np.where(position >= 1.0, float(target_max), mapped)
    mapped = np.clip(mapped, target_min, target_max)
    
    return _as_output(mapped)


def log_map_range(value: Union[Number, np.ndarray],
                  source_min: Number, source_max: Number,
                  target_min: Number, target_max: Number) -> Union[float, np.ndarray]:
    """
    Map value(s) into a positive target range on a logarithmic scale.
    
    Equal steps in the data become equal musical intervals, which is how
    frequencies should be interpolated. Degenerate and clamping behaviour
    matches :func:`map_range`.
    
    Raises:
        MappingError: If ranges are invalid or the target range is not positive
    """
    _validate_range(source_min, source_max, "Source")
    _validate_range(target_min, target_max, "Target")
    if target_min <= 0:
        raise MappingError("Logarithmic target range must be positive")
    
    value = np.asarray(value, dtype=float)
    position = np.clip(_position(value, source_min, source_max), 0.0, 1.0)
    
    mapped = target_min * (target_max / target_min) ** position
    mapped = np.where(position >= 1.0, float(target_max), mapped)
    mapped = np.clip(mapped, target_min, target_max)
    
    return _as_output(mapped)


class RangeMapper:
    """
    Range mapper bound to a target range and a fitted source range.
    
    The source range is usually fitted from the active slice of a dataset
    and refitted whenever that slice changes.
    """
    
    def __init__(self, target_min: Number, target_max: Number,
                 source_min: Optional[Number] = None,
                 source_max: Optional[Number] = None):
        _validate_range(target_min, target_max, "Target")
        self.target_min = target_min
        self.target_max = target_max
        self.source_min = source_min
        self.source_max = source_max
        if source_min is not None and source_max is not None:
            _validate_range(source_min, source_max, "Source")
    
    @property
    def is_fitted(self) -> bool:
        return self.source_min is not None and self.source_max is not None
    
    @property
    def source_range(self) -> Optional[Tuple[float, float]]:
        if not self.is_fitted:
            return None
        return (self.source_min, self.source_max)
    
    def fit(self, values: Sequence[Number]) -> "RangeMapper":
        """
        Set the source range to the min/max of values.
        
        Raises:
            MappingError: If values is empty or contains NaN or infinity
        """
        data = np.asarray(values, dtype=float)
        if data.size == 0:
            raise MappingError("Cannot fit a source range to zero values")
        if not np.all(np.isfinite(data)):
            raise MappingError("Cannot fit a source range to NaN or infinite values")
        
        self.source_min = float(np.min(data))
        self.source_max = float(np.max(data))
        return self
    
    def map(self, value: Union[Number, np.ndarray]) -> Union[float, np.ndarray]:
        """Map value(s) through the fitted source range into the target range."""
        if not self.is_fitted:
            raise MappingError("RangeMapper has no source range; call fit() first")
        return map_range(value, self.source_min, self.source_max,
                         self.target_min, self.target_max)
