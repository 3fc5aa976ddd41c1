"""
Unit tests for range mapping.
"""

import pytest
import numpy as np

from datasonify.mapping import map_range, log_map_range, RangeMapper
from datasonify.exceptions import MappingError


class TestMapRange:
    """Test linear range mapping."""
    
    def test_endpoints_map_to_target_endpoints(self):
        """Source min/max land exactly on target min/max."""
        assert map_range(100, 100, 300, 48, 72) == 48
        assert map_range(300, 100, 300, 48, 72) == 72
        assert map_range(0.1, 0.1, 0.7, 0.1, 0.3) == 0.1
        assert map_range(0.7, 0.1, 0.7, 0.1, 0.3) == 0.3
    
    def test_midpoint(self):
        assert map_range(200, 100, 300, 48, 72) == 60.0
        assert map_range(5, 0, 10, 0, 100) == 50.0
    
    def test_degenerate_source_range(self):
        """A single-valued source range falls back to target_min."""
        assert map_range(5, 5, 5, 10, 20) == 10
        assert map_range(1234.5, 5, 5, 10, 20) == 10
        assert map_range(-3, 5, 5, 10, 20) == 10
        
        result = map_range(7, 7, 7, 48, 72)
        assert np.isfinite(result)
    
    def test_degenerate_target_range(self):
        assert map_range(3, 0, 10, 60, 60) == 60
    
    def test_clamping_above_and_below(self):
        """Out-of-range values are clamped to the target range."""
        assert map_range(1010, 0, 10, 0, 100) == 100
        assert map_range(-50, 0, 10, 0, 100) == 0
        assert map_range(10.0000001, 0, 10, 48, 72) == 72
    
    def test_monotonic_non_decreasing(self):
        """Larger values never map to lower outputs."""
        values = np.linspace(-3.7, 12.9, 501)
        mapped = [map_range(v, -3.7, 12.9, 21, 108) for v in values]
        assert all(b >= a for a, b in zip(mapped, mapped[1:]))
    
    def test_deterministic(self):
        assert map_range(0.123, 0, 1, 48, 84) == map_range(0.123, 0, 1, 48, 84)
    
    def test_scalar_return_type(self):
        result = map_range(2, 0, 4, 0, 1)
        assert isinstance(result, float)
        assert not isinstance(result, np.ndarray)
    
    def test_array_input(self):
        values = np.array([100.0, 200.0, 300.0, 400.0])
        mapped = map_range(values, 100, 300, 48, 72)
        
        assert isinstance(mapped, np.ndarray)
        np.testing.assert_allclose(mapped, [48.0, 60.0, 72.0, 72.0])
    
    def test_inverted_ranges_rejected(self):
        with pytest.raises(MappingError, match="Source range"):
            map_range(1, 10, 0, 0, 1)
        with pytest.raises(MappingError, match="Target range"):
            map_range(1, 0, 10, 72, 48)
    
    def test_nan_bounds_rejected(self):
        with pytest.raises(MappingError):
            map_range(1, float('nan'), 10, 0, 1)
        with pytest.raises(MappingError, match="finite"):
            map_range(1, 0, float('inf'), 0, 1)
    
    def test_huge_source_span_does_not_overflow(self):
        assert map_range(1e308, -1e308, 1e308, 48, 72) == 72.0
        assert map_range(-1e308, -1e308, 1e308, 48, 72) == 48.0
        assert map_range(0.0, -1e308, 1e308, 48, 72) == 60.0
    
    def test_huge_target_span_does_not_overflow(self):
        assert map_range(5, 0, 10, -1e308, 1e308) == 0.0
        assert map_range(10, 0, 10, -1e308, 1e308) == 1e308
    
    def test_infinite_values_clamp(self):
        mapped = map_range(np.array([float('-inf'), float('inf')]), 0, 10, 60, 60)
        np.testing.assert_array_equal(mapped, [60.0, 60.0])
        assert map_range(float('inf'), 0, 10, 48, 72) == 72.0


class TestLogMapRange:
    """Test logarithmic (frequency) range mapping."""
    
    def test_endpoints(self):
        assert log_map_range(0, 0, 1, 10, 100) == 10
        assert log_map_range(1, 0, 1, 10, 100) == 100
    
    def test_midpoint_is_geometric_mean(self):
        assert abs(log_map_range(0.5, 0, 1, 10, 1000) - 100.0) < 1e-9
    
    def test_degenerate_and_clamping(self):
        assert log_map_range(42, 3, 3, 220, 880) == 220
        assert log_map_range(5, 0, 1, 220, 880) == 880
        assert log_map_range(-5, 0, 1, 220, 880) == 220
    
    def test_non_positive_target_rejected(self):
        with pytest.raises(MappingError, match="positive"):
            log_map_range(0.5, 0, 1, 0, 100)


class TestRangeMapper:
    """Test the fitted range mapper object."""
    
    def test_fit_uses_min_and_max(self):
        mapper = RangeMapper(48, 72).fit([300, 100, 200])
        
        assert mapper.is_fitted
        assert mapper.source_range == (100.0, 300.0)
        assert mapper.map(200) == 60.0
    
    def test_refit_replaces_source_range(self):
        mapper = RangeMapper(0, 1).fit([0, 10])
        mapper.fit([50, 60])
        
        assert mapper.source_range == (50.0, 60.0)
        assert mapper.map(55) == 0.5
    
    def test_single_value_dataset(self):
        mapper = RangeMapper(48, 72).fit([42.0])
        assert mapper.map(42.0) == 48
    
    def test_unfitted_map_raises(self):
        mapper = RangeMapper(48, 72)
        assert mapper.source_range is None
        with pytest.raises(MappingError, match="fit"):
            mapper.map(1.0)
    
    def test_fit_rejects_empty_and_non_finite(self):
        with pytest.raises(MappingError):
            RangeMapper(48, 72).fit([])
        with pytest.raises(MappingError):
            RangeMapper(48, 72).fit([1.0, float('nan')])
        with pytest.raises(MappingError, match="infinite"):
            RangeMapper(48, 72).fit([1.0, 2.0, float('inf')])
    
    def test_explicit_source_range(self):
        mapper = RangeMapper(0, 100, source_min=0, source_max=10)
        assert mapper.map(2.5) == 25.0
    
    def test_inverted_target_rejected(self):
        with pytest.raises(MappingError):
            RangeMapper(72, 48)
