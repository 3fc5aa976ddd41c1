"""
Unit tests for threshold band mapping.
"""

import pytest

from datasonify.mapping import CategoricalMapper, parse_bands
from datasonify.exceptions import MappingError


@pytest.fixture
def volcano_mapper():
    return CategoricalMapper([(1000, 400.0), (3000, 200.0)], default=800.0)


class TestCategoricalMapper:
    
    def test_bands_checked_from_highest_threshold(self, volcano_mapper):
        """Order of the given bands does not matter."""
        assert volcano_mapper.map(3776) == 200.0
        assert volcano_mapper.map(1592) == 400.0
        assert volcano_mapper.map(758) == 800.0
    
    def test_thresholds_are_strict(self, volcano_mapper):
        assert volcano_mapper.map(3000) == 400.0
        assert volcano_mapper.map(1000) == 800.0
    
    def test_no_bands_uses_default(self):
        assert CategoricalMapper([], default="low").map(1e9) == "low"
    
    def test_duplicate_thresholds_rejected(self):
        with pytest.raises(MappingError, match="Duplicate"):
            CategoricalMapper([(10, 1), (10, 2)], default=0)
    
    def test_len_counts_default(self, volcano_mapper):
        assert len(volcano_mapper) == 3


class TestParseBands:
    
    def test_valid_specs(self):
        assert parse_bands(["3000=200", "1000=400.5"]) == [(3000.0, 200.0), (1000.0, 400.5)]
    
    def test_missing_separator(self):
        with pytest.raises(MappingError, match="THRESHOLD=OUTPUT"):
            parse_bands(["3000:200"])
    
    def test_non_numeric(self):
        with pytest.raises(MappingError, match="two numbers"):
            parse_bands(["high=200"])
