"""
I/O module.

Load the numeric columns of CSV datasets.
"""

from .dataset import (
    Record, load_records, filter_by_key, sort_records, aggregate_records,
    parse_date, select_records, load_values
)

__all__ = [
    "Record",
    "load_records",
    "filter_by_key",
    "sort_records",
    "aggregate_records",
    "parse_date",
    "select_records",
    "load_values"
]
