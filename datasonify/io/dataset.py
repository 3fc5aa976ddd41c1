"""
CSV dataset loading.

Reads one numeric column (plus optional label and key columns) from a CSV
file and prepares the slice to sonify: filtering a key column to a range,
sorting, and keeping the first N rows.
"""

import csv
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..exceptions import DatasetError
from ..logger import get_logger

logger = get_logger(__name__)

LABEL_SEPARATOR = " - "
SORT_ORDERS = ("asc", "desc")
PERIODS = ("month", "year")
MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
DATE_FORMATS = ("%m/%d/%Y", "%d.%m.%Y", "%Y/%m/%d")


@dataclass(frozen=True)
class Record:
    """One CSV row reduced to what sonification needs."""
    value: float
    label: str = ""
    key: Optional[float] = None


def _parse_number(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    text = raw.strip().replace(",", "")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    # "nan" and "inf" parse as floats but are not observations
    return number if math.isfinite(number) else None


def _check_columns(fieldnames: Sequence[str], required: Sequence[str], path: Path) -> None:
    missing = [c for c in required if c not in fieldnames]
    if missing:
        raise DatasetError(
            f"Column(s) {', '.join(missing)} not found in {path}; "
            f"available: {', '.join(fieldnames)}"
        )


def load_records(csv_path: Union[str, Path], value_column: str,
                 label_columns: Sequence[str] = (),
                 key_column: Optional[str] = None) -> List[Record]:
    """
    Load numeric records from a CSV file.
    
    Rows whose value (or key, when a key column is given) is blank or not
    numeric are skipped with a warning. Thousands separators are accepted.
    Several label columns are joined with " - " (e.g. "Ferrari - F50").
    
    Args:
        csv_path: Path to a CSV file with a header row
        value_column: Column holding the values to sonify
        label_columns: Columns combined into each record's label
        key_column: Numeric column used for range filtering (e.g. year)
        
    Returns:
        Records in file order
        
    Raises:
        DatasetError: If the file is missing, has no header, or lacks a column
    """
    path = Path(csv_path)
    if not path.exists():
        raise DatasetError(f"Dataset file not found: {path}")
    
    logger.debug(f"Loading column '{value_column}' from {path}")
    
    required = [value_column, *label_columns]
    if key_column:
        required.append(key_column)
    
    records = []
    skipped = 0
    with open(path, newline='', encoding='utf-8-sig') as f:
        reader = csv.DictReader(f)
        if not reader.fieldnames:
            raise DatasetError(f"Dataset file has no header row: {path}")
        fieldnames = [name.strip() for name in reader.fieldnames]
        reader.fieldnames = fieldnames
        _check_columns(fieldnames, required, path)
        
        for row in reader:
            value = _parse_number(row.get(value_column))
            key = _parse_number(row.get(key_column)) if key_column else None
            if value is None or (key_column and key is None):
                skipped += 1
                continue
            
            label = LABEL_SEPARATOR.join((row.get(c) or "").strip() for c in label_columns)
            records.append(Record(value=value, label=label, key=key))
    
    if skipped:
        logger.warning(f"Skipped {skipped} rows with missing or non-numeric values in {path}")
    logger.debug(f"Loaded {len(records)} records from {path}")
    return records


def filter_by_key(records: Sequence[Record], start: Optional[float] = None,
                  end: Optional[float] = None) -> List[Record]:
    """Keep records whose key lies in the inclusive range [start, end]."""
    if start is not None and end is not None and start > end:
        raise DatasetError(f"Filter range is inverted: {start} > {end}")
    
    selected = []
    for record in records:
        if record.key is None:
            continue
        if start is not None and record.key < start:
            continue
        if end is not None and record.key > end:
            continue
        selected.append(record)
    return selected


def sort_records(records: Sequence[Record], order: str = "asc") -> List[Record]:
    """Stable sort by value, ascending or descending."""
    if order not in SORT_ORDERS:
        raise DatasetError(f"Sort order must be one of {SORT_ORDERS}, got '{order}'")
    return sorted(records, key=lambda r: r.value, reverse=(order == "desc"))


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


AGGREGATIONS: Dict[str, Callable[[List[float]], float]] = {
    "sum": sum,
    "mean": _mean,
    "count": len,
    "min": min,
    "max": max,
}


def parse_date(text: str) -> datetime:
    """
    Parse an ISO date (optionally with a time) or one of a few common
    day-first and month-first layouts.
    
    Raises:
        DatasetError: If text matches none of them
    """
    text = text.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise DatasetError(f"Unrecognized date '{text}'")


def _period_of(label: str, period: str) -> Tuple[int, str]:
    date = parse_date(label)
    if period == "month":
        return date.month, MONTH_NAMES[date.month - 1]
    return date.year, str(date.year)


def aggregate_records(records: Sequence[Record], how: str = "sum",
                      period: Optional[str] = None) -> List[Record]:
    """
    Combine records that share a label into one record per label.
    
    Groups keep the order in which their label first appears. With a
    ``period`` the labels are read as dates and grouped by calendar month
    or year instead; groups are then ordered chronologically, labelled
    "Jan".."Dec" or by year, and keyed by the month or year number.
    
    Args:
        records: Records to group, usually loaded with the group column as label
        how: One of "sum", "mean", "count", "min", "max"
        period: None, "month" or "year"
        
    Returns:
        One record per group
        
    Raises:
        DatasetError: On an unknown aggregation or period, or an unparseable date
    """
    if how not in AGGREGATIONS:
        raise DatasetError(f"Aggregation must be one of {', '.join(AGGREGATIONS)}, got '{how}'")
    if period is not None and period not in PERIODS:
        raise DatasetError(f"Period must be one of {', '.join(PERIODS)}, got '{period}'")
    
    groups: Dict[str, List[Record]] = {}
    order: Dict[str, float] = {}
    for record in records:
        if period is None:
            label = record.label
            order.setdefault(label, len(order))
        else:
            number, label = _period_of(record.label, period)
            order[label] = number
        groups.setdefault(label, []).append(record)
    
    combine = AGGREGATIONS[how]
    aggregated = []
    for label in sorted(groups, key=order.__getitem__):
        members = groups[label]
        key = float(order[label]) if period else members[0].key
        aggregated.append(Record(value=float(combine([r.value for r in members])),
                                 label=label, key=key))
    
    logger.debug(f"Aggregated {len(records)} records into {len(aggregated)} groups ({how})")
    return aggregated


def select_records(csv_path: Union[str, Path], value_column: str,
                   label_columns: Sequence[str] = (),
                   key_column: Optional[str] = None,
                   start: Optional[float] = None,
                   end: Optional[float] = None,
                   order: Optional[str] = None,
                   top: Optional[int] = None,
                   group_by: Optional[str] = None,
                   aggregate: str = "sum",
                   period: Optional[str] = None) -> List[Record]:
    """
    Load records and apply filter, grouping, sort and top-N in that order.
    
    With ``group_by`` the rows are labelled by that column and combined
    with :func:`aggregate_records` (e.g. raw sales rows summed per month).
    
    Raises:
        DatasetError: On loading errors or invalid slice options
    """
    if (start is not None or end is not None) and not key_column:
        raise DatasetError("A key column is required to filter by range")
    if top is not None and top < 0:
        raise DatasetError(f"Top-N must be non-negative, got {top}")
    if group_by:
        if label_columns:
            raise DatasetError("Grouped records are labelled by the group column; drop the label columns")
        label_columns = [group_by]
    elif period is not None:
        raise DatasetError("A group column is required to group by period")
    
    records = load_records(csv_path, value_column, label_columns, key_column)
    if key_column and (start is not None or end is not None):
        records = filter_by_key(records, start, end)
    if group_by:
        records = aggregate_records(records, aggregate, period)
    if order:
        records = sort_records(records, order)
    if top is not None:
        records = records[:top]
    return records


def load_values(csv_path: Union[str, Path], value_column: str, **options) -> List[float]:
    """Values of :func:`select_records`, for feeding a session directly."""
    return [r.value for r in select_records(csv_path, value_column, **options)]
