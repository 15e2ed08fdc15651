"""Cell cleaning for exported spreadsheets."""
import re
from datetime import date, time
from typing import Dict, List, Optional

import pandas as pd

from crewsched.utils.fuzzy import map_headers

TRUE_VALUES = {"true", "t", "yes", "y", "1", "active"}
FALSE_VALUES = {"false", "f", "no", "n", "0", "inactive"}


def clean_text(value) -> Optional[str]:
    """Strip a cell to text; NaN, None and blanks become None."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def clean_float(value) -> Optional[float]:
    """
    Extract a number from a cell ("1,250", "150 LF", 12.5).

    Returns:
        Float value, or None when the cell holds no number
    """
    text = clean_text(value)
    if text is None:
        return None
    match = re.search(r'-?\d+(?:\.\d+)?', text.replace(",", ""))
    if not match:
        return None
    return float(match.group(0))


def clean_bool(value, default: bool = True) -> bool:
    text = clean_text(value)
    if text is None:
        return default
    lowered = text.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    return default


def split_ids(value) -> List[str]:
    """Split a list cell on ';' or ',' ("t1; t2" -> ["t1", "t2"])."""
    text = clean_text(value)
    if text is None:
        return []
    return [part.strip() for part in re.split(r'[;,]', text) if part.strip()]


def resolve_headers(df: pd.DataFrame, expected: Dict[str, List[str]], required: List[str]) -> Dict[str, Optional[str]]:
    """
    Map expected fields onto the DataFrame's columns.

    Raises:
        ValueError: If the frame is empty or a required field has no column
    """
    if df.empty:
        raise ValueError("Input file is empty")

    header_map = map_headers(expected, [str(c) for c in df.columns])
    missing = [field for field in required if not header_map.get(field)]
    if missing:
        raise ValueError(f"Missing required headers: {missing}")
    return header_map


def cell(row: pd.Series, header_map: Dict[str, Optional[str]], field: str):
    """Raw value of a mapped field in a row (None when the field is unmapped)."""
    header = header_map.get(field)
    if not header:
        return None
    return row.get(header)


def clean_date(value) -> Optional[date]:
    """Parse a date cell ("2025-01-14", "1/14/2025"); unparseable cells become None."""
    text = clean_text(value)
    if text is None:
        return None
    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def clean_time(value) -> Optional[time]:
    """Parse a time-of-day cell ("9:00", "09:30:00"); other content becomes None."""
    text = clean_text(value)
    if text is None:
        return None
    match = re.fullmatch(r'(\d{1,2}):(\d{2})(?::(\d{2}))?', text)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)
