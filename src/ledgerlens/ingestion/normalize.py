# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Value normalization for free-form cells.

Every numeric, date and month field read from a parsed record goes through
one of these helpers, so "1,234.56" and "$950" become 1234.56 and 950 in
exactly one place and unparsable input degrades to 0 or "absent".
"""

from __future__ import annotations

import math
import re
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

_CURRENCY_NOISE = re.compile(r"[$,]")
_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def to_number(value: Any) -> float:
    """
    Coerce a currency/number cell to float.

    Strips dollar signs and thousands separators, then reads the leading
    numeric part of the text. Absent, unparsable and non-finite values
    become 0.

    Example:
        ```python
        to_number("$1,234.56")  # 1234.56
        to_number("abc")        # 0.0
        to_number(None)         # 0.0
        ```
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    cleaned = _CURRENCY_NOISE.sub("", str(value)).strip()
    match = _LEADING_FLOAT.match(cleaned)
    if match is None:
        return 0.0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def parse_date(value: Optional[str]) -> Optional[pd.Timestamp]:
    """
    Parse a date/time cell into a naive timestamp.

    Timezone-aware values are converted to UTC first so that every parsed
    timestamp is comparable. Blank or unparsable text returns None.
    """
    if not value:
        return None
    try:
        stamp = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if stamp is None or pd.isna(stamp):
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC").tz_localize(None)
    return stamp


def month_key(value: Optional[str]) -> str:
    """Truncate a date-like text to its "YYYY-MM" month key ("" when blank)."""
    return value[:7] if value else ""


def first_present(record: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    """Value of the first key present in the record, even if empty."""
    for key in keys:
        if key in record:
            return record[key]
    return None


def first_non_empty(record: Mapping[str, str], keys: Sequence[str], default: str = "") -> str:
    """Value of the first key holding non-empty text."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return default
