# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Resilient delimited-text parser.

A single left-to-right scan over the raw text that understands double-quote
delimited fields (a quoted field may span separators and line breaks; a
doubled quote inside it stands for one literal quote), treats both ``\\n`` and
``\\r\\n`` as one record boundary, and never raises on malformed input:
offending rows are dropped instead.

The first row is the header. Each remaining row becomes an immutable
mapping from trimmed header name to trimmed cell text, in column order.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Mapping

logger = logging.getLogger(__name__)

TabularRecord = Mapping[str, str]

QUOTE = '"'
SEPARATOR = ","
BOM = "\ufeff"


def split_rows(text: str) -> List[List[str]]:
    """
    Split raw text into rows of untrimmed cells.

    Rows whose cells are all empty (blank lines) are dropped here. Quotes
    only toggle the quoted state and are never part of the cell text, except
    for a doubled quote inside a quoted field which yields one literal quote.

    Args:
        text: Raw delimited text

    Returns:
        List of rows, each a list of cell strings
    """
    rows: List[List[str]] = []
    row: List[str] = []
    current: List[str] = []
    in_quotes = False
    length = len(text)
    i = 0

    while i < length:
        char = text[i]

        if char == QUOTE:
            if in_quotes and i + 1 < length and text[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes and char == SEPARATOR:
            row.append("".join(current))
            current = []
            i += 1
            continue

        if not in_quotes and (char == "\n" or char == "\r"):
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            row.append("".join(current))
            if any(cell for cell in row):
                rows.append(row)
            row = []
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    # Final row without a trailing line break
    if current or row:
        row.append("".join(current))
        if any(cell for cell in row):
            rows.append(row)

    return rows


def parse_csv(text: str) -> List[TabularRecord]:
    """
    Parse delimited text into a list of records.

    Args:
        text: Raw CSV text; None or empty text yields no records

    Returns:
        One read-only mapping per kept data row. Rows with fewer than two
        cells are dropped; columns missing from a short row map to "".

    Example:
        ```python
        records = parse_csv('Member ID,Amount\\nM1,"1,250.00"\\n')
        records[0]["Amount"]  # '1,250.00'
        ```
    """
    if not text:
        return []

    # Drop a leading UTF-8 byte order mark
    rows = split_rows(text.lstrip(BOM))
    if not rows:
        return []

    headers = [header.strip() for header in rows[0]]
    records: List[TabularRecord] = []
    dropped = 0

    for cells in rows[1:]:
        if len(cells) < 2:
            dropped += 1
            continue
        record = {}
        for index, header in enumerate(headers):
            record[header] = cells[index].strip() if index < len(cells) else ""
        records.append(MappingProxyType(record))

    logger.debug(
        f"Parsed {len(records)} records with {len(headers)} columns "
        f"({dropped} short rows dropped)"
    )
    return records
