# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ingestion: raw CSV text to normalized records.
"""

from . import columns
from .normalize import first_non_empty, first_present, month_key, parse_date, to_number
from .parser import TabularRecord, parse_csv, split_rows
from .sources import DataSources

__all__ = [
    "columns",
    "DataSources",
    "TabularRecord",
    "parse_csv",
    "split_rows",
    "to_number",
    "parse_date",
    "month_key",
    "first_present",
    "first_non_empty",
]
