# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens Analysis Engine

Rollups, derived member metrics and the pipeline entry points.
"""

from .metrics import (
    DerivedMemberView,
    as_timestamp,
    balance_growth_rate,
    compute_member_view,
    compute_member_views,
    length_of_stay_days,
    membership_status,
    safe_ratio,
    vs_property_average,
)
from .rollup import (
    PropertyMonthKey,
    PropertyMonthRollup,
    PropertySeries,
    PropertyTimeSeries,
    RollupCell,
    RoomMonthKey,
    SummaryMonthTotals,
    SummaryTotals,
    build_property_series,
    summarize_months,
    summary_frame,
)
from .results import DashboardResult
from .api import analyze, run

__all__ = [
    # Main API functions
    "analyze",
    "run",
    # Results
    "DashboardResult",
    "DerivedMemberView",
    # Metrics
    "as_timestamp",
    "balance_growth_rate",
    "compute_member_view",
    "compute_member_views",
    "length_of_stay_days",
    "membership_status",
    "safe_ratio",
    "vs_property_average",
    # Rollups
    "PropertyMonthKey",
    "PropertyMonthRollup",
    "PropertySeries",
    "PropertyTimeSeries",
    "RollupCell",
    "RoomMonthKey",
    "SummaryMonthTotals",
    "SummaryTotals",
    "build_property_series",
    "summarize_months",
    "summary_frame",
]
