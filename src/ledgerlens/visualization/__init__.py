# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens Visualization Helpers

Chart geometry and statistics backing the dashboard's stacked-area and
scatter views. Renderer-agnostic: every function returns numbers and
coordinates, never drawing objects.
"""

from .stacking import (
    AxisScale,
    ChartSeries,
    StackedArea,
    StackedAreaChart,
    axis_scale,
    build_stacked_areas,
    build_stacked_chart,
    month_ticks,
    scale_line,
    select_tick_step,
    stacked_totals,
)
from .statistics import as_numeric, finite_pairs, pearson_correlation, scatter_points

__all__ = [
    # Stacked areas
    "AxisScale",
    "ChartSeries",
    "StackedArea",
    "StackedAreaChart",
    "axis_scale",
    "build_stacked_areas",
    "build_stacked_chart",
    "month_ticks",
    "scale_line",
    "select_tick_step",
    "stacked_totals",
    # Statistics
    "as_numeric",
    "finite_pairs",
    "pearson_correlation",
    "scatter_points",
]
