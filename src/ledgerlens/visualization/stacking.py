# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Stacked-area chart geometry.

Pure functions over already-aggregated series: cumulative stacking, the
shared y-axis scale, closed polygons in plot coordinates, the scaled overlay
line, and thinned month ticks. Nothing here draws; a renderer turns the
returned coordinates into paths.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.primitives import GlobalSettings

Point = Tuple[float, float]


@dataclass(frozen=True)
class ChartSeries:
    """One stackable series: a value per month index."""

    key: str
    label: str
    values: Tuple[float, ...]
    color: str = ""


@dataclass(frozen=True)
class StackedArea:
    """
    Geometry of one stacked series.

    Attributes:
        top: Running sum of all series up to and including this one
        bottom: top minus this series' own values
        polygon: Closed outline in plot coordinates, top left to right then
            bottom right to left
    """

    key: str
    label: str
    color: str
    top: Tuple[float, ...]
    bottom: Tuple[float, ...]
    polygon: Tuple[Point, ...]


@dataclass(frozen=True)
class AxisScale:
    """Y-axis tick step, ceiling and tick values (0 through ceiling)."""

    step: float
    ceiling: float
    ticks: Tuple[float, ...]


@dataclass(frozen=True)
class StackedAreaChart:
    """Everything a renderer needs for one stacked-area chart."""

    areas: Tuple[StackedArea, ...]
    scale: AxisScale
    x_ticks: Tuple[Tuple[int, str], ...]
    line: Tuple[Point, ...] = ()


def _values_matrix(series: Sequence[ChartSeries]) -> np.ndarray:
    lengths = {len(item.values) for item in series}
    if len(lengths) > 1:
        raise ValueError(f"All series must have the same number of points, got {sorted(lengths)}")
    return np.array([item.values for item in series], dtype=float)


def stacked_totals(series: Sequence[ChartSeries]) -> np.ndarray:
    """Sum of all series per month index (empty for no series)."""
    if not series:
        return np.zeros(0)
    return _values_matrix(series).sum(axis=0)


def _x(index: int, points: int, width: float) -> float:
    return index / max(1, points - 1) * width


def _y(value: float, scale_max: float, height: float) -> float:
    return height - value / scale_max * height


def build_stacked_areas(
    series: Sequence[ChartSeries],
    width: float,
    height: float,
    scale_max: Optional[float],
) -> List[StackedArea]:
    """
    Stack series bottom-up in the given order.

    Args:
        series: Series to stack; all the same length
        width: Plot width; the first point sits at x=0, the last at x=width
        height: Plot height; y=height is the baseline
        scale_max: Value mapped to the top of the plot (at least 1)

    Returns:
        One StackedArea per series; empty when there are no series
    """
    if not series:
        return []

    values = _values_matrix(series)
    tops = np.cumsum(values, axis=0)
    bottoms = tops - values
    points = values.shape[1]
    ceiling = max(scale_max or 1, 1)

    areas = []
    for item, top, bottom in zip(series, tops, bottoms):
        outline = [(_x(i, points, width), _y(v, ceiling, height)) for i, v in enumerate(top)]
        outline.extend(
            (_x(i, points, width), _y(bottom[i], ceiling, height))
            for i in reversed(range(points))
        )
        areas.append(
            StackedArea(
                key=item.key,
                label=item.label,
                color=item.color,
                top=tuple(float(v) for v in top),
                bottom=tuple(float(v) for v in bottom),
                polygon=tuple(outline),
            )
        )
    return areas


def select_tick_step(max_total: float, settings: Optional[GlobalSettings] = None) -> float:
    """Round tick step for the chart's largest stacked total."""
    charts = (settings or GlobalSettings()).charts
    small, medium, large = charts.tick_steps
    limit = charts.tick_step_breakpoint
    if max_total <= limit:
        return small
    if max_total <= limit * 3:
        return medium
    return large


def axis_scale(max_total: float, settings: Optional[GlobalSettings] = None) -> AxisScale:
    """Smallest multiple of the tick step that covers ``max_total``."""
    step = select_tick_step(max_total, settings)
    ceiling = math.ceil(max_total / step) * step
    count = int(round(ceiling / step))
    return AxisScale(
        step=step,
        ceiling=float(ceiling),
        ticks=tuple(float(i * step) for i in range(count + 1)),
    )


def scale_line(
    values: Sequence[float], width: float, height: float, scale_max: float
) -> List[Point]:
    """Overlay line points using the same scale as the stacked areas."""
    ceiling = max(scale_max or 1, 1)
    return [(_x(i, len(values), width), _y(v, ceiling, height)) for i, v in enumerate(values)]


def month_ticks(months: Sequence[str], max_ticks: int = 10) -> List[Tuple[int, str]]:
    """Every n-th month so at most ``max_ticks`` (plus the last month) are labelled."""
    if not months:
        return []
    step = max(1, math.ceil(len(months) / max_ticks))
    last = len(months) - 1
    return [(i, month) for i, month in enumerate(months) if i % step == 0 or i == last]


def build_stacked_chart(
    series: Sequence[ChartSeries],
    months: Sequence[str],
    line_values: Optional[Sequence[float]] = None,
    width: float = 576,
    height: float = 180,
    settings: Optional[GlobalSettings] = None,
) -> StackedAreaChart:
    """
    Full stacked-area geometry: scale from the largest stacked total, areas,
    x ticks and the optional overlay line.
    """
    settings = settings or GlobalSettings()
    totals = stacked_totals(series)
    max_total = max(float(totals.max()) if totals.size else 1.0, 1.0)
    scale = axis_scale(max_total, settings)

    areas = build_stacked_areas(series, width, height, scale.ceiling)
    line: List[Point] = []
    if line_values is not None and len(line_values):
        line = scale_line(line_values, width, height, scale.ceiling)

    return StackedAreaChart(
        areas=tuple(areas),
        scale=scale,
        x_ticks=tuple(month_ticks(months, settings.charts.max_x_ticks)),
        line=tuple(line),
    )
