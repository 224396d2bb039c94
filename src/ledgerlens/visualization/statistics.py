# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Statistics for ad-hoc bivariate plots of member metrics.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Sequence, Tuple

import numpy as np
import pandas as pd


def as_numeric(value: Any) -> float:
    """
    Numeric plotting value of a field.

    Timestamps and dates become epoch milliseconds; numbers pass through;
    everything else (None, text, enums) is NaN and drops out of the plot.
    """
    if value is None or isinstance(value, (bool, Enum)):
        return math.nan
    if isinstance(value, (pd.Timestamp, datetime, date)):
        stamp = pd.Timestamp(value)
        if pd.isna(stamp):
            return math.nan
        return stamp.value / 1_000_000
    if isinstance(value, (int, float, np.number)):
        return float(value)
    return math.nan


def finite_pairs(x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Keep only positions where both x and y are finite numbers."""
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    if xs.shape != ys.shape:
        raise ValueError(f"x and y must have equal length, got {xs.size} and {ys.size}")
    mask = np.isfinite(xs) & np.isfinite(ys)
    return xs[mask], ys[mask]


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two equal-length arrays.

    Computed as (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²)) over the
    finite pairs only. Fewer than two pairs, or a zero denominator (either
    side constant), gives 0.
    """
    xs, ys = finite_pairs(x, y)
    n = xs.size
    if n < 2:
        return 0.0

    sum_x = xs.sum()
    sum_y = ys.sum()
    numerator = n * (xs * ys).sum() - sum_x * sum_y
    spread = (n * (xs * xs).sum() - sum_x * sum_x) * (n * (ys * ys).sum() - sum_y * sum_y)
    if spread <= 0:
        return 0.0
    return float(numerator / math.sqrt(spread))


def scatter_points(
    views: Sequence[Any], x_field: str, y_field: str
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Finite (x, y) pairs of two fields across member views.

    Example:
        ```python
        xs, ys = scatter_points(results.members, "length_of_stay_days", "balance")
        r = pearson_correlation(xs, ys)
        ```
    """
    xs = [as_numeric(getattr(view, x_field)) for view in views]
    ys = [as_numeric(getattr(view, y_field)) for view in views]
    return finite_pairs(xs, ys)
