# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Member KPI table.

Search, sort and rank derived member views, and flatten them into a pandas
DataFrame for tabular display or export.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, List, Optional, Sequence

import pandas as pd

from ..analysis.metrics import DerivedMemberView

DATE_FIELDS = frozenset(
    {"earliest_activity_date", "latest_activity_date", "latest_billed_date"}
)
SEARCH_FIELDS = ("name", "member_id", "market", "room_id")

MEMBER_COLUMNS = [f.name for f in fields(DerivedMemberView) if f.name != "ledger"]


@dataclass(frozen=True)
class BarItem:
    """One labelled bar of a ranked member chart."""

    label: str
    value: float


def members_to_frame(views: Sequence[DerivedMemberView]) -> pd.DataFrame:
    """
    Flatten member views into a DataFrame indexed by member id.

    Membership status is stored as its text value; absent dates become NaT.
    """
    rows = []
    for view in views:
        row = {column: getattr(view, column) for column in MEMBER_COLUMNS}
        row["membership_status"] = view.membership_status.value
        rows.append(row)

    frame = pd.DataFrame(rows, columns=MEMBER_COLUMNS)
    for column in DATE_FIELDS:
        frame[column] = pd.to_datetime(frame[column])
    return frame.set_index("member_id")


def search_members(views: Sequence[DerivedMemberView], query: str) -> List[DerivedMemberView]:
    """Case-insensitive substring match on name, member id, market and room id."""
    normalized = (query or "").strip().lower()
    if not normalized:
        return list(views)
    return [
        view
        for view in views
        if normalized in " ".join(getattr(view, name) for name in SEARCH_FIELDS).lower()
    ]


def _sort_value(key: str, value: Any) -> Any:
    if key in DATE_FIELDS:
        return value.value if value is not None else 0
    if isinstance(value, Enum):
        return str(value.value).casefold()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return str(value).casefold()


def sort_members(
    views: Sequence[DerivedMemberView],
    key: str,
    descending: Optional[bool] = None,
) -> List[DerivedMemberView]:
    """
    Stable sort of member views by one field.

    Dates sort by timestamp (absent dates as the epoch), numbers numerically,
    everything else by case-folded text. Without an explicit direction,
    names sort ascending and every other field descending.

    Raises:
        ValueError: ``key`` is not a member view field
    """
    if key not in MEMBER_COLUMNS:
        raise ValueError(f"Unknown member field: {key}")
    if descending is None:
        descending = key != "name"
    return sorted(
        views,
        key=lambda view: _sort_value(key, getattr(view, key)),
        reverse=descending,
    )


def top_members(
    views: Sequence[DerivedMemberView], by: str, limit: int
) -> List[DerivedMemberView]:
    """The ``limit`` members with the largest ``by`` value."""
    return sort_members(views, by, descending=True)[:limit]


def member_bar_items(views: Sequence[DerivedMemberView], limit: int) -> List[BarItem]:
    """Top members by host earnings as labelled bars."""
    return [
        BarItem(label=view.display_name, value=view.host_total)
        for view in top_members(views, "host_total", limit)
    ]
