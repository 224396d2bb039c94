# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Property and time-series rollups.

Two independent aggregations live here:

1. SUMMARY ROLLUP (summary stream)
   Month totals, grand totals, and one gross/host series per property aligned
   to a shared, sorted month axis for stacked-area charting.

2. PEER ROLLUP (collected stream)
   Per property-month sum and count of per-room collected totals. Its only
   consumer is the member metrics pass, which compares each member's monthly
   collections with the average room of the same property and month.

Both are keyed by explicit composite key types rather than joined strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

import pandas as pd

from ..core.primitives import GlobalSettings
from ..ingestion import columns as cols
from ..ingestion.normalize import first_non_empty, first_present, month_key, to_number
from ..ingestion.parser import TabularRecord

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["month", "property_key", "label", "gross", "host", "fees"]


# =============================================================================
# Composite keys
# =============================================================================


class PropertyMonthKey(NamedTuple):
    property_id: str
    month: str


class RoomMonthKey(NamedTuple):
    property_id: str
    month: str
    room_id: str

    @property
    def property_month(self) -> PropertyMonthKey:
        return PropertyMonthKey(self.property_id, self.month)


# =============================================================================
# Peer rollup (collected stream)
# =============================================================================


@dataclass
class RollupCell:
    """Sum and count of room totals for one property-month."""

    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> Optional[float]:
        return self.total / self.count if self.count else None


@dataclass
class PropertyMonthRollup:
    """
    Per property-month peer statistics built from the collections ledger.

    Collected rows are first summed per (property, month, room); each room
    total then counts once toward its property-month cell. Rows without a
    month or a room id do not participate.
    """

    cells: Dict[PropertyMonthKey, RollupCell] = field(default_factory=dict)

    @classmethod
    def from_collected(cls, records: Iterable[TabularRecord]) -> "PropertyMonthRollup":
        room_totals: Dict[RoomMonthKey, float] = {}
        for record in records:
            month = month_key(first_non_empty(record, cols.COLLECTED_MONTH))
            room_id = record.get(cols.ROOM_ID, "")
            if not month or not room_id:
                continue
            key = RoomMonthKey(record.get(cols.PROPERTY_ID, ""), month, room_id)
            gross = to_number(first_present(record, cols.COLLECTED_GROSS))
            room_totals[key] = room_totals.get(key, 0.0) + gross

        rollup = cls()
        for key, total in room_totals.items():
            cell = rollup.cells.setdefault(key.property_month, RollupCell())
            cell.total += total
            cell.count += 1

        logger.debug(
            f"Peer rollup: {len(room_totals)} room-months in {len(rollup.cells)} property-months"
        )
        return rollup

    def peer_average(self, property_id: str, month: str) -> Optional[float]:
        """Average room total for the property-month, or None when unknown."""
        cell = self.cells.get(PropertyMonthKey(property_id, month))
        return cell.average if cell is not None else None

    def __len__(self) -> int:
        return len(self.cells)


# =============================================================================
# Summary rollup (summary stream)
# =============================================================================


@dataclass(frozen=True)
class SummaryMonthTotals:
    """Gross, host and fee totals for one calendar month."""

    month: str
    gross: float
    host: float
    fees: float


@dataclass(frozen=True)
class SummaryTotals:
    """Totals across every month of the summary stream."""

    gross: float = 0.0
    host: float = 0.0
    fees: float = 0.0

    @property
    def net_rate(self) -> float:
        """Share of gross collections that reached the host."""
        return self.host / self.gross if self.gross else 0.0

    @classmethod
    def from_months(cls, months: Iterable[SummaryMonthTotals]) -> "SummaryTotals":
        gross = host = fees = 0.0
        for month in months:
            gross += month.gross
            host += month.host
            fees += month.fees
        return cls(gross=gross, host=host, fees=fees)


@dataclass(frozen=True)
class PropertySeries:
    """
    Gross and host totals of one property over the shared month axis.

    Attributes:
        key: Property id, else address, else the unknown-property label
        label: Display label taken from the property's first row
        color: Palette color assigned in first-seen order
        gross_values: Gross per month, 0 where the property had no activity
        host_values: Host earnings per month, aligned with gross_values
    """

    key: str
    label: str
    color: str
    gross_values: Tuple[float, ...]
    host_values: Tuple[float, ...]

    @property
    def total_gross(self) -> float:
        return float(sum(self.gross_values))


@dataclass(frozen=True)
class PropertyTimeSeries:
    """
    Property series aligned to one month axis, plus the all-property host line.

    Attributes:
        months: Sorted, deduplicated month keys across all properties
        series: Property series ordered by descending total gross
        host_by_month: Host earnings of all properties per month
    """

    months: Tuple[str, ...] = ()
    series: Tuple[PropertySeries, ...] = ()
    host_by_month: Tuple[float, ...] = ()


def summary_frame(
    records: Iterable[TabularRecord], settings: Optional[GlobalSettings] = None
) -> pd.DataFrame:
    """
    Normalize summary rows into a DataFrame.

    Rows without an earnings month are dropped. Fees are the absolute service
    fee plus the absolute transaction fee.
    """
    settings = settings or GlobalSettings()
    unknown = settings.ingestion.unknown_property_label

    rows = []
    skipped = 0
    for record in records:
        month = record.get(cols.EARNINGS_MONTH, "")
        if not month:
            skipped += 1
            continue
        property_id = first_non_empty(record, cols.SUMMARY_PROPERTY_ID)
        address = first_non_empty(record, cols.SUMMARY_ADDRESS)
        if address:
            label = address
        elif property_id:
            label = f"Property {property_id}"
        else:
            label = unknown
        rows.append(
            {
                "month": month,
                "property_key": property_id or address or unknown,
                "label": label,
                "gross": to_number(record.get(cols.GROSS_COLLECTED)),
                "host": to_number(record.get(cols.HOST_EARNINGS)),
                "fees": abs(to_number(record.get(cols.SERVICE_FEES)))
                + abs(to_number(record.get(cols.TRANSACTION_FEE))),
            }
        )

    if skipped:
        logger.warning(f"Ignored {skipped} summary rows without an earnings month")

    frame = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    return frame.astype({"gross": float, "host": float, "fees": float})


def summarize_months(frame: pd.DataFrame) -> List[SummaryMonthTotals]:
    """One totals record per month, sorted by month key ascending."""
    if frame.empty:
        return []
    grouped = frame.groupby("month", sort=True)[["gross", "host", "fees"]].sum()
    return [
        SummaryMonthTotals(
            month=str(month),
            gross=float(row["gross"]),
            host=float(row["host"]),
            fees=float(row["fees"]),
        )
        for month, row in grouped.iterrows()
    ]


def build_property_series(
    frame: pd.DataFrame, settings: Optional[GlobalSettings] = None
) -> PropertyTimeSeries:
    """
    Align every property's gross and host totals to the shared month axis.

    Properties are ordered by descending total gross; ties keep first-seen
    order. Colors are assigned from the palette in first-seen order.
    """
    settings = settings or GlobalSettings()
    if frame.empty:
        return PropertyTimeSeries()

    palette = settings.charts.palette
    months = sorted(frame["month"].unique())
    keys = list(frame["property_key"].unique())
    labels = frame.drop_duplicates("property_key").set_index("property_key")["label"]

    grouped = frame.groupby(["property_key", "month"], sort=False)[["gross", "host"]].sum()
    gross = (
        grouped["gross"]
        .unstack("month", fill_value=0.0)
        .reindex(index=keys, columns=months, fill_value=0.0)
    )
    host = (
        grouped["host"]
        .unstack("month", fill_value=0.0)
        .reindex(index=keys, columns=months, fill_value=0.0)
    )

    series = [
        PropertySeries(
            key=key,
            label=str(labels[key]),
            color=palette[index % len(palette)],
            gross_values=tuple(float(v) for v in gross.loc[key].to_numpy()),
            host_values=tuple(float(v) for v in host.loc[key].to_numpy()),
        )
        for index, key in enumerate(keys)
    ]
    # Python's sort is stable, so ties keep first-seen order
    series.sort(key=lambda item: -item.total_gross)

    host_by_month = frame.groupby("month", sort=True)["host"].sum().reindex(months, fill_value=0.0)

    logger.debug(f"Property series: {len(series)} properties over {len(months)} months")
    return PropertyTimeSeries(
        months=tuple(months),
        series=tuple(series),
        host_by_month=tuple(float(v) for v in host_by_month.to_numpy()),
    )
