# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Derived member metrics.

Turns each finalized MemberLedger into a read-only DerivedMemberView.
Every ratio guards its zero denominator by returning 0, so views never carry
NaN or infinity. The two windowed metrics take their reference clocks as
explicit inputs:

- balance_growth_rate looks back from an injected ``as_of`` timestamp
- membership_status compares against the latest billed date of the book
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

import pandas as pd

from ..core.ledger import LedgerBook, MemberLedger
from ..core.primitives import GlobalSettings, MembershipStatusEnum
from .rollup import PropertyMonthRollup

logger = logging.getLogger(__name__)

DAY = pd.Timedelta(days=1)

TimestampLike = Union[pd.Timestamp, datetime, date, str]


@dataclass(frozen=True)
class DerivedMemberView:
    """
    A finalized member ledger together with its computed metrics.

    Attributes:
        balance: billed_total - collected_total
        length_of_stay_days: Whole days between first and last activity (min 1), 0 if undated
        collected_per_day: collected_total / length_of_stay_days
        monthly_rent_estimate: collected_per_day scaled to an average month
        host_percent: host_total / collected_total
        fee_percent: late_fees_total / collected_total
        late_fee_rate: late_bill_count / bill_count
        collection_rate: collected_total / billed_total
        balance_growth_rate: balance now minus the running balance at the window start
        vs_property_average: Mean deviation of monthly collections from the property-month peer average
        membership_status: Active or Past
    """

    # Identity
    member_id: str
    name: str
    market: str
    property_id: str
    room_id: str
    room_number: str
    street1: str

    # Accumulators
    billed_total: float
    collected_total: float
    host_total: float
    fees_total: float
    late_fees_total: float
    bill_count: int
    late_bill_count: int

    # Temporal bounds
    earliest_activity_date: Optional[pd.Timestamp]
    latest_activity_date: Optional[pd.Timestamp]
    latest_billed_date: Optional[pd.Timestamp]

    # Derived
    balance: float
    length_of_stay_days: int
    collected_per_day: float
    monthly_rent_estimate: float
    host_percent: float
    fee_percent: float
    late_fee_rate: float
    collection_rate: float
    balance_growth_rate: float
    vs_property_average: float
    membership_status: MembershipStatusEnum

    # Source ledger for drill-down; excluded from equality
    ledger: Optional[MemberLedger] = field(default=None, repr=False, compare=False)

    @property
    def move_in(self) -> Optional[pd.Timestamp]:
        return self.earliest_activity_date

    @property
    def move_out(self) -> Optional[pd.Timestamp]:
        return self.latest_activity_date

    @property
    def is_active(self) -> bool:
        return self.membership_status == MembershipStatusEnum.ACTIVE

    @property
    def display_name(self) -> str:
        return self.name or f"Member {self.member_id}"


def as_timestamp(value: TimestampLike) -> pd.Timestamp:
    """Coerce a reference time to a naive timestamp (aware values go through UTC)."""
    stamp = pd.Timestamp(value)
    if pd.isna(stamp):
        raise ValueError(f"Invalid reference time: {value!r}")
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert("UTC").tz_localize(None)
    return stamp


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def length_of_stay_days(
    earliest: Optional[pd.Timestamp], latest: Optional[pd.Timestamp]
) -> int:
    """Whole days between the activity bounds, half-up rounded, at least 1."""
    if earliest is None or latest is None:
        return 0
    days = (latest - earliest) / DAY
    return max(1, math.floor(days + 0.5))


def balance_growth_rate(
    ledger: MemberLedger, balance: float, as_of: pd.Timestamp, window_days: int
) -> float:
    """
    Change in balance over the trailing window.

    Replays the member's events in (date, insertion) order, keeping a running
    balance of billed_delta - collected_delta. The value reached by the last
    event on or before ``as_of - window_days`` is the window-start balance
    (0 when no event is that old).
    """
    cutoff = as_of - pd.Timedelta(days=window_days)
    running = 0.0
    window_start = 0.0
    for event in ledger.sorted_events():
        running += event.balance_delta
        if event.date <= cutoff:
            window_start = running
    return balance - window_start


def vs_property_average(ledger: MemberLedger, rollup: PropertyMonthRollup) -> float:
    """Mean of (member month total - property-month peer average) over months with a peer average."""
    deviation = 0.0
    months = 0
    for month, total in ledger.monthly_collected.items():
        average = rollup.peer_average(ledger.property_id, month)
        if average is None:
            continue
        deviation += total - average
        months += 1
    return deviation / months if months else 0.0


def membership_status(
    latest_billed: Optional[pd.Timestamp],
    reference: Optional[pd.Timestamp],
    window_days: int,
) -> MembershipStatusEnum:
    """Active when the member's last bill is within the window of the reference bill date."""
    if latest_billed is None or reference is None:
        return MembershipStatusEnum.PAST
    if pd.isna(latest_billed) or pd.isna(reference):
        return MembershipStatusEnum.PAST
    if reference - latest_billed <= pd.Timedelta(days=window_days):
        return MembershipStatusEnum.ACTIVE
    return MembershipStatusEnum.PAST


def compute_member_view(
    ledger: MemberLedger,
    rollup: PropertyMonthRollup,
    *,
    as_of: TimestampLike,
    latest_billed_date: Optional[pd.Timestamp],
    settings: Optional[GlobalSettings] = None,
) -> DerivedMemberView:
    """
    Compute every derived metric of one member.

    Args:
        ledger: Finalized member ledger
        rollup: Peer rollup built from the collections ledger
        as_of: Reference time for the balance growth window
        latest_billed_date: Latest billed date across all members
        settings: Engine settings (defaults to GlobalSettings())

    Returns:
        Read-only DerivedMemberView
    """
    settings = settings or GlobalSettings()
    metrics = settings.metrics
    as_of = as_timestamp(as_of)

    balance = ledger.billed_total - ledger.collected_total
    stay = length_of_stay_days(ledger.earliest_activity_date, ledger.latest_activity_date)
    per_day = safe_ratio(ledger.collected_total, stay)

    return DerivedMemberView(
        member_id=ledger.member_id,
        name=ledger.name,
        market=ledger.market,
        property_id=ledger.property_id,
        room_id=ledger.room_id,
        room_number=ledger.room_number,
        street1=ledger.street1,
        billed_total=ledger.billed_total,
        collected_total=ledger.collected_total,
        host_total=ledger.host_total,
        fees_total=ledger.fees_total,
        late_fees_total=ledger.late_fees_total,
        bill_count=ledger.bill_count,
        late_bill_count=ledger.late_bill_count,
        earliest_activity_date=ledger.earliest_activity_date,
        latest_activity_date=ledger.latest_activity_date,
        latest_billed_date=ledger.latest_billed_date,
        balance=balance,
        length_of_stay_days=stay,
        collected_per_day=per_day,
        monthly_rent_estimate=per_day * metrics.days_per_month,
        host_percent=safe_ratio(ledger.host_total, ledger.collected_total),
        fee_percent=safe_ratio(ledger.late_fees_total, ledger.collected_total),
        late_fee_rate=safe_ratio(ledger.late_bill_count, ledger.bill_count),
        collection_rate=safe_ratio(ledger.collected_total, ledger.billed_total),
        balance_growth_rate=balance_growth_rate(
            ledger, balance, as_of, metrics.balance_window_days
        ),
        vs_property_average=vs_property_average(ledger, rollup),
        membership_status=membership_status(
            ledger.latest_billed_date, latest_billed_date, metrics.active_window_days
        ),
        ledger=ledger,
    )


def compute_member_views(
    book: LedgerBook,
    rollup: PropertyMonthRollup,
    *,
    as_of: TimestampLike,
    settings: Optional[GlobalSettings] = None,
) -> List[DerivedMemberView]:
    """Derived views for every member of the book, in first-seen order."""
    settings = settings or GlobalSettings()
    as_of = as_timestamp(as_of)
    views = [
        compute_member_view(
            ledger,
            rollup,
            as_of=as_of,
            latest_billed_date=book.latest_billed_date,
            settings=settings,
        )
        for ledger in book
    ]
    active = sum(1 for view in views if view.is_active)
    logger.debug(f"Derived {len(views)} member views ({active} active)")
    return views
