# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core data models for the member ledger.

LedgerEvent is an immutable dated movement of one member's position.
MemberLedger is the mutable accumulator a builder folds rows into; it is
frozen for good once the builder is finalized.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True, slots=True)
class LedgerEvent:
    """
    One dated change to a member's running balance.

    Attributes:
        date: Transaction date
        billed_delta: Signed billed amount (charges are negative)
        collected_delta: Collected amount
        sequence: Insertion index, used to keep same-day events in input order
    """

    date: pd.Timestamp
    billed_delta: float
    collected_delta: float
    sequence: int

    @property
    def sort_key(self) -> Tuple[pd.Timestamp, int]:
        return (self.date, self.sequence)

    @property
    def balance_delta(self) -> float:
        """Change to the running balance, on the same sign convention as balance."""
        return self.billed_delta - self.collected_delta


@dataclass(slots=True)
class MemberLedger:
    """
    Accumulated position of one member across both transaction streams.

    Identity attributes are captured from the first row that references the
    member. Totals are signed: billed charges accumulate as negatives.

    Attributes:
        member_id: Unique member identifier
        name: "First Last" from the first referencing row
        market: Market the member's room belongs to
        property_id: Property of the member's room
        room_id: Room identifier
        room_number: Room number as printed
        street1: Street address line
        billed_total: Sum of billed amounts (negative)
        collected_total: Sum of gross collected amounts
        host_total: Sum of host earnings
        fees_total: Sum of absolute total fees
        late_fees_total: Gross collected on late-fee bills
        bill_count: Rows seen in either stream
        late_bill_count: Late-fee rows
        earliest_activity_date: First dated activity in either stream
        latest_activity_date: Last dated activity in either stream
        latest_billed_date: Last dated billed row
        monthly_collected: Month key -> collected total for that month
        events: Dated ledger events in insertion order
    """

    member_id: str
    name: str = ""
    market: str = ""
    property_id: str = ""
    room_id: str = ""
    room_number: str = ""
    street1: str = ""

    billed_total: float = 0.0
    collected_total: float = 0.0
    host_total: float = 0.0
    fees_total: float = 0.0
    late_fees_total: float = 0.0

    bill_count: int = 0
    late_bill_count: int = 0

    earliest_activity_date: Optional[pd.Timestamp] = None
    latest_activity_date: Optional[pd.Timestamp] = None
    latest_billed_date: Optional[pd.Timestamp] = None

    monthly_collected: Dict[str, float] = field(default_factory=dict)
    events: List[LedgerEvent] = field(default_factory=list)

    def touch(self, date: pd.Timestamp) -> None:
        """Widen the activity bounds to include ``date``."""
        if self.earliest_activity_date is None or date < self.earliest_activity_date:
            self.earliest_activity_date = date
        if self.latest_activity_date is None or date > self.latest_activity_date:
            self.latest_activity_date = date

    def sorted_events(self) -> List[LedgerEvent]:
        """Events in chronological order; ties keep insertion order."""
        return sorted(self.events, key=lambda event: event.sort_key)
