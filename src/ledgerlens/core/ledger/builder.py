# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Progressive member ledger construction with the pass-the-builder pattern.

The LedgerBuilder folds the billed and collected record streams into one
MemberLedger per member id. Accumulation is commutative, so the two
streams can be folded in either order; events keep their insertion order
until the metrics pass sorts them by date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import pandas as pd

from ...exceptions import LedgerFinalizedError
from ...ingestion import columns as cols
from ...ingestion.normalize import (
    first_non_empty,
    first_present,
    month_key,
    parse_date,
    to_number,
)
from ...ingestion.parser import TabularRecord
from ..primitives import GlobalSettings
from .records import LedgerEvent, MemberLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerBook:
    """
    Finalized output of a LedgerBuilder.

    Attributes:
        members: Member id -> ledger, in first-seen order
        latest_billed_date: Latest billed date seen for any member; the
            reference clock for membership status
    """

    members: Dict[str, MemberLedger]
    latest_billed_date: Optional[pd.Timestamp]

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self):
        return iter(self.members.values())

    def get(self, member_id: str) -> Optional[MemberLedger]:
        return self.members.get(member_id)


@dataclass
class LedgerBuilder:
    """
    Accumulates billed and collected rows into member ledgers.

    THREAD SAFETY: Designed for single-threaded use. Each pipeline run
    creates its own builder; nothing is shared between runs.

    The builder owns the ledgers until finalize() hands them over as a
    LedgerBook. Folding further rows after that raises LedgerFinalizedError.
    """

    # Configuration
    settings: Optional[GlobalSettings] = None

    # Internal state
    members: Dict[str, MemberLedger] = field(default_factory=dict, init=False)
    latest_billed_date: Optional[pd.Timestamp] = field(default=None, init=False)
    _sequence: int = field(default=0, init=False, repr=False)
    _finalized: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        """Initialize with default settings if none provided."""
        if self.settings is None:
            self.settings = GlobalSettings()

    def add_billed(self, records: Iterable[TabularRecord]) -> None:
        """Fold every row of the billing ledger."""
        count = 0
        for record in records:
            self.fold_billed(record)
            count += 1
        logger.debug(f"Folded {count} billed rows into {len(self.members)} members")

    def add_collected(self, records: Iterable[TabularRecord]) -> None:
        """Fold every row of the collections ledger."""
        count = 0
        for record in records:
            self.fold_collected(record)
            count += 1
        logger.debug(f"Folded {count} collected rows into {len(self.members)} members")

    def fold_billed(self, record: TabularRecord) -> None:
        """
        Fold one billed row.

        The charge is stored as a negative amount. Dated rows widen the
        activity bounds, advance the member's and the global latest billed
        date, and append a ledger event.
        """
        member = self._member_for(record)
        amount = -to_number(record.get(cols.AMOUNT))
        date = parse_date(record.get(cols.CREATED))

        member.billed_total += amount
        member.bill_count += 1

        if date is not None:
            if self.latest_billed_date is None or date > self.latest_billed_date:
                self.latest_billed_date = date
            member.touch(date)
            if member.latest_billed_date is None or date > member.latest_billed_date:
                member.latest_billed_date = date
            member.events.append(self._event(date, billed=amount, collected=0.0))

    def fold_collected(self, record: TabularRecord) -> None:
        """
        Fold one collected row.

        Gross, host and absolute fees accumulate; late-fee bills also count
        toward the late-fee totals. The month key comes from the payout
        month, falling back to the created date.
        """
        member = self._member_for(record)
        gross = to_number(first_present(record, cols.COLLECTED_GROSS))
        host = to_number(record.get(cols.HOST_EARNINGS))
        fees = abs(to_number(record.get(cols.TOTAL_FEES)))
        date = parse_date(record.get(cols.CREATED))
        month = month_key(first_non_empty(record, cols.COLLECTED_MONTH))

        member.collected_total += gross
        member.host_total += host
        member.fees_total += fees
        member.bill_count += 1

        if record.get(cols.BILL_TYPE) == self.settings.ingestion.late_fee_bill_type:
            member.late_fees_total += gross
            member.late_bill_count += 1

        if date is not None:
            member.touch(date)
            member.events.append(self._event(date, billed=0.0, collected=gross))

        if month:
            member.monthly_collected[month] = member.monthly_collected.get(month, 0.0) + gross

    def finalize(self) -> LedgerBook:
        """Stop accepting rows and hand the ledgers over."""
        self._finalized = True
        logger.debug(f"Finalized {len(self.members)} member ledgers")
        return LedgerBook(
            members=self.members, latest_billed_date=self.latest_billed_date
        )

    def member_count(self) -> int:
        return len(self.members)

    def _member_for(self, record: TabularRecord) -> MemberLedger:
        if self._finalized:
            raise LedgerFinalizedError("Cannot fold rows into a finalized ledger builder")

        member_id = record.get(cols.MEMBER_ID) or self.settings.ingestion.unknown_member_id
        member = self.members.get(member_id)
        if member is None:
            first = record.get(cols.MEMBER_FIRST_NAME, "")
            last = record.get(cols.MEMBER_LAST_NAME, "")
            member = MemberLedger(
                member_id=member_id,
                name=f"{first} {last}".strip(),
                market=record.get(cols.MARKET, ""),
                property_id=record.get(cols.PROPERTY_ID, ""),
                room_id=record.get(cols.ROOM_ID, ""),
                room_number=record.get(cols.ROOM_NUMBER, ""),
                street1=record.get(cols.STREET_1, ""),
            )
            self.members[member_id] = member
        return member

    def _event(self, date: pd.Timestamp, billed: float, collected: float) -> LedgerEvent:
        event = LedgerEvent(
            date=date, billed_delta=billed, collected_delta=collected, sequence=self._sequence
        )
        self._sequence += 1
        return event


def build_ledgers(
    billed: Iterable[TabularRecord],
    collected: Iterable[TabularRecord],
    settings: Optional[GlobalSettings] = None,
) -> LedgerBook:
    """Fold both transaction streams and return the finalized ledger book."""
    builder = LedgerBuilder(settings=settings)
    builder.add_billed(billed)
    builder.add_collected(collected)
    return builder.finalize()
