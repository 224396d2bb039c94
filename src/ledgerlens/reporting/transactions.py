# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Per-member transaction history.

Merges a member's billed and collected rows into one newest-first list of
TransactionLine records, the drill-down behind a row of the member table.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

import pandas as pd

from ..core.primitives import GlobalSettings, TransactionKindEnum
from ..ingestion import columns as cols
from ..ingestion.normalize import first_present, parse_date, to_number
from ..ingestion.parser import TabularRecord

_WORD_START = re.compile(r"\b\w")


@dataclass(frozen=True)
class TransactionLine:
    """
    One billed or collected row of a member.

    Billed lines carry ``billed`` (the negated charge); collected lines carry
    ``gross``, ``fees`` and ``host``. Fields that do not apply are None.
    """

    date: Optional[pd.Timestamp]
    kind: TransactionKindEnum
    description: str
    billed: Optional[float] = None
    gross: Optional[float] = None
    fees: Optional[float] = None
    host: Optional[float] = None


def format_txn_label(value: Optional[str]) -> str:
    """'late_fee' -> 'Late Fee'."""
    if not value:
        return ""
    return _WORD_START.sub(lambda m: m.group(0).upper(), value.replace("_", " "))


def _belongs_to(record: TabularRecord, member_id: str, unknown: str) -> bool:
    return (record.get(cols.MEMBER_ID) or unknown) == member_id


def transaction_history(
    member_id: str,
    billed: Iterable[TabularRecord],
    collected: Iterable[TabularRecord],
    settings: Optional[GlobalSettings] = None,
) -> List[TransactionLine]:
    """
    Every transaction of one member, newest first; undated lines sort last.
    """
    unknown = (settings or GlobalSettings()).ingestion.unknown_member_id
    lines: List[TransactionLine] = []

    for record in billed:
        if not _belongs_to(record, member_id, unknown):
            continue
        parts = [
            format_txn_label(record.get(cols.TRANSACTION_TYPE)),
            format_txn_label(record.get(cols.TRANSACTION_REASON)),
        ]
        lines.append(
            TransactionLine(
                date=parse_date(record.get(cols.CREATED)),
                kind=TransactionKindEnum.BILLED,
                description=" - ".join(part for part in parts if part) or "Charge",
                billed=-to_number(record.get(cols.AMOUNT)),
            )
        )

    for record in collected:
        if not _belongs_to(record, member_id, unknown):
            continue
        lines.append(
            TransactionLine(
                date=parse_date(record.get(cols.CREATED)),
                kind=TransactionKindEnum.COLLECTED,
                description=record.get(cols.BILL_TYPE) or "Payment",
                gross=to_number(first_present(record, cols.COLLECTED_GROSS)),
                fees=abs(to_number(record.get(cols.TOTAL_FEES))),
                host=to_number(record.get(cols.HOST_EARNINGS)),
            )
        )

    lines.sort(key=lambda line: line.date.value if line.date is not None else 0, reverse=True)
    return lines


def transactions_to_frame(lines: Iterable[TransactionLine]) -> pd.DataFrame:
    """Transaction lines as a DataFrame, one row per line in the given order."""
    rows = []
    for line in lines:
        row = asdict(line)
        row["kind"] = line.kind.value
        rows.append(row)
    frame = pd.DataFrame(
        rows, columns=["date", "kind", "description", "billed", "gross", "fees", "host"]
    )
    frame["date"] = pd.to_datetime(frame["date"])
    return frame
