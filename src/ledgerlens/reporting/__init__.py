# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens Reporting

Member KPI tables and per-member transaction history built from the
engine's output records.
"""

from .members import (
    MEMBER_COLUMNS,
    BarItem,
    member_bar_items,
    members_to_frame,
    search_members,
    sort_members,
    top_members,
)
from .transactions import (
    TransactionLine,
    format_txn_label,
    transaction_history,
    transactions_to_frame,
)

__all__ = [
    # Member table
    "MEMBER_COLUMNS",
    "BarItem",
    "member_bar_items",
    "members_to_frame",
    "search_members",
    "sort_members",
    "top_members",
    # Transactions
    "TransactionLine",
    "format_txn_label",
    "transaction_history",
    "transactions_to_frame",
]
