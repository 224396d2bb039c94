# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Member ledger: per-member accumulation of the billed and collected streams.
"""

from .builder import LedgerBook, LedgerBuilder, build_ledgers
from .records import LedgerEvent, MemberLedger

__all__ = [
    "LedgerBook",
    "LedgerBuilder",
    "LedgerEvent",
    "MemberLedger",
    "build_ledgers",
]
