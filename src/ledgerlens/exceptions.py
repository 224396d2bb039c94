# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Error taxonomy for the ingestion and aggregation engine.

Structural row defects, unparsable numbers and unparsable dates are absorbed
at the point they are read and never raised. The only fatal condition is an
input stream that is unavailable as a whole.
"""

from __future__ import annotations

from typing import Optional


class LedgerLensError(Exception):
    """Base class for all ledgerlens errors."""


class DataUnavailableError(LedgerLensError):
    """
    One of the three input streams could not be supplied.

    Raised when a stream is missing, when retrieving it failed, or when it
    parsed to zero records. Aggregation never runs over a partial input set.

    Attributes:
        source: Name of the offending stream ("summary", "billed", "collected")
    """

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        self.reason = reason
        message = f"Data unavailable: {source}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LedgerFinalizedError(LedgerLensError, RuntimeError):
    """A row was folded into a ledger builder after it was finalized."""
