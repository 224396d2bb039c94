# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
The batch of raw texts handed to the engine.

Retrieval belongs to the caller. This module only fixes the contract: all
three streams must be present before anything is computed, and any failure
to supply one surfaces as a single DataUnavailableError.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from ..core.primitives import Model, StreamEnum
from ..exceptions import DataUnavailableError
from .parser import TabularRecord, parse_csv

logger = logging.getLogger(__name__)


class DataSources(Model):
    """
    Raw CSV texts of the three exports.

    Attributes:
        summary: Earnings summary export (one row per property-month)
        billed: Billing ledger export (one row per charge)
        collected: Collections ledger export (one row per payment)
    """

    summary: Optional[str] = None
    billed: Optional[str] = None
    collected: Optional[str] = None

    @classmethod
    def gather(cls, fetch: Callable[[str], Optional[str]]) -> "DataSources":
        """
        Collect the three texts from a caller-supplied fetch function.

        Args:
            fetch: Called once per stream name ("summary", "billed", "collected")

        Raises:
            DataUnavailableError: fetch raised or returned None for a stream
        """
        texts: Dict[str, str] = {}
        for stream in StreamEnum:
            try:
                text = fetch(stream.value)
            except Exception as e:
                logger.error(f"Retrieval of {stream.value} failed: {e}")
                raise DataUnavailableError(stream.value, str(e)) from e
            if text is None:
                raise DataUnavailableError(stream.value, "no content")
            texts[stream.value] = text
        return cls(**texts)

    def parse(self) -> Dict[StreamEnum, List[TabularRecord]]:
        """
        Parse all three streams.

        Raises:
            DataUnavailableError: a stream is missing or yields no records
        """
        parsed: Dict[StreamEnum, List[TabularRecord]] = {}
        for stream in StreamEnum:
            text = getattr(self, stream.value)
            if text is None:
                raise DataUnavailableError(stream.value, "no content")
            records = parse_csv(text)
            if not records:
                raise DataUnavailableError(stream.value, "no records")
            logger.debug(f"{stream.value}: {len(records)} records")
            parsed[stream] = records
        return parsed
