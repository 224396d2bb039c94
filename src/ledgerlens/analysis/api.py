# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Pipeline API

Public entry points running the full engine: parse the three exports, fold
the member ledgers and the rollups, then derive member metrics.

    three raw texts -> parser -> three record lists
        -> { ledger builder, summary rollup, peer rollup }
        -> derived member metrics (needs the peer rollup)
        -> DashboardResult
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..core.ledger import build_ledgers
from ..core.primitives import GlobalSettings, StreamEnum
from ..ingestion import DataSources
from .metrics import TimestampLike, as_timestamp, compute_member_views
from .results import DashboardResult
from .rollup import (
    PropertyMonthRollup,
    SummaryTotals,
    build_property_series,
    summarize_months,
    summary_frame,
)

logger = logging.getLogger(__name__)


def analyze(
    sources: DataSources,
    *,
    as_of: TimestampLike,
    settings: Optional[GlobalSettings] = None,
) -> DashboardResult:
    """
    Run the engine over a complete batch of sources.

    Workflow:
      1) Parse all three streams (fails as a whole if any is unavailable)
      2) Fold billed and collected rows into member ledgers
      3) Build the summary rollup and the property-month peer rollup
      4) Derive member metrics against the peer rollup

    Args:
        sources: The three raw exports
        as_of: Reference time for the balance growth window
        settings: Engine settings (defaults to GlobalSettings())

    Returns:
        DashboardResult with members, property series, month totals and totals

    Raises:
        DataUnavailableError: Any stream is missing or has no records
    """
    settings = settings or GlobalSettings()
    as_of = as_timestamp(as_of)
    start = time.perf_counter()

    # Step 1: Parse
    records = sources.parse()
    summary = records[StreamEnum.SUMMARY]
    billed = records[StreamEnum.BILLED]
    collected = records[StreamEnum.COLLECTED]

    # Step 2: Member ledgers
    book = build_ledgers(billed, collected, settings)

    # Step 3: Rollups (independent of the ledgers)
    frame = summary_frame(summary, settings)
    summary_months = summarize_months(frame)
    time_series = build_property_series(frame, settings)
    rollup = PropertyMonthRollup.from_collected(collected)

    # Step 4: Derived metrics
    members = compute_member_views(book, rollup, as_of=as_of, settings=settings)

    elapsed = time.perf_counter() - start
    logger.info(
        f"Analyzed {len(members)} members, {len(time_series.series)} properties "
        f"over {len(time_series.months)} months in {elapsed:.3f}s"
    )

    return DashboardResult(
        members=members,
        time_series=time_series,
        summary_months=summary_months,
        totals=SummaryTotals.from_months(summary_months),
        ledger_book=book,
        rollup=rollup,
        as_of=as_of,
        settings=settings,
        summary_records=summary,
        billed_records=billed,
        collected_records=collected,
    )


def run(
    summary_text: Optional[str],
    billed_text: Optional[str],
    collected_text: Optional[str],
    *,
    as_of: TimestampLike,
    settings: Optional[GlobalSettings] = None,
) -> DashboardResult:
    """
    Run the engine over three raw CSV texts.

    Example:
        ```python
        results = run(summary, billed, collected, as_of="2024-06-30")
        results.totals.gross
        results.members_df.sort_values("balance")
        ```
    """
    sources = DataSources(summary=summary_text, billed=billed_text, collected=collected_text)
    return analyze(sources, as_of=as_of, settings=settings)
