# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Pipeline result container.

Holds the finished member/time-series model handed to the rendering layer,
with on-demand accessors for tables, ranked lists, chart geometry and
per-member drill-down.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import pandas as pd

from ..core.ledger import LedgerBook
from ..core.primitives import GlobalSettings
from ..ingestion.parser import TabularRecord
from .metrics import DerivedMemberView
from .rollup import (
    PropertyMonthRollup,
    PropertySeries,
    PropertyTimeSeries,
    SummaryMonthTotals,
    SummaryTotals,
)

if TYPE_CHECKING:
    from ..reporting import BarItem, TransactionLine
    from ..visualization import StackedAreaChart


@dataclass
class DashboardResult:
    """
    Output of one pipeline run.

    Attributes:
        members: Derived member views in first-seen order
        time_series: Property series over the shared month axis
        summary_months: Summary totals per month, ascending
        totals: Totals across all summary months
        ledger_book: Finalized member ledgers
        rollup: Property-month peer rollup
        as_of: Reference time used for windowed metrics
        settings: Settings used for the run
        summary_records: Parsed summary rows
        billed_records: Parsed billed rows
        collected_records: Parsed collected rows
    """

    members: List[DerivedMemberView]
    time_series: PropertyTimeSeries
    summary_months: List[SummaryMonthTotals]
    totals: SummaryTotals
    ledger_book: LedgerBook
    rollup: PropertyMonthRollup
    as_of: pd.Timestamp
    settings: GlobalSettings
    summary_records: List[TabularRecord]
    billed_records: List[TabularRecord]
    collected_records: List[TabularRecord]

    # === Time series ===

    @property
    def months(self) -> Tuple[str, ...]:
        return self.time_series.months

    @property
    def property_series(self) -> Tuple[PropertySeries, ...]:
        return self.time_series.series

    @property
    def owner_net_by_month(self) -> Tuple[float, ...]:
        return self.time_series.host_by_month

    @property
    def monthly_gross_values(self) -> List[float]:
        return [month.gross for month in self.summary_months]

    @property
    def monthly_host_values(self) -> List[float]:
        return [month.host for month in self.summary_months]

    # === Members ===

    @cached_property
    def _members_by_id(self) -> Dict[str, DerivedMemberView]:
        return {member.member_id: member for member in self.members}

    def member(self, member_id: str) -> Optional[DerivedMemberView]:
        return self._members_by_id.get(member_id)

    @cached_property
    def members_df(self) -> pd.DataFrame:
        """Member KPI table indexed by member id."""
        from ..reporting import members_to_frame  # noqa: PLC0415

        return members_to_frame(self.members)

    def top_members(self) -> List[DerivedMemberView]:
        """Members with the highest collections."""
        from ..reporting import top_members  # noqa: PLC0415

        return top_members(
            self.members, "collected_total", self.settings.reporting.top_members_limit
        )

    def top_balances(self) -> List[DerivedMemberView]:
        """Members with the highest balances."""
        from ..reporting import top_members  # noqa: PLC0415

        return top_members(self.members, "balance", self.settings.reporting.top_balances_limit)

    def member_bar_items(self) -> List["BarItem"]:
        """Members with the highest host earnings, as labelled bars."""
        from ..reporting import member_bar_items  # noqa: PLC0415

        return member_bar_items(self.members, self.settings.reporting.member_bar_limit)

    def transactions(self, member_id: str) -> List["TransactionLine"]:
        """Newest-first transaction history of one member."""
        from ..reporting import transaction_history  # noqa: PLC0415

        return transaction_history(
            member_id, self.billed_records, self.collected_records, self.settings
        )

    # === Charts ===

    def stacked_gross_chart(
        self, width: float = 576, height: float = 180
    ) -> "StackedAreaChart":
        """Gross collections stacked by property with the owner-net overlay line."""
        from ..visualization import ChartSeries, build_stacked_chart  # noqa: PLC0415

        series = [
            ChartSeries(
                key=item.key, label=item.label, values=item.gross_values, color=item.color
            )
            for item in self.property_series
        ]
        return build_stacked_chart(
            series,
            self.months,
            line_values=self.owner_net_by_month,
            width=width,
            height=height,
            settings=self.settings,
        )

    def correlation(self, x_field: str, y_field: str) -> float:
        """Pearson correlation of two member fields across all members."""
        from ..visualization import pearson_correlation, scatter_points  # noqa: PLC0415

        xs, ys = scatter_points(self.members, x_field, y_field)
        return pearson_correlation(xs, ys)
