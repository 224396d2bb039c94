# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Tuple

from pydantic import Field, field_validator

from .model import Model


class IngestionSettings(Model):
    """Settings controlling how raw rows are folded into ledgers."""

    unknown_member_id: str = Field(
        default="unknown",
        min_length=1,
        description="Member id used for rows whose 'Member ID' cell is blank.",
    )
    unknown_property_label: str = Field(
        default="Unknown",
        min_length=1,
        description="Property key/label used when a summary row has neither id nor address.",
    )
    late_fee_bill_type: str = Field(
        default="Late Fees",
        description="'Bill Type' value that marks a collected row as a late fee.",
    )


class MetricsSettings(Model):
    """Windows and constants used by the derived member metrics."""

    balance_window_days: int = Field(
        default=30,
        ge=1,
        description="Look-back window (days before as_of) for the balance growth rate.",
    )
    active_window_days: int = Field(
        default=28,
        ge=1,
        description=(
            "A member is Active when their latest bill is at most this many days "
            "before the latest bill seen across all members."
        ),
    )
    days_per_month: float = Field(
        default=365 / 12,
        gt=0,
        description="Average days per month used to scale per-day collections to monthly rent.",
    )


class ChartSettings(Model):
    """Settings for stacked-area geometry and axis ticks."""

    tick_steps: Tuple[float, float, float] = Field(
        default=(500.0, 1000.0, 2500.0),
        description="Small, medium and large y-axis tick steps (currency units).",
    )
    tick_step_breakpoint: float = Field(
        default=2500.0,
        gt=0,
        description=(
            "Small step applies up to this maximum, the medium step up to three "
            "times it, and the large step beyond."
        ),
    )
    max_x_ticks: int = Field(
        default=10,
        ge=1,
        description="Maximum number of labelled month ticks on the x axis.",
    )
    palette: Tuple[str, ...] = Field(
        default=(
            "#d66b4a",
            "#6f8b5d",
            "#3c6e9e",
            "#f0b36e",
            "#7d6b93",
            "#bd7b8a",
        ),
        min_length=1,
        description="Series colors, assigned to properties in first-seen order and cycled.",
    )

    @field_validator("tick_steps")
    @classmethod
    def check_tick_steps(cls, value: Tuple[float, float, float]) -> Tuple[float, float, float]:
        """Tick steps must be positive and strictly increasing."""
        small, medium, large = value
        if not 0 < small < medium < large:
            raise ValueError("tick_steps must be positive and strictly increasing")
        return value


class ReportingSettings(Model):
    """Sizes of the ranked member lists."""

    top_members_limit: int = Field(default=6, ge=1)
    top_balances_limit: int = Field(default=8, ge=1)
    member_bar_limit: int = Field(default=6, ge=1)


# --- Main Global Settings Class ---


class GlobalSettings(Model):
    """Global engine settings

    Groups every tunable by functional area. Operations accept an optional
    settings object and fall back to ``GlobalSettings()`` when none is given.
    """

    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    charts: ChartSettings = Field(default_factory=ChartSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
