# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens Core Primitives

Base model, enumerations and configuration shared across the engine.
"""

from .enums import MembershipStatusEnum, StreamEnum, TransactionKindEnum
from .model import Model
from .settings import (
    ChartSettings,
    GlobalSettings,
    IngestionSettings,
    MetricsSettings,
    ReportingSettings,
)

__all__ = [
    # Core models
    "Model",
    # Settings
    "GlobalSettings",
    "IngestionSettings",
    "MetricsSettings",
    "ChartSettings",
    "ReportingSettings",
    # Enums
    "MembershipStatusEnum",
    "StreamEnum",
    "TransactionKindEnum",
]
