# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class MembershipStatusEnum(str, Enum):
    """
    Activity classification of a member.

    A member is ACTIVE when their latest billed date falls within the
    activity window of the latest billed date seen anywhere in the billing
    ledger; everyone else (including members never billed) is PAST.
    """

    ACTIVE = "Active"
    PAST = "Past"


class TransactionKindEnum(str, Enum):
    """Which ledger stream a transaction line came from."""

    BILLED = "Billed"
    COLLECTED = "Collected"


class StreamEnum(str, Enum):
    """The three named input streams handed to the engine."""

    SUMMARY = "summary"
    BILLED = "billed"
    COLLECTED = "collected"
