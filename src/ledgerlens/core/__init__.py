# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens Core Framework

Primitives (settings, enums, base model) and the member ledger.
"""

from . import ledger, primitives

__all__ = [
    "ledger",
    "primitives",
]
