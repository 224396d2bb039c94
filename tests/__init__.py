# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens test suite.

Unit tests per package under ``tests/unit`` and end-to-end pipeline tests
under ``tests/e2e``.
"""
