# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
LedgerLens - Member Ledger Ingestion and Aggregation Engine

Turns three tabular earnings exports (an earnings summary, a billing ledger
and a collections ledger) into a normalized, per-member financial model that
drives dashboards: member KPIs, property time series and chart geometry.

Key Entry Points:
- ledgerlens.analysis.run() - Full pipeline from raw CSV text to results
- ledgerlens.ingestion.* - CSV parsing and value normalization
- ledgerlens.core.ledger.* - Member ledger aggregation
- ledgerlens.reporting.* - Member tables and transaction history
- ledgerlens.visualization.* - Stacked-area geometry and correlation

Example Usage:
    ```python
    import pandas as pd
    from ledgerlens.analysis import run

    results = run(
        summary_text,
        billed_text,
        collected_text,
        as_of=pd.Timestamp("2024-06-30"),
    )
    for member in results.members:
        print(member.member_id, member.balance, member.membership_status)
    ```
"""

import importlib
import logging

# Add a NullHandler to the package logger to prevent "No handlers could be found" warnings
# when the library is used in applications that don't configure logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "exceptions",
    "ingestion",
    "reporting",
    "visualization",
]


_LAZY_MODULES = {
    "analysis": "ledgerlens.analysis",
    "core": "ledgerlens.core",
    "exceptions": "ledgerlens.exceptions",
    "ingestion": "ledgerlens.ingestion",
    "reporting": "ledgerlens.reporting",
    "visualization": "ledgerlens.visualization",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'ledgerlens' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
