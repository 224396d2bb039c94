# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for LedgerLens testing.

Provides small but complete summary, billed and collected exports whose
aggregates are easy to verify by hand, plus a fixed reference time.
"""

from __future__ import annotations

import pandas as pd
import pytest

from ledgerlens.analysis import run
from ledgerlens.core.primitives import GlobalSettings

# Reference time for every windowed metric in the suite
AS_OF = pd.Timestamp("2024-02-15")

SUMMARY_CSV = (
    "Earnings Month,PSID,Address,Gross Collected,Host Earnings,Service Fees,Transaction Fee\n"
    '2024-01,P1,12 Oak St,"$1,000.00",900.00,-80.00,-20.00\n'
    '2024-02,P1,12 Oak St,"1,200.00",1080.00,-96.00,-24.00\n'
    "2024-02,P2,9 Elm Ave,3000.00,2700.00,-240.00,-60.00\n"
    "2024-03,P2,9 Elm Ave,500.00,450.00,-40.00,-10.00\n"
    ",P3,1 Lost Rd,10.00,9.00,0,0\n"
)

IDENTITY_HEADER = (
    "Member ID,Member First Name,Member Last Name,PadSplit Market,"
    "Property ID,Room ID,Room Number,Street 1"
)

BILLED_CSV = (
    f"{IDENTITY_HEADER},Amount,Created,Transaction Type,Transaction Reason\n"
    "M1,Ana,Lopez,Atlanta,P1,R1,1,12 Oak St,100.00,2024-01-01,rent_charge,weekly_rent\n"
    "M1,Ana,Lopez,Atlanta,P1,R1,1,12 Oak St,100.00,2024-01-29,rent_charge,weekly_rent\n"
    'M2,Ben,Cho,Atlanta,P1,R2,2,12 Oak St,"1,000.00",2023-12-01,rent_charge,\n'
    "M3,Cara,Diaz,Atlanta,P2,R8,8,9 Elm Ave,50.00,,fee,\n"
)

COLLECTED_CSV = (
    f"{IDENTITY_HEADER},Gross Collected,Host Earnings,Total Fees,Bill Type,Created,Payout Month\n"
    "M1,Ana,Lopez,Atlanta,P1,R1,1,12 Oak St,80.00,72.00,-8.00,Rent,2024-01-05,2024-01\n"
    "M1,Ana,Lopez,Atlanta,P1,R1,1,12 Oak St,20.00,18.00,-2.00,Late Fees,2024-02-02,2024-02\n"
    "M2,Ben,Cho,Atlanta,P1,R2,2,12 Oak St,90.00,81.00,-9.00,Rent,2023-12-03,2023-12\n"
    "M2,Ben,Cho,Atlanta,P1,R2,2,12 Oak St,120.00,108.00,-12.00,Rent,2024-01-06,2024-01\n"
    "M4,Dev,Patel,Savannah,P2,R9,9,9 Elm Ave,60.00,54.00,-6.00,Rent,2024-01-10,\n"
)


@pytest.fixture
def settings() -> GlobalSettings:
    """Default engine settings."""
    return GlobalSettings()


@pytest.fixture
def as_of() -> pd.Timestamp:
    return AS_OF


@pytest.fixture
def results():
    """Full pipeline run over the sample exports."""
    return run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of=AS_OF)


@pytest.fixture
def members(results):
    """Derived member views keyed by member id."""
    return {member.member_id: member for member in results.members}
