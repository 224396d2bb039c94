# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Column contracts of the three exports.

Where an export has shipped under more than one header name, the
alternatives are listed in lookup order.
"""

from __future__ import annotations

# Summary export
EARNINGS_MONTH = "Earnings Month"
GROSS_COLLECTED = "Gross Collected"
HOST_EARNINGS = "Host Earnings"
SERVICE_FEES = "Service Fees"
TRANSACTION_FEE = "Transaction Fee"
SUMMARY_PROPERTY_ID = ("PSID", "Property ID")
SUMMARY_ADDRESS = ("Address", "Street 1")

# Shared member identity (billed and collected exports)
MEMBER_ID = "Member ID"
MEMBER_FIRST_NAME = "Member First Name"
MEMBER_LAST_NAME = "Member Last Name"
MARKET = "PadSplit Market"
PROPERTY_ID = "Property ID"
ROOM_ID = "Room ID"
ROOM_NUMBER = "Room Number"
STREET_1 = "Street 1"
CREATED = "Created"

# Billed export
AMOUNT = "Amount"
TRANSACTION_TYPE = "Transaction Type"
TRANSACTION_REASON = "Transaction Reason"

# Collected export
COLLECTED_GROSS = ("Gross Collected", "Gross Collected ")
TOTAL_FEES = "Total Fees"
BILL_TYPE = "Bill Type"
PAYOUT_MONTH = "Payout Month"
COLLECTED_MONTH = (PAYOUT_MONTH, CREATED)
