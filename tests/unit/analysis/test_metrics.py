# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for derived member metrics.
"""

import math

import pandas as pd
import pytest

from ledgerlens.analysis import (
    PropertyMonthRollup,
    as_timestamp,
    balance_growth_rate,
    compute_member_view,
    length_of_stay_days,
    membership_status,
    safe_ratio,
    vs_property_average,
)
from ledgerlens.core.ledger import LedgerEvent, MemberLedger, build_ledgers
from ledgerlens.core.primitives import GlobalSettings, MembershipStatusEnum, MetricsSettings

T = pd.Timestamp


def ledger_with_events(*events):
    """MemberLedger whose events are (date, billed_delta, collected_delta) tuples."""
    ledger = MemberLedger(member_id="M1")
    for sequence, (date, billed, collected) in enumerate(events):
        ledger.events.append(LedgerEvent(T(date), billed, collected, sequence))
        ledger.billed_total += billed
        ledger.collected_total += collected
    return ledger


class TestSampleMembers:
    """Metrics of the conftest sample members, as of 2024-02-15."""

    def test_active_member(self, members):
        m1 = members["M1"]
        assert m1.name == "Ana Lopez"
        assert m1.billed_total == pytest.approx(-200.0)
        assert m1.collected_total == pytest.approx(100.0)
        assert m1.balance == pytest.approx(-300.0)
        assert m1.length_of_stay_days == 32
        assert m1.collected_per_day == pytest.approx(3.125)
        assert m1.monthly_rent_estimate == pytest.approx(3.125 * 365 / 12)
        assert m1.host_percent == pytest.approx(0.9)
        assert m1.fee_percent == pytest.approx(0.2)
        assert m1.late_fee_rate == pytest.approx(0.25)
        assert m1.vs_property_average == pytest.approx(-10.0)
        assert m1.balance_growth_rate == pytest.approx(-120.0)
        assert m1.membership_status is MembershipStatusEnum.ACTIVE

    def test_past_member(self, members):
        m2 = members["M2"]
        assert m2.balance == pytest.approx(-1210.0)
        assert m2.length_of_stay_days == 36
        assert m2.vs_property_average == pytest.approx(10.0)
        assert m2.balance_growth_rate == pytest.approx(0.0)
        assert m2.collection_rate == pytest.approx(-0.21)
        assert m2.membership_status is MembershipStatusEnum.PAST

    def test_undated_member(self, members):
        m3 = members["M3"]
        assert m3.billed_total == pytest.approx(-50.0)
        assert m3.length_of_stay_days == 0
        assert m3.collected_per_day == 0.0
        assert m3.move_in is None
        assert m3.balance_growth_rate == pytest.approx(-50.0)
        assert not m3.is_active

    def test_collected_only_member(self, members):
        m4 = members["M4"]
        assert m4.billed_total == 0
        assert m4.collection_rate == 0.0
        assert m4.balance == pytest.approx(-60.0)
        assert m4.length_of_stay_days == 1
        assert m4.vs_property_average == pytest.approx(0.0)
        assert m4.membership_status is MembershipStatusEnum.PAST

    def test_no_nan_or_infinity(self, results):
        for view in results.members:
            for name in (
                "balance",
                "collected_per_day",
                "monthly_rent_estimate",
                "host_percent",
                "fee_percent",
                "late_fee_rate",
                "collection_rate",
                "balance_growth_rate",
                "vs_property_average",
            ):
                assert math.isfinite(getattr(view, name)), (view.member_id, name)

    def test_balance_identity(self, results):
        for view in results.members:
            assert view.balance == pytest.approx(view.billed_total - view.collected_total)


class TestScenario:
    def test_one_charge_one_payment(self, as_of):
        billed = [{"Member ID": "M1", "Amount": "100.00", "Created": "2024-01-01"}]
        collected = [
            {
                "Member ID": "M1",
                "Gross Collected": "80.00",
                "Host Earnings": "72.00",
                "Total Fees": "8.00",
                "Bill Type": "Rent",
                "Created": "2024-01-05",
            }
        ]
        book = build_ledgers(billed, collected)
        view = compute_member_view(
            book.get("M1"),
            PropertyMonthRollup(),
            as_of=as_of,
            latest_billed_date=book.latest_billed_date,
        )
        assert view.billed_total == -100.0
        assert view.collected_total == 80.0
        assert view.balance == pytest.approx(-180.0)
        assert view.host_percent == pytest.approx(0.9)
        assert view.fee_percent == 0.0
        assert view.ledger is book.get("M1")


class TestMembershipStatus:
    def test_past_after_window(self):
        status = membership_status(T("2024-01-01"), T("2024-02-10"), 28)
        assert status is MembershipStatusEnum.PAST

    def test_active_within_window(self):
        status = membership_status(T("2024-01-31"), T("2024-02-10"), 28)
        assert status is MembershipStatusEnum.ACTIVE

    def test_window_boundary_is_active(self):
        status = membership_status(T("2024-01-13"), T("2024-02-10"), 28)
        assert status is MembershipStatusEnum.ACTIVE

    def test_never_billed(self):
        assert membership_status(None, T("2024-02-10"), 28) is MembershipStatusEnum.PAST
        assert membership_status(T("2024-02-10"), None, 28) is MembershipStatusEnum.PAST

    def test_window_from_settings(self, as_of):
        ledger = ledger_with_events(("2024-01-20", -10.0, 0.0))
        ledger.latest_billed_date = T("2024-01-20")
        settings = GlobalSettings(metrics=MetricsSettings(active_window_days=7))
        view = compute_member_view(
            ledger,
            PropertyMonthRollup(),
            as_of=as_of,
            latest_billed_date=T("2024-02-01"),
            settings=settings,
        )
        assert view.membership_status is MembershipStatusEnum.PAST


class TestBalanceGrowthRate:
    def test_no_events_before_window(self):
        ledger = ledger_with_events(("2024-02-10", -100.0, 0.0))
        balance = ledger.billed_total - ledger.collected_total
        assert balance_growth_rate(ledger, balance, T("2024-02-15"), 30) == pytest.approx(-100.0)

    def test_window_start_uses_last_event_before_cutoff(self):
        ledger = ledger_with_events(
            ("2024-01-01", -100.0, 0.0),
            ("2024-01-05", 0.0, 50.0),
            ("2024-02-01", -100.0, 0.0),
        )
        balance = ledger.billed_total - ledger.collected_total
        assert balance == pytest.approx(-250.0)
        # window start balance is -150 (after 2024-01-05)
        assert balance_growth_rate(ledger, balance, T("2024-02-15"), 30) == pytest.approx(-100.0)

    def test_events_replayed_in_date_order(self):
        ledger = ledger_with_events(
            ("2024-02-10", -100.0, 0.0),
            ("2024-01-01", -40.0, 0.0),
        )
        balance = ledger.billed_total - ledger.collected_total
        assert balance_growth_rate(ledger, balance, T("2024-02-15"), 30) == pytest.approx(-100.0)

    def test_depends_on_as_of(self):
        ledger = ledger_with_events(("2024-01-01", -100.0, 0.0))
        balance = ledger.billed_total
        assert balance_growth_rate(ledger, balance, T("2024-01-10"), 30) == pytest.approx(-100.0)
        assert balance_growth_rate(ledger, balance, T("2024-03-01"), 30) == pytest.approx(0.0)


class TestHelpers:
    @pytest.mark.parametrize(
        "earliest,latest,expected",
        [
            ("2024-01-01", "2024-01-01", 1),
            ("2024-01-01", "2024-01-11", 10),
            ("2024-01-01 00:00", "2024-01-01 13:00", 1),
            ("2024-01-01 00:00", "2024-01-03 12:00", 3),
            ("2024-01-01 00:00", "2024-01-03 11:59", 2),
        ],
    )
    def test_length_of_stay(self, earliest, latest, expected):
        assert length_of_stay_days(T(earliest), T(latest)) == expected

    def test_length_of_stay_without_dates(self):
        assert length_of_stay_days(None, T("2024-01-01")) == 0
        assert length_of_stay_days(None, None) == 0

    def test_safe_ratio(self):
        assert safe_ratio(5, 0) == 0.0
        assert safe_ratio(0, 0) == 0.0
        assert safe_ratio(1, 4) == pytest.approx(0.25)

    def test_vs_property_average_skips_unknown_months(self):
        ledger = MemberLedger(member_id="M1", property_id="P1")
        ledger.monthly_collected = {"2024-01": 150.0, "2024-05": 999.0}
        rollup = PropertyMonthRollup.from_collected(
            [
                {"Property ID": "P1", "Room ID": "R1", "Payout Month": "2024-01", "Gross Collected": "150"},
                {"Property ID": "P1", "Room ID": "R2", "Payout Month": "2024-01", "Gross Collected": "50"},
            ]
        )
        assert vs_property_average(ledger, rollup) == pytest.approx(50.0)

    def test_vs_property_average_without_peers(self):
        ledger = MemberLedger(member_id="M1", property_id="P1")
        ledger.monthly_collected = {"2024-01": 150.0}
        assert vs_property_average(ledger, PropertyMonthRollup()) == 0.0

    def test_as_timestamp(self):
        assert as_timestamp("2024-02-15") == T("2024-02-15")
        assert as_timestamp(T("2024-02-15 05:00", tz="US/Eastern")) == T("2024-02-15 10:00")
        with pytest.raises(ValueError):
            as_timestamp("not a date")
