# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests: raw CSV exports in, finished dashboard model out.
"""

import logging

import pytest

from ledgerlens.analysis import analyze, run
from ledgerlens.core.primitives import GlobalSettings, IngestionSettings
from ledgerlens.exceptions import DataUnavailableError
from ledgerlens.ingestion import DataSources
from tests.conftest import AS_OF, BILLED_CSV, COLLECTED_CSV, SUMMARY_CSV


class TestDashboardModel:
    def test_totals(self, results):
        assert results.totals.gross == pytest.approx(5700.0)
        assert results.totals.host == pytest.approx(5130.0)
        assert results.totals.fees == pytest.approx(570.0)

    def test_months_and_series(self, results):
        assert results.months == ("2024-01", "2024-02", "2024-03")
        assert [s.key for s in results.property_series] == ["P2", "P1"]
        assert results.owner_net_by_month == (900.0, 3780.0, 450.0)
        assert results.monthly_gross_values == [1000.0, 4200.0, 500.0]
        assert results.monthly_host_values == [900.0, 3780.0, 450.0]

    def test_members_in_first_seen_order(self, results):
        assert [m.member_id for m in results.members] == ["M1", "M2", "M3", "M4"]
        assert results.member("M4").market == "Savannah"
        assert results.member("nobody") is None

    def test_month_totals_equal_stacked_series(self, results):
        for index, month in enumerate(results.summary_months):
            stacked = sum(s.gross_values[index] for s in results.property_series)
            assert stacked == pytest.approx(month.gross)

    def test_bill_counts_cover_both_streams(self, results):
        total = sum(m.bill_count for m in results.members)
        assert total == len(results.billed_records) + len(results.collected_records)

    def test_raw_records_kept(self, results):
        assert len(results.summary_records) == 5
        assert len(results.billed_records) == 4
        assert len(results.collected_records) == 5

    def test_idempotent(self):
        first = run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of=AS_OF)
        second = run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of=AS_OF)
        assert first.members == second.members
        assert first.time_series == second.time_series
        assert first.summary_months == second.summary_months

    def test_settings_flow_through(self):
        settings = GlobalSettings(ingestion=IngestionSettings(late_fee_bill_type="Rent"))
        results = run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of=AS_OF, settings=settings)
        assert results.member("M1").late_fees_total == pytest.approx(80.0)
        assert results.settings is settings

    def test_as_of_accepts_text(self):
        results = run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of="2024-02-15")
        assert results.as_of == AS_OF

    def test_logs_summary(self, caplog):
        with caplog.at_level(logging.INFO, logger="ledgerlens"):
            run(SUMMARY_CSV, BILLED_CSV, COLLECTED_CSV, as_of=AS_OF)
        assert "Analyzed 4 members, 2 properties over 3 months" in caplog.text


class TestUnavailableData:
    @pytest.mark.parametrize("missing", ["summary", "billed", "collected"])
    def test_missing_stream_fails_the_run(self, missing):
        texts = {"summary": SUMMARY_CSV, "billed": BILLED_CSV, "collected": COLLECTED_CSV}
        texts[missing] = None
        with pytest.raises(DataUnavailableError) as excinfo:
            analyze(DataSources(**texts), as_of=AS_OF)
        assert excinfo.value.source == missing

    def test_header_only_stream_fails_the_run(self):
        with pytest.raises(DataUnavailableError, match="no records"):
            run(SUMMARY_CSV, "Member ID,Amount,Created\n", COLLECTED_CSV, as_of=AS_OF)



def test_byte_order_mark_exports():
    bom = "\ufeff"
    results = run(bom + SUMMARY_CSV, bom + BILLED_CSV, bom + COLLECTED_CSV, as_of=AS_OF)
    assert [m.member_id for m in results.members] == ["M1", "M2", "M3", "M4"]
    assert results.months == ("2024-01", "2024-02", "2024-03")
    assert results.totals.gross == pytest.approx(5700.0)
