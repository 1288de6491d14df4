# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for tabular report views.
"""

from datetime import date

import pandas as pd
import pytest

from cashledger.analysis import analyze
from cashledger.core.primitives import ReportingSettings
from cashledger.reporting import (
    events_table,
    format_currency,
    interest_schedule_table,
    monthly_cash_flow_table,
)
from cashledger.reporting.tables import EVENT_COLUMNS, MONTHLY_COLUMNS
from tests.conftest import drawdown, rent


class TestFormatCurrency:
    """Test display formatting."""

    def test_default_symbol(self):
        assert format_currency(1250) == "₹1,250.00"
        assert format_currency(-1250.5) == "-₹1,250.50"

    def test_custom_settings(self):
        settings = ReportingSettings(currency_symbol="$", decimal_precision=0)
        assert format_currency(99_999.6, settings) == "$100,000"


class TestTables:
    """Test DataFrame views over a processed flip."""

    @pytest.fixture
    def result(self, flip_events, settings_12pct):
        return analyze(flip_events, settings_12pct)

    def test_events_table(self, result):
        df = events_table(result.events)
        assert list(df.columns) == EVENT_COLUMNS
        row = df.set_index("id").loc["r1"]
        assert row["kind"] == "Return"
        assert row["loan_adjustment"] == 100_000
        assert row["net_return"] == 50_000
        assert row["allocation_source"] == "auto"
        assert row["outstanding_after"] == 0

    def test_interest_schedule_table(self, result):
        df = interest_schedule_table(result.interest_events)
        assert len(df) == 1
        assert df.loc[0, "month"] == pd.Period("2024-01", freq="M")
        assert df.loc[0, "interest"] == pytest.approx(1_000)

    def test_monthly_cash_flow_table(self, result):
        df = monthly_cash_flow_table(result.events)
        assert list(df.columns) == MONTHLY_COLUMNS
        jan = df.loc[pd.Period("2024-01", freq="M")]
        feb = df.loc[pd.Period("2024-02", freq="M")]
        assert jan["payments"] == 50_000
        assert jan["interest"] == pytest.approx(1_000)
        assert jan["net_cash_flow"] == pytest.approx(-51_000)
        assert jan["outstanding_balance"] == 100_000
        assert feb["returns"] == 50_000
        assert feb["loan_repaid"] == 100_000
        assert feb["cumulative_cash_flow"] == pytest.approx(-1_000)
        assert feb["outstanding_balance"] == 0

    def test_monthly_gap_months_filled(self):
        result = analyze([drawdown(date(2024, 1, 1), 1_000), rent(date(2024, 4, 1), 100)])
        df = monthly_cash_flow_table(result.events)
        assert len(df) == 4
        march = df.loc[pd.Period("2024-03", freq="M")]
        assert march["net_cash_flow"] == 0
        assert march["outstanding_balance"] == 1_000

    def test_empty(self):
        assert monthly_cash_flow_table([]).empty
        assert events_table([]).empty
        assert interest_schedule_table([]).empty
