# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for monthly interest accrual.

Tests day-count proration, stretch partitioning within a month, horizon
resolution and the non-compounding rule.
"""

from datetime import date

import pytest

from cashledger.core.primitives import DayCountConvention, InterestSettings
from cashledger.debt import InterestAccrualEngine, accrue_interest, prorate_interest, replay
from cashledger.debt.interest import month_end
from cashledger.ledger import InterestEvent
from tests.conftest import drawdown, repayment

RATE_12 = InterestSettings(annual_rate=12)


def accrue(events, settings=RATE_12, horizon_end=None):
    return accrue_interest(replay(events).events, settings, horizon_end)


class TestProrateInterest:
    """Test the day-count formula."""

    def test_half_month(self):
        """120,000 at 12% for 15 days of a 30-day month is 600."""
        assert prorate_interest(120_000, 12, 15, 30) == pytest.approx(600.0)

    def test_full_month_ignores_month_length(self):
        assert prorate_interest(100_000, 12, 31, 31) == pytest.approx(1000.0)
        assert prorate_interest(100_000, 12, 28, 28) == pytest.approx(1000.0)

    def test_actual_365(self):
        amount = prorate_interest(100_000, 12, 31, 31, DayCountConvention.ACTUAL_365)
        assert amount == pytest.approx(12_000 * 31 / 365)

    @pytest.mark.parametrize("principal, rate, days", [(0, 12, 10), (100, 0, 10), (100, 12, 0)])
    def test_zero_inputs(self, principal, rate, days):
        assert prorate_interest(principal, rate, days, 30) == 0.0


class TestMonthlyAccrual:
    """Test the monthly schedule."""

    def test_drawdown_then_repayment(self):
        schedule = accrue(
            [
                drawdown(date(2024, 6, 1), 120_000),
                repayment(date(2024, 6, 16), 120_000),
            ]
        )
        assert len(schedule.events) == 1
        charge = schedule.events[0]
        assert charge.amount == pytest.approx(600.0)
        assert charge.id == "interest-2024-06"
        assert charge.date == date(2024, 6, 30)
        assert len(charge.breakdown) == 1
        period = charge.breakdown[0]
        assert (period.from_date, period.to_date, period.days) == (
            date(2024, 6, 1),
            date(2024, 6, 15),
            15,
        )
        assert period.principal == 120_000

    def test_two_stretches_in_one_month(self):
        schedule = accrue(
            [
                drawdown(date(2024, 1, 1), 100_000, id="d1"),
                drawdown(date(2024, 1, 25), 100_000, id="d2"),
            ],
            horizon_end=date(2024, 1, 31),
        )
        charge = schedule.events[0]
        assert [p.days for p in charge.breakdown] == [24, 7]
        assert charge.breakdown[0].interest == pytest.approx(774.19)
        assert charge.breakdown[1].interest == pytest.approx(451.61)
        assert charge.amount == pytest.approx(1225.81)

    def test_description(self):
        schedule = accrue([drawdown(date(2024, 1, 1), 100_000)])
        assert schedule.events[0].description == "Interest @ 12% for Jan 2024"

    def test_same_day_drawdown_and_repayment(self):
        schedule = accrue(
            [
                drawdown(date(2024, 3, 10), 50_000),
                repayment(date(2024, 3, 10), 50_000),
            ]
        )
        assert schedule.events == ()
        assert schedule.total_interest == 0

    def test_zero_rate(self):
        schedule = accrue([drawdown(date(2024, 1, 1), 100_000)], InterestSettings())
        assert schedule.events == ()

    def test_zero_months_are_skipped_not_terminal(self):
        schedule = accrue(
            [
                drawdown(date(2024, 1, 1), 100_000, id="d1"),
                repayment(date(2024, 1, 11), 100_000),
                drawdown(date(2024, 3, 1), 100_000, id="d2"),
            ],
            horizon_end=date(2024, 3, 31),
        )
        assert [e.id for e in schedule.events] == ["interest-2024-01", "interest-2024-03"]

    def test_non_compounding(self):
        """Each full month on the same balance costs the same."""
        schedule = accrue(
            [drawdown(date(2024, 1, 1), 100_000)], horizon_end=date(2024, 6, 30)
        )
        assert len(schedule.events) == 6
        assert all(e.amount == pytest.approx(1000.0) for e in schedule.events)
        assert schedule.total_interest == pytest.approx(6000.0)

    def test_input_interest_is_ignored(self):
        events = [
            drawdown(date(2024, 1, 1), 100_000),
            InterestEvent(id="interest-2024-01", date=date(2024, 1, 31), amount=99_999),
        ]
        schedule = accrue(events)
        assert schedule.events[0].amount == pytest.approx(1000.0)


class TestHorizon:
    """Test horizon resolution."""

    def test_default_is_month_end_of_latest_event(self):
        schedule = accrue([drawdown(date(2024, 2, 10), 100_000)])
        assert schedule.horizon_end == date(2024, 2, 29)

    def test_extension_months(self):
        settings = InterestSettings(annual_rate=12, horizon_extension_months=2)
        schedule = accrue([drawdown(date(2024, 1, 1), 100_000)], settings)
        assert schedule.horizon_end == date(2024, 3, 31)
        assert len(schedule.events) == 3

    def test_configured_end_date(self):
        settings = InterestSettings(annual_rate=12, horizon_end_date=date(2024, 2, 15))
        schedule = accrue([drawdown(date(2024, 1, 1), 100_000)], settings)
        assert [e.id for e in schedule.events] == ["interest-2024-01", "interest-2024-02"]

    def test_argument_overrides_settings(self):
        settings = InterestSettings(annual_rate=12, horizon_end_date=date(2024, 6, 30))
        engine = InterestAccrualEngine(settings)
        processed = replay([drawdown(date(2024, 1, 1), 100_000)]).events
        assert engine.resolve_horizon(processed, date(2024, 1, 31)) == date(2024, 1, 31)

    def test_horizon_before_first_event(self):
        schedule = accrue(
            [drawdown(date(2024, 5, 1), 100_000)], horizon_end=date(2024, 1, 31)
        )
        assert schedule.events == ()

    def test_empty_ledger(self):
        schedule = accrue([])
        assert schedule.events == ()
        assert schedule.horizon_end is None

    def test_month_end(self):
        assert month_end(date(2024, 2, 3)) == date(2024, 2, 29)
        assert month_end(date(2023, 12, 31)) == date(2023, 12, 31)
