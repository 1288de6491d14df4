# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for the ingestion boundary.

Bad records are collected as errors while the good ones go through.
"""

from datetime import date, datetime

import pytest

from cashledger.core.primitives import IngestSettings
from cashledger.ledger import (
    DrawdownEvent,
    InterestEvent,
    PaymentEvent,
    RentalIncomeEvent,
    ReturnEvent,
    parse_amount,
    parse_date,
    parse_events,
)


class TestParseAmount:
    """Test currency-string and numeric coercion."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (100, 100.0),
            (-2500, 2500.0),
            ("₹1,00,000.50", 100_000.50),
            ("-2,500", 2500.0),
            (" 42 ", 42.0),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, True, "", "abc", float("inf"), [1]])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_amount(raw)


class TestParseDate:
    """Test date coercion."""

    def test_date_and_datetime(self):
        assert parse_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert parse_date(datetime(2024, 1, 5, 13, 30)) == date(2024, 1, 5)

    def test_string_formats(self):
        assert parse_date("2024-01-05") == date(2024, 1, 5)
        assert parse_date("05 Jan 2024") == date(2024, 1, 5)

    def test_day_first(self):
        assert parse_date("03-04-2024") == date(2024, 3, 4)
        assert parse_date("03-04-2024", day_first=True) == date(2024, 4, 3)

    @pytest.mark.parametrize("raw", [None, "", "not a date"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_date(raw)


class TestParseEvents:
    """Test batch validation and partial success."""

    def test_partial_success(self):
        result = parse_events(
            [
                {"type": "drawdown", "date": "2024-01-01", "amount": "1,00,000"},
                {"type": "payment", "date": "not a date", "amount": 500},
                {"kind": "Rental Income", "date": "2024-02-01", "amount": 25_000},
            ]
        )
        assert not result.ok
        assert len(result.events) == 2
        assert isinstance(result.events[0], DrawdownEvent)
        assert isinstance(result.events[1], RentalIncomeEvent)
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.index == 1
        assert error.field == "date"

    def test_non_numeric_amount(self):
        result = parse_events([{"id": "x", "kind": "Payment", "date": "2024-01-01", "amount": "abc"}])
        assert result.errors[0].field == "amount"
        assert result.errors[0].event_id == "x"

    def test_unknown_kind(self):
        result = parse_events([{"kind": "dividend", "date": "2024-01-01", "amount": 1}])
        assert result.errors[0].field == "kind"

    def test_missing_kind(self):
        result = parse_events([{"date": "2024-01-01", "amount": 1}])
        assert result.errors[0].field == "kind"

    def test_non_mapping_record(self):
        result = parse_events(["drawdown,2024-01-01,100"])
        assert len(result.errors) == 1

    def test_camel_case_manual_fields(self):
        result = parse_events(
            [
                {
                    "id": "r1",
                    "type": "sale",
                    "date": "2024-02-01",
                    "amount": 150_000,
                    "manualLoanAllocation": "₹60,000",
                }
            ]
        )
        assert result.ok
        event = result.events[0]
        assert isinstance(event, ReturnEvent)
        assert event.manual_loan_allocation == 60_000

    def test_allocation_on_rental_rejected(self):
        result = parse_events(
            [{"kind": "rent", "date": "2024-02-01", "amount": 10, "manual_loan_allocation": 5}]
        )
        assert len(result.errors) == 1
        assert "manual_loan_allocation" in result.errors[0].field

    def test_boolean_amount_rejected(self):
        result = parse_events([{"kind": "Payment", "date": "2024-01-01", "amount": True}])
        assert result.errors[0].field == "amount"

    def test_legacy_return_record(self):
        """Records saved by the earlier web client carry their split under old keys."""
        result = parse_events(
            [
                {
                    "id": "r1",
                    "type": "return",
                    "date": "2024-02-01",
                    "amount": 150_000,
                    "month": 24290,
                    "debtFunded": False,
                    "loanAdjustment": 60_000,
                    "netReturn": 90_000,
                    "isPartialLoanPayment": True,
                }
            ]
        )
        assert result.ok
        event = result.events[0]
        assert isinstance(event, ReturnEvent)
        assert event.manual_loan_allocation == 60_000
        assert event.manual_net_return == 90_000

    def test_legacy_payment_record(self):
        result = parse_events(
            [
                {
                    "type": "payment",
                    "date": "2024-01-01",
                    "amount": 500,
                    "month": 202401,
                    "debtFunded": True,
                    "loanAdjustment": 0,
                    "netReturn": 0,
                }
            ]
        )
        assert result.ok
        event = result.events[0]
        assert isinstance(event, PaymentEvent)
        assert event.manual_loan_allocation is None

    def test_legacy_split_does_not_override_manual_fields(self):
        result = parse_events(
            [
                {
                    "type": "return",
                    "date": "2024-02-01",
                    "amount": 100,
                    "loanAdjustment": 10,
                    "manualLoanAllocation": 40,
                }
            ]
        )
        assert result.events[0].manual_loan_allocation == 40

    def test_legacy_split_on_rental_rejected(self):
        result = parse_events(
            [{"kind": "rent", "date": "2024-02-01", "amount": 10, "loanAdjustment": 5}]
        )
        assert result.errors[0].field == "loanAdjustment"

    def test_interest_rejected_by_default(self):
        record = {"kind": "Interest", "date": "2024-01-31", "amount": 1000}
        assert parse_events([record]).errors[0].field == "kind"

        allowed = parse_events([record], IngestSettings(allow_interest=True))
        assert isinstance(allowed.events[0], InterestEvent)

    def test_duplicate_ids(self):
        result = parse_events(
            [
                {"id": "a", "kind": "Payment", "date": "2024-01-01", "amount": 1},
                {"id": "a", "kind": "Payment", "date": "2024-01-02", "amount": 2},
                {"id": "b", "kind": "Payment", "date": "2024-01-03", "amount": 3},
            ],
            existing_ids=["b"],
        )
        assert [e.id for e in result.events] == ["a"]
        assert [e.index for e in result.errors] == [1, 2]

    def test_stable_ids(self):
        """Records without ids get the same content-derived id on every run."""
        records = [
            {"kind": "Payment", "date": "2024-01-01", "amount": 10, "description": "fees"},
            {"kind": "Payment", "date": "2024-01-01", "amount": 10, "description": "fees"},
        ]
        first = parse_events(records)
        second = parse_events(records)
        assert [e.id for e in first.events] == [e.id for e in second.events]
        assert first.events[0].id != first.events[1].id
        assert first.events[0].id.startswith("entry-")
