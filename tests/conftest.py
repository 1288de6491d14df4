# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for cashledger testing.

Small builders that create events with sensible ids and defaults so tests
only spell out the fields they care about.
"""

from __future__ import annotations

from datetime import date
from typing import List

import pytest

from cashledger.core.primitives import InterestSettings, LedgerSettings
from cashledger.ledger import (
    CashFlowEventBase,
    DrawdownEvent,
    PaymentEvent,
    RentalIncomeEvent,
    RepaymentEvent,
    ReturnEvent,
)


# Event builders
def drawdown(day: date, amount: float, id: str = None) -> DrawdownEvent:
    """Create a drawdown with an id derived from its date."""
    return DrawdownEvent(id=id or f"draw-{day.isoformat()}", date=day, amount=amount)


def payment(day: date, amount: float, id: str = None, **overrides) -> PaymentEvent:
    return PaymentEvent(id=id or f"pay-{day.isoformat()}", date=day, amount=amount, **overrides)


def repayment(day: date, amount: float, id: str = None, **overrides) -> RepaymentEvent:
    return RepaymentEvent(id=id or f"repay-{day.isoformat()}", date=day, amount=amount, **overrides)


def sale(day: date, amount: float, id: str = None, **overrides) -> ReturnEvent:
    """Create a Return receipt (e.g. sale proceeds)."""
    return ReturnEvent(id=id or f"return-{day.isoformat()}", date=day, amount=amount, **overrides)


def rent(day: date, amount: float, id: str = None) -> RentalIncomeEvent:
    return RentalIncomeEvent(id=id or f"rent-{day.isoformat()}", date=day, amount=amount)


def create_ledger_settings(annual_rate: float = 12.0, **interest_overrides) -> LedgerSettings:
    """
    Create pipeline settings with a given nominal rate.

    Example:
        >>> settings = create_ledger_settings(9.5, horizon_extension_months=2)
        >>> settings.interest.annual_rate
        9.5
    """
    return LedgerSettings(
        interest=InterestSettings(annual_rate=annual_rate, **interest_overrides)
    )


# Fixtures
@pytest.fixture
def flip_events() -> List[CashFlowEventBase]:
    """Drawdown, equity payment, then a sale that clears the loan."""
    return [
        drawdown(date(2024, 1, 1), 100_000, id="d1"),
        payment(date(2024, 1, 15), 50_000, id="p1"),
        sale(date(2024, 2, 1), 150_000, id="r1"),
    ]


@pytest.fixture
def settings_12pct() -> LedgerSettings:
    return create_ledger_settings(12.0)
