# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investor totals over a processed ledger.

Drawdowns and the loan-applied portion of receipts are financing movements
and stay out of every investor total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..core.primitives import EventKindEnum
from ..ledger.records import ProcessedEvent


@dataclass(frozen=True, slots=True)
class LedgerTotals:
    """
    Aggregate investor figures.

    Attributes:
        total_investment: Payments plus interest paid
        total_returns: Net returns of receipts plus rental income
        total_interest_paid: Interest charges
        total_drawn: Loan disbursements (informational)
        total_loan_repaid: Receipts and payments applied to the loan (informational)
        final_outstanding: Loan still owed after the last event
    """

    total_investment: float = 0.0
    total_returns: float = 0.0
    total_interest_paid: float = 0.0
    total_drawn: float = 0.0
    total_loan_repaid: float = 0.0
    final_outstanding: float = 0.0

    @property
    def net_profit(self) -> float:
        return self.total_returns - self.total_investment


def summarize(processed: Sequence[ProcessedEvent]) -> LedgerTotals:
    """Sum investor totals by event kind."""
    if not processed:
        return LedgerTotals()

    kinds = np.array([p.kind.value for p in processed])
    amounts = np.array([p.amount for p in processed], dtype=float)
    net_returns = np.array([p.allocation.net_return for p in processed], dtype=float)
    loan_adjustments = np.array([p.allocation.loan_adjustment for p in processed], dtype=float)

    def mask(*members: EventKindEnum) -> np.ndarray:
        return np.isin(kinds, [m.value for m in members])

    payments = amounts[mask(EventKindEnum.PAYMENT)].sum()
    interest = amounts[mask(EventKindEnum.INTEREST)].sum()
    receipts = net_returns[mask(EventKindEnum.RETURN, EventKindEnum.REPAYMENT)].sum()
    rental = amounts[mask(EventKindEnum.RENTAL_INCOME)].sum()

    return LedgerTotals(
        total_investment=float(payments + interest),
        total_returns=float(receipts + rental),
        total_interest_paid=float(interest),
        total_drawn=float(amounts[mask(EventKindEnum.DRAWDOWN)].sum()),
        total_loan_repaid=float(loan_adjustments.sum()),
        final_outstanding=float(processed[-1].balance_after.outstanding),
    )
