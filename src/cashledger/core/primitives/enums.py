# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Optional


class EventKindEnum(str, Enum):
    """
    Kinds of dated cash-flow events recorded against a leveraged investment.

    The kind alone decides how an event moves the loan balance and how it
    enters investor totals; amounts are always stored as magnitudes.

    - DRAWDOWN: loan disbursement, raises the outstanding balance
    - PAYMENT: investor outflow (expense), no loan effect by default
    - REPAYMENT: receipt earmarked for the loan, applied to debt first
    - RETURN: investor inflow (e.g. sale proceeds), may pay down debt
    - RENTAL_INCOME: investor inflow with no loan effect
    - INTEREST: synthetic monthly interest charge, an expense
    """

    PAYMENT = "Payment"
    DRAWDOWN = "Drawdown"
    REPAYMENT = "Repayment"
    RETURN = "Return"
    RENTAL_INCOME = "RentalIncome"
    INTEREST = "Interest"

    @property
    def sort_priority(self) -> int:
        """Same-day ordering: money in before interest before receipts."""
        if self in (EventKindEnum.DRAWDOWN, EventKindEnum.PAYMENT):
            return 0
        if self is EventKindEnum.INTEREST:
            return 1
        return 2

    @property
    def is_receipt(self) -> bool:
        """Investor-facing inflows."""
        return self in (
            EventKindEnum.RETURN,
            EventKindEnum.REPAYMENT,
            EventKindEnum.RENTAL_INCOME,
        )

    @property
    def is_allocatable(self) -> bool:
        """Receipts whose amount is split between loan and net return."""
        return self in (EventKindEnum.RETURN, EventKindEnum.REPAYMENT)

    @classmethod
    def from_label(cls, label: str) -> Optional["EventKindEnum"]:
        """
        Resolve a loosely written kind label.

        Matching ignores case, spaces, hyphens and underscores, and accepts
        the common synonyms found in imported spreadsheets.

        Args:
            label: Raw kind label such as "rental income" or "Drawdown"

        Returns:
            The matching member, or None when the label is unknown
        """
        key = "".join(ch for ch in label.lower() if ch.isalnum())
        return _KIND_SYNONYMS.get(key)


_KIND_SYNONYMS = {
    "payment": EventKindEnum.PAYMENT,
    "expense": EventKindEnum.PAYMENT,
    "drawdown": EventKindEnum.DRAWDOWN,
    "draw": EventKindEnum.DRAWDOWN,
    "disbursement": EventKindEnum.DRAWDOWN,
    "repayment": EventKindEnum.REPAYMENT,
    "return": EventKindEnum.RETURN,
    "sale": EventKindEnum.RETURN,
    "rental": EventKindEnum.RENTAL_INCOME,
    "rent": EventKindEnum.RENTAL_INCOME,
    "rentalincome": EventKindEnum.RENTAL_INCOME,
    "interest": EventKindEnum.INTEREST,
}


class AllocationSourceEnum(str, Enum):
    """Where a receipt's loan/return split came from."""

    AUTO = "auto"  # min(amount, outstanding)
    MANUAL = "manual"  # user override, possibly clamped
    NONE = "none"  # no split applies to this event


class AdjustmentCodeEnum(str, Enum):
    """Reasons an allocation override was corrected."""

    EXCEEDS_OUTSTANDING = "exceeds_outstanding"
    EXCEEDS_AMOUNT = "exceeds_amount"
    NET_RETURN_MISMATCH = "net_return_mismatch"


class XirrStatusEnum(str, Enum):
    """Outcome of an XIRR solve. The rate is 0 for every status but CONVERGED."""

    CONVERGED = "converged"
    NO_DATA = "no_data"  # flows lack a strictly negative and a strictly positive entry
    DID_NOT_CONVERGE = "did_not_converge"


class DayCountConvention(str, Enum):
    """Day count conventions for interest proration."""

    ACTUAL_PER_MONTH = "Actual/Month"  # monthly rate spread over the month's actual days
    ACTUAL_365 = "Actual/365"  # annual rate spread over a fixed 365-day year
