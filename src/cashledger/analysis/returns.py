# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investor cash flows and the money-weighted return.

Financing movements are not investor cash: drawdowns are dropped and only
the net-return portion of a receipt counts. The XIRR solve itself lives in
``FinancialCalculations``.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..core.calculations import FinancialCalculations, XirrResult
from ..core.primitives import EventKindEnum, SolverSettings
from ..ledger.records import NetCashFlow, ProcessedEvent


def build_net_cash_flows(processed: Sequence[ProcessedEvent]) -> List[NetCashFlow]:
    """
    Signed investor flows from investor perspective.

    **Sign Convention:**
    - Payment, Interest: NEGATIVE, full amount
    - Return, Repayment, RentalIncome: POSITIVE, net return only
    - Drawdown: excluded (lender money, not investor money)

    Zero flows are dropped.
    """
    flows: List[NetCashFlow] = []
    for p in processed:
        kind = p.kind
        if kind is EventKindEnum.DRAWDOWN:
            continue
        if kind in (EventKindEnum.PAYMENT, EventKindEnum.INTEREST):
            amount = -p.amount
        elif kind in (EventKindEnum.RETURN, EventKindEnum.REPAYMENT, EventKindEnum.RENTAL_INCOME):
            amount = p.allocation.net_return
        else:
            raise TypeError(f"No cash flow rule for event kind {kind!r}")
        if amount != 0:
            flows.append(NetCashFlow(date=p.date, amount=amount))
    return flows


def calculate_xirr(
    flows: Sequence[NetCashFlow], settings: Optional[SolverSettings] = None
) -> XirrResult:
    """XIRR of investor flows; 0 with a status flag when undefined."""
    return FinancialCalculations.calculate_xirr(
        [f.date for f in flows], [f.amount for f in flows], settings
    )
