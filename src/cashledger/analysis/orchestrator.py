# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger analysis pipeline.

Every call recomputes from the raw events:

1. Strip previously computed Interest events
2. Replay the remaining events to track the loan
3. Accrue monthly interest on the end-of-day outstanding balance
4. Replay the combined events so each charge has a processed entry
5. Aggregate investor totals
6. Solve XIRR over the net investor cash flows

Because interest never feeds back into principal, the second replay sees the
same balance path as the first.
"""

from __future__ import annotations

import datetime
import logging
from typing import Iterable, Optional, Union

from ..core.primitives import LedgerSettings
from ..debt.balance import replay
from ..debt.interest import InterestAccrualEngine
from ..ledger.events import CashFlowEventBase, is_interest
from ..ledger.ledger import CashFlowLedger
from .aggregator import summarize
from .results import LedgerAnalysisResult
from .returns import build_net_cash_flows, calculate_xirr

logger = logging.getLogger(__name__)


def analyze(
    events: Union[CashFlowLedger, Iterable[CashFlowEventBase]],
    settings: Optional[LedgerSettings] = None,
    horizon_end: Optional[datetime.date] = None,
) -> LedgerAnalysisResult:
    """
    Run the full ledger analysis.

    Args:
        events: A CashFlowLedger or any iterable of events. Interest events
            in the input are discarded and recomputed.
        settings: Pipeline configuration; defaults apply when omitted
        horizon_end: Last date interest accrues through; overrides
            ``settings.interest.horizon_end_date``

    Returns:
        LedgerAnalysisResult with processed events, interest schedule,
        totals and XIRR

    Example:
        ```python
        result = analyze(
            [
                DrawdownEvent(id="d1", date=date(2024, 1, 1), amount=100_000),
                PaymentEvent(id="p1", date=date(2024, 1, 15), amount=50_000),
                ReturnEvent(id="r1", date=date(2024, 2, 1), amount=150_000),
            ],
            settings=LedgerSettings(interest=InterestSettings(annual_rate=12)),
        )
        print(result.summary.total_interest_paid)  # 1000.0
        ```
    """
    settings = settings or LedgerSettings()

    base = [event for event in events if not is_interest(event)]
    logger.debug(f"Analyzing ledger with {len(base)} events")

    first_pass = replay(base, settings.allocation)

    engine = InterestAccrualEngine(settings.interest)
    schedule = engine.accrue(first_pass.events, horizon_end)
    if schedule.events:
        logger.debug(
            f"Interest schedule: {len(schedule.events)} charges totalling "
            f"{schedule.total_interest:,.2f} through {schedule.horizon_end}"
        )

    full_pass = replay([*base, *schedule.events], settings.allocation)
    totals = summarize(full_pass.events)
    flows = build_net_cash_flows(full_pass.events)
    xirr = calculate_xirr(flows, settings.solver)
    logger.debug(
        f"Totals: investment {totals.total_investment:,.2f}, returns "
        f"{totals.total_returns:,.2f}, XIRR {xirr.percent:.4f}% ({xirr.status.value})"
    )

    return LedgerAnalysisResult(
        events=full_pass.events,
        interest_events=schedule.events,
        adjustments=full_pass.adjustments,
        final_balance=full_pass.final_balance,
        totals=totals,
        xirr=xirr,
        net_cash_flows=tuple(flows),
        horizon_end=schedule.horizon_end,
    )
