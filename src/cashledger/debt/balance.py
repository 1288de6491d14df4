# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Loan balance tracking.

``replay`` folds the chronologically sorted events into a fresh
``LoanBalanceSnapshot`` per step. Nothing is carried between calls: the same
events and settings always produce the same snapshots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..core.primitives import AllocationSettings, EventKindEnum
from ..ledger.events import CashFlowEventBase, sort_events
from ..ledger.records import (
    AllocationAdjustment,
    LoanBalanceSnapshot,
    ProcessedEvent,
)
from .allocation import resolve_allocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplayResult:
    """
    Output of one pass over the ledger.

    Attributes:
        events: Processed events in replay order
        final_balance: Loan position after the last event
        adjustments: Corrections made to manual allocations
    """

    events: Tuple[ProcessedEvent, ...]
    final_balance: LoanBalanceSnapshot
    adjustments: Tuple[AllocationAdjustment, ...]

    def balance_on(self, day) -> LoanBalanceSnapshot:
        """Loan position at the end of ``day`` (after every event dated on or before it)."""
        balance = LoanBalanceSnapshot()
        for processed in self.events:
            if processed.date > day:
                break
            balance = processed.balance_after
        return balance


def apply_event(
    balance: LoanBalanceSnapshot,
    event: CashFlowEventBase,
    settings: Optional[AllocationSettings] = None,
) -> Tuple[ProcessedEvent, List[AllocationAdjustment]]:
    """
    Apply a single event to a loan position.

    Args:
        balance: Loan position immediately before the event
        event: Event to apply
        settings: Allocation policy

    Returns:
        Tuple of (processed event, allocation corrections)

    Raises:
        TypeError: If the event kind has no balance rule
    """
    kind = event.event_kind
    allocation, adjustments = resolve_allocation(event, balance.outstanding, settings)

    if kind is EventKindEnum.DRAWDOWN:
        after = balance.draw(event.amount)
    elif kind in (
        EventKindEnum.REPAYMENT,
        EventKindEnum.RETURN,
        EventKindEnum.PAYMENT,
    ):
        after = balance.repay(allocation.loan_adjustment) if allocation.loan_adjustment else balance
    elif kind in (EventKindEnum.RENTAL_INCOME, EventKindEnum.INTEREST):
        # Interest is an expense, never new principal
        after = balance
    else:
        raise TypeError(f"No balance rule for event kind {kind!r}")

    processed = ProcessedEvent(
        event=event,
        balance_before=balance,
        allocation=allocation,
        balance_after=after,
    )
    return processed, adjustments


def replay(
    events: Iterable[CashFlowEventBase],
    settings: Optional[AllocationSettings] = None,
) -> ReplayResult:
    """
    Replay events in chronological order and track the loan.

    Args:
        events: Events in any order; they are sorted by date and kind priority
        settings: Allocation policy for receipts

    Returns:
        ReplayResult with one ProcessedEvent per input event

    Example:
        ```python
        result = replay([
            DrawdownEvent(id="d", date=date(2024, 1, 1), amount=100_000),
            ReturnEvent(id="r", date=date(2024, 2, 1), amount=150_000),
        ])
        assert result.final_balance.outstanding == 0
        assert result.events[-1].allocation.net_return == 50_000
        ```
    """
    balance = LoanBalanceSnapshot()
    processed: List[ProcessedEvent] = []
    adjustments: List[AllocationAdjustment] = []

    for event in sort_events(events):
        step, corrections = apply_event(balance, event, settings)
        processed.append(step)
        adjustments.extend(corrections)
        balance = step.balance_after

    logger.debug(
        f"Replayed {len(processed)} events: drawn {balance.total_drawn:,.2f}, "
        f"repaid {balance.total_repaid:,.2f}, outstanding {balance.outstanding:,.2f}"
    )
    return ReplayResult(
        events=tuple(processed),
        final_balance=balance,
        adjustments=tuple(adjustments),
    )
