# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Allocation of receipts between loan paydown and investor return.

Given an event and the outstanding balance just before it, decide how much of
the amount retires debt. Manual overrides are honoured up to what the balance
and the amount allow; anything beyond is clamped and reported.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..core.primitives import (
    AdjustmentCodeEnum,
    AllocationSettings,
    AllocationSourceEnum,
    EventKindEnum,
)
from ..ledger.events import CashFlowEventBase
from ..ledger.records import AllocationAdjustment, AllocationResult

logger = logging.getLogger(__name__)


def resolve_allocation(
    event: CashFlowEventBase,
    outstanding: float,
    settings: Optional[AllocationSettings] = None,
) -> Tuple[AllocationResult, List[AllocationAdjustment]]:
    """
    Split ``event`` into loan adjustment and net return.

    Policy by kind:
    - Drawdown, Interest: no split
    - RentalIncome: full amount is net return
    - Payment: only an explicit ``manual_loan_allocation`` touches the loan
    - Return, Repayment: manual override, else ``min(amount, outstanding)``
      (Return only when ``auto_apply_returns_to_loan`` is on)

    Args:
        event: Event being replayed
        outstanding: Loan balance immediately before the event
        settings: Allocation policy (defaults to AllocationSettings())

    Returns:
        Tuple of (allocation, corrections applied to manual overrides)

    Raises:
        ValueError: In strict mode, when a manual override is invalid
        TypeError: If the event kind has no allocation rule
    """
    settings = settings or AllocationSettings()
    kind = event.event_kind

    if kind in (EventKindEnum.DRAWDOWN, EventKindEnum.INTEREST):
        return AllocationResult(), []
    if kind is EventKindEnum.RENTAL_INCOME:
        return AllocationResult(net_return=event.amount), []
    if kind is EventKindEnum.PAYMENT:
        return _resolve_payment(event, outstanding, settings)
    if kind in (EventKindEnum.RETURN, EventKindEnum.REPAYMENT):
        return _resolve_receipt(event, outstanding, settings)
    raise TypeError(f"No allocation rule for event kind {kind!r}")


def _resolve_payment(
    event: CashFlowEventBase, outstanding: float, settings: AllocationSettings
) -> Tuple[AllocationResult, List[AllocationAdjustment]]:
    requested = event.manual_loan_allocation
    if requested is None:
        return AllocationResult(), []

    adjustments: List[AllocationAdjustment] = []
    loan = _clamp_manual(event, requested, outstanding, settings, adjustments)
    return AllocationResult(loan_adjustment=loan, source=AllocationSourceEnum.MANUAL), adjustments


def _resolve_receipt(
    event: CashFlowEventBase, outstanding: float, settings: AllocationSettings
) -> Tuple[AllocationResult, List[AllocationAdjustment]]:
    amount = event.amount
    manual_loan = event.manual_loan_allocation
    manual_net = event.manual_net_return

    if manual_loan is None and manual_net is None:
        if event.event_kind is EventKindEnum.REPAYMENT or settings.auto_apply_returns_to_loan:
            loan = min(amount, outstanding)
            return (
                AllocationResult(
                    loan_adjustment=loan,
                    net_return=amount - loan,
                    source=AllocationSourceEnum.AUTO,
                ),
                [],
            )
        return AllocationResult(net_return=amount), []

    adjustments: List[AllocationAdjustment] = []
    if manual_loan is not None:
        requested = manual_loan
    else:
        requested = amount - manual_net
        if requested < -settings.tolerance:
            _record(
                event,
                AdjustmentCodeEnum.EXCEEDS_AMOUNT,
                requested=manual_net,
                applied=amount,
                message=f"Net return {manual_net:,.2f} exceeds amount {amount:,.2f}",
                settings=settings,
                adjustments=adjustments,
            )
        requested = max(0.0, requested)

    loan = _clamp_manual(event, requested, outstanding, settings, adjustments)
    net = amount - loan

    # With a net return alone the loan is derived from it, so any gap was
    # already reported by the clamp that caused it
    if manual_loan is not None and manual_net is not None and abs(net - manual_net) > settings.tolerance:
        _record(
            event,
            AdjustmentCodeEnum.NET_RETURN_MISMATCH,
            requested=manual_net,
            applied=net,
            message=(
                f"Net return {manual_net:,.2f} does not reconcile with loan "
                f"adjustment {loan:,.2f} and amount {amount:,.2f}; using {net:,.2f}"
            ),
            settings=settings,
            adjustments=adjustments,
        )

    return (
        AllocationResult(loan_adjustment=loan, net_return=net, source=AllocationSourceEnum.MANUAL),
        adjustments,
    )


def _clamp_manual(
    event: CashFlowEventBase,
    requested: float,
    outstanding: float,
    settings: AllocationSettings,
    adjustments: List[AllocationAdjustment],
) -> float:
    """Bound a requested loan adjustment by the amount, then by the balance."""
    loan = requested
    if loan > event.amount:
        if loan - event.amount > settings.tolerance:
            _record(
                event,
                AdjustmentCodeEnum.EXCEEDS_AMOUNT,
                requested=loan,
                applied=event.amount,
                message=f"Loan allocation {loan:,.2f} exceeds amount {event.amount:,.2f}",
                settings=settings,
                adjustments=adjustments,
            )
        loan = event.amount
    if loan > outstanding:
        if loan - outstanding > settings.tolerance:
            _record(
                event,
                AdjustmentCodeEnum.EXCEEDS_OUTSTANDING,
                requested=loan,
                applied=outstanding,
                message=(
                    f"Loan allocation {loan:,.2f} exceeds outstanding balance "
                    f"{outstanding:,.2f}"
                ),
                settings=settings,
                adjustments=adjustments,
            )
        loan = outstanding
    return max(0.0, loan)


def _record(
    event: CashFlowEventBase,
    code: AdjustmentCodeEnum,
    requested: float,
    applied: float,
    message: str,
    settings: AllocationSettings,
    adjustments: List[AllocationAdjustment],
) -> None:
    if settings.strict:
        raise ValueError(f"Event '{event.id}': {message}")
    logger.warning(f"Event '{event.id}': {message}; clamped")
    adjustments.append(
        AllocationAdjustment(
            event_id=event.id,
            code=code,
            requested=requested,
            applied=applied,
            message=message,
        )
    )
