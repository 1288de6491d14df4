# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Derived records produced while replaying the ledger.

None of these are persisted; they are rebuilt from the event list on every
recomputation. Plain frozen dataclasses keep the per-event fold cheap.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Optional

from ..core.primitives import AdjustmentCodeEnum, AllocationSourceEnum, EventKindEnum
from .events import CashFlowEventBase


@dataclass(frozen=True, slots=True)
class LoanBalanceSnapshot:
    """
    Loan position at one point in the replay.

    Attributes:
        outstanding: Debt still owed, never negative
        total_drawn: Cumulative drawdowns
        total_repaid: Cumulative amounts applied to the loan
    """

    outstanding: float = 0.0
    total_drawn: float = 0.0
    total_repaid: float = 0.0

    def draw(self, amount: float) -> "LoanBalanceSnapshot":
        return self._with(self.total_drawn + amount, self.total_repaid)

    def repay(self, amount: float) -> "LoanBalanceSnapshot":
        return self._with(self.total_drawn, self.total_repaid + amount)

    def _with(self, total_drawn: float, total_repaid: float) -> "LoanBalanceSnapshot":
        return LoanBalanceSnapshot(
            outstanding=max(0.0, total_drawn - total_repaid),
            total_drawn=total_drawn,
            total_repaid=total_repaid,
        )


@dataclass(frozen=True, slots=True)
class AllocationResult:
    """
    Split of one event between loan paydown and investor return.

    Attributes:
        loan_adjustment: Amount applied to the outstanding loan
        net_return: Amount reaching the investor
        source: Whether the split was automatic, manual, or not applicable
    """

    loan_adjustment: float = 0.0
    net_return: float = 0.0
    source: AllocationSourceEnum = AllocationSourceEnum.NONE

    @property
    def is_partial(self) -> bool:
        """True when the receipt is split across both loan and return."""
        return self.loan_adjustment > 0 and self.net_return > 0


@dataclass(frozen=True, slots=True)
class AllocationAdjustment:
    """
    Warning raised when a manual allocation had to be corrected.

    Attributes:
        event_id: Event whose override was corrected
        code: Reason for the correction
        requested: Value the user supplied
        applied: Value actually used
        message: Human-readable explanation
    """

    event_id: str
    code: AdjustmentCodeEnum
    requested: float
    applied: float
    message: str


@dataclass(frozen=True, slots=True)
class ProcessedEvent:
    """
    An event together with its replay results.

    Attributes:
        event: The original event
        balance_before: Loan position immediately before the event
        allocation: Loan/return split for the event
        balance_after: Loan position immediately after the event
    """

    event: CashFlowEventBase
    balance_before: LoanBalanceSnapshot
    allocation: AllocationResult
    balance_after: LoanBalanceSnapshot

    @property
    def id(self) -> str:
        return self.event.id

    @property
    def date(self) -> datetime.date:
        return self.event.date

    @property
    def amount(self) -> float:
        return self.event.amount

    @property
    def kind(self) -> EventKindEnum:
        return self.event.event_kind


@dataclass(frozen=True, slots=True)
class NetCashFlow:
    """Signed investor cash flow (negative = outflow) used by the XIRR solve."""

    date: datetime.date
    amount: float


@dataclass(frozen=True, slots=True)
class IngestionError:
    """
    A candidate record rejected at the ingestion boundary.

    Attributes:
        index: Position of the record in the submitted batch
        message: What was wrong
        event_id: Id of the record, when it had one
        field: Offending field, when known
    """

    index: int
    message: str
    event_id: Optional[str] = None
    field: Optional[str] = None
