# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger analysis results.

Flat accessors over one pipeline run. All figures are computed by the
orchestrator; this module only stores and presents them.
"""

from __future__ import annotations

import datetime
from functools import cached_property
from typing import List, Optional, Tuple

import pandas as pd
from pydantic import Field

from ..core.calculations import XirrResult
from ..core.primitives import Model, ReportingSettings, XirrStatusEnum
from ..ledger.events import InterestEvent
from ..ledger.records import (
    AllocationAdjustment,
    LoanBalanceSnapshot,
    NetCashFlow,
    ProcessedEvent,
)
from ..reporting.tables import (
    events_table,
    interest_schedule_table,
    monthly_cash_flow_table,
)
from .aggregator import LedgerTotals


class LedgerSummary(Model):
    """Headline figures handed to the presentation layer."""

    total_investment: float = Field(description="Payments plus interest paid.")
    total_returns: float = Field(description="Net returns of receipts plus rental income.")
    net_profit: float = Field(description="total_returns - total_investment.")
    total_interest_paid: float = Field(description="Sum of monthly interest charges.")
    xirr_percent: float = Field(description="Annualized money-weighted return, in percent.")
    xirr_status: XirrStatusEnum = Field(description="Solver outcome; rate is 0 unless converged.")

    @classmethod
    def from_parts(cls, totals: LedgerTotals, xirr: XirrResult) -> "LedgerSummary":
        return cls(
            total_investment=totals.total_investment,
            total_returns=totals.total_returns,
            net_profit=totals.net_profit,
            total_interest_paid=totals.total_interest_paid,
            xirr_percent=xirr.percent,
            xirr_status=xirr.status,
        )

    def rounded(self, settings: Optional[ReportingSettings] = None) -> "LedgerSummary":
        """Copy with every figure rounded for display."""
        precision = (settings or ReportingSettings()).decimal_precision
        return self.model_copy(
            update={
                "total_investment": round(self.total_investment, precision),
                "total_returns": round(self.total_returns, precision),
                "net_profit": round(self.net_profit, precision),
                "total_interest_paid": round(self.total_interest_paid, precision),
                "xirr_percent": round(self.xirr_percent, precision),
            }
        )


class LedgerAnalysisResult:
    """
    Flat API over one full recomputation of a ledger.

    Principles:
    - Every accessor reads precomputed data; nothing is recalculated here
    - DataFrame views are built lazily and cached
    """

    def __init__(
        self,
        events: Tuple[ProcessedEvent, ...],
        interest_events: Tuple[InterestEvent, ...],
        adjustments: Tuple[AllocationAdjustment, ...],
        final_balance: LoanBalanceSnapshot,
        totals: LedgerTotals,
        xirr: XirrResult,
        net_cash_flows: Tuple[NetCashFlow, ...],
        horizon_end: Optional[datetime.date],
    ):
        self._events = events
        self._interest_events = interest_events
        self._adjustments = adjustments
        self._final_balance = final_balance
        self._totals = totals
        self._xirr = xirr
        self._net_cash_flows = net_cash_flows
        self._horizon_end = horizon_end

    # ==========================================================================
    # DIRECT DATA ACCESS
    # ==========================================================================

    @property
    def events(self) -> Tuple[ProcessedEvent, ...]:
        """Original plus interest events, processed, in replay order."""
        return self._events

    @property
    def interest_events(self) -> Tuple[InterestEvent, ...]:
        return self._interest_events

    @property
    def adjustments(self) -> Tuple[AllocationAdjustment, ...]:
        """Corrections made to manual allocations during the replay."""
        return self._adjustments

    @property
    def final_balance(self) -> LoanBalanceSnapshot:
        return self._final_balance

    @property
    def totals(self) -> LedgerTotals:
        return self._totals

    @property
    def xirr(self) -> XirrResult:
        return self._xirr

    @property
    def net_cash_flows(self) -> Tuple[NetCashFlow, ...]:
        return self._net_cash_flows

    @property
    def horizon_end(self) -> Optional[datetime.date]:
        """Last date interest accrued through."""
        return self._horizon_end

    def get(self, event_id: str) -> Optional[ProcessedEvent]:
        for processed in self._events:
            if processed.id == event_id:
                return processed
        return None

    def balances(self) -> List[LoanBalanceSnapshot]:
        """Loan position after each event, in replay order."""
        return [p.balance_after for p in self._events]

    # ==========================================================================
    # PRIMARY METRICS
    # ==========================================================================

    @cached_property
    def summary(self) -> LedgerSummary:
        return LedgerSummary.from_parts(self._totals, self._xirr)

    @property
    def xirr_percent(self) -> float:
        return self._xirr.percent

    @property
    def total_interest_paid(self) -> float:
        return self._totals.total_interest_paid

    # ==========================================================================
    # TABULAR VIEWS
    # ==========================================================================

    @cached_property
    def events_df(self) -> pd.DataFrame:
        return events_table(self._events)

    @cached_property
    def interest_schedule_df(self) -> pd.DataFrame:
        return interest_schedule_table(self._interest_events)

    @cached_property
    def monthly_cash_flow_df(self) -> pd.DataFrame:
        return monthly_cash_flow_table(self._events)

    def __repr__(self) -> str:
        s = self.summary
        return (
            f"LedgerAnalysisResult(events={len(self._events)}, "
            f"interest_paid={s.total_interest_paid:,.2f}, "
            f"net_profit={s.net_profit:,.2f}, xirr={s.xirr_percent:.2f}%)"
        )
