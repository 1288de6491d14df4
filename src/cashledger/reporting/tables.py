# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tabular views of analysis output.

These builders turn processed events into pandas DataFrames for display,
sorting and export. They only read results; balances are never changed here.
"""

from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd

from ..core.primitives import EventKindEnum, ReportingSettings
from ..ledger.events import InterestEvent
from ..ledger.records import ProcessedEvent

EVENT_COLUMNS = [
    "id",
    "date",
    "kind",
    "description",
    "amount",
    "loan_adjustment",
    "net_return",
    "allocation_source",
    "outstanding_before",
    "outstanding_after",
]

INTEREST_COLUMNS = [
    "event_id",
    "month",
    "from_date",
    "to_date",
    "days",
    "principal",
    "rate",
    "interest",
]

MONTHLY_COLUMNS = [
    "payments",
    "interest",
    "rental",
    "returns",
    "drawdowns",
    "loan_repaid",
    "net_cash_flow",
    "cumulative_cash_flow",
    "outstanding_balance",
]


def format_currency(value: float, settings: Optional[ReportingSettings] = None) -> str:
    """Format ``value`` with the configured symbol and precision, e.g. ``-₹1,250.00``."""
    settings = settings or ReportingSettings()
    sign = "-" if value < 0 else ""
    return f"{sign}{settings.currency_symbol}{abs(value):,.{settings.decimal_precision}f}"


def events_table(processed: Sequence[ProcessedEvent]) -> pd.DataFrame:
    """One row per processed event, in replay order."""
    rows = [
        {
            "id": p.id,
            "date": p.date,
            "kind": p.kind.value,
            "description": p.event.description,
            "amount": p.amount,
            "loan_adjustment": p.allocation.loan_adjustment,
            "net_return": p.allocation.net_return,
            "allocation_source": p.allocation.source.value,
            "outstanding_before": p.balance_before.outstanding,
            "outstanding_after": p.balance_after.outstanding,
        }
        for p in processed
    ]
    return pd.DataFrame(rows, columns=EVENT_COLUMNS)


def interest_schedule_table(interest_events: Sequence[InterestEvent]) -> pd.DataFrame:
    """Interest breakdown, one row per constant-principal stretch."""
    rows = [
        {
            "event_id": event.id,
            "month": pd.Period(pd.Timestamp(event.date), freq="M"),
            "from_date": period.from_date,
            "to_date": period.to_date,
            "days": period.days,
            "principal": period.principal,
            "rate": period.rate,
            "interest": period.interest,
        }
        for event in interest_events
        for period in event.breakdown
    ]
    return pd.DataFrame(rows, columns=INTEREST_COLUMNS)


def monthly_cash_flow_table(processed: Sequence[ProcessedEvent]) -> pd.DataFrame:
    """
    Investor cash flow by calendar month.

    Returns:
        DataFrame indexed by monthly PeriodIndex with payments and interest
        as positive outflow magnitudes, ``net_cash_flow`` signed from the
        investor perspective, and the loan balance at month end.
    """
    if not processed:
        return pd.DataFrame(columns=MONTHLY_COLUMNS, index=pd.PeriodIndex([], freq="M"))

    frame = pd.DataFrame(
        {
            "month": [pd.Period(pd.Timestamp(p.date), freq="M") for p in processed],
            "kind": [p.kind.value for p in processed],
            "amount": [p.amount for p in processed],
            "net_return": [p.allocation.net_return for p in processed],
            "loan_adjustment": [p.allocation.loan_adjustment for p in processed],
            "outstanding": [p.balance_after.outstanding for p in processed],
        }
    )

    def by_month(values: pd.Series, kind: EventKindEnum) -> pd.Series:
        return values.where(frame["kind"] == kind.value, 0.0).groupby(frame["month"]).sum()

    index = pd.period_range(frame["month"].min(), frame["month"].max(), freq="M")
    table = pd.DataFrame(index=index)
    table["payments"] = by_month(frame["amount"], EventKindEnum.PAYMENT)
    table["interest"] = by_month(frame["amount"], EventKindEnum.INTEREST)
    table["rental"] = by_month(frame["amount"], EventKindEnum.RENTAL_INCOME)
    table["returns"] = by_month(frame["net_return"], EventKindEnum.RETURN) + by_month(
        frame["net_return"], EventKindEnum.REPAYMENT
    )
    table["drawdowns"] = by_month(frame["amount"], EventKindEnum.DRAWDOWN)
    table["loan_repaid"] = frame.groupby("month")["loan_adjustment"].sum()
    table = table.fillna(0.0)

    table["net_cash_flow"] = (
        table["rental"] + table["returns"] - table["payments"] - table["interest"]
    )
    table["cumulative_cash_flow"] = table["net_cash_flow"].cumsum()
    month_end_balance = frame.groupby("month")["outstanding"].last()
    table["outstanding_balance"] = month_end_balance.reindex(index).ffill().fillna(0.0)
    return table[MONTHLY_COLUMNS]
