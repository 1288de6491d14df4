# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Event model and ledger.

Exposes the tagged event types, the immutable ledger, the derived replay
records, and the validating ingestion boundary.
"""

from .events import (
    EVENT_TYPES,
    AnyCashFlowEvent,
    CashFlowEventAdapter,
    CashFlowEventBase,
    DrawdownEvent,
    InterestEvent,
    InterestPeriod,
    PaymentEvent,
    RentalIncomeEvent,
    RepaymentEvent,
    ReturnEvent,
    generate_event_id,
    sort_events,
)
from .ingest import IngestionResult, parse_amount, parse_date, parse_events
from .ledger import CashFlowLedger
from .records import (
    AllocationAdjustment,
    AllocationResult,
    IngestionError,
    LoanBalanceSnapshot,
    NetCashFlow,
    ProcessedEvent,
)

__all__ = [
    "AnyCashFlowEvent",
    "CashFlowEventAdapter",
    "CashFlowEventBase",
    "DrawdownEvent",
    "EVENT_TYPES",
    "InterestEvent",
    "InterestPeriod",
    "PaymentEvent",
    "RentalIncomeEvent",
    "RepaymentEvent",
    "ReturnEvent",
    "generate_event_id",
    "sort_events",
    "CashFlowLedger",
    "IngestionResult",
    "parse_amount",
    "parse_date",
    "parse_events",
    "AllocationAdjustment",
    "AllocationResult",
    "IngestionError",
    "LoanBalanceSnapshot",
    "NetCashFlow",
    "ProcessedEvent",
]
