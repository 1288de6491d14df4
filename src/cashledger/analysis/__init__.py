# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ledger analysis: pipeline orchestration, returns and totals.

The public entry point is ``analyze``; ``LedgerSession`` wraps it for
callers that edit a ledger and re-read results.
"""

from .aggregator import LedgerTotals, summarize
from .orchestrator import analyze
from .results import LedgerAnalysisResult, LedgerSummary
from .returns import build_net_cash_flows, calculate_xirr
from .session import LedgerSession

__all__ = [
    "LedgerAnalysisResult",
    "LedgerSession",
    "LedgerSummary",
    "LedgerTotals",
    "analyze",
    "build_net_cash_flows",
    "calculate_xirr",
    "summarize",
]
