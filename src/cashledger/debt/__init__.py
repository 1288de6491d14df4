# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Debt tracking for the cash-flow ledger.

- balance: chronological replay producing loan snapshots per event
- allocation: split of receipts between loan paydown and net return
- interest: monthly day-count interest on the outstanding balance
"""

from .allocation import resolve_allocation
from .balance import ReplayResult, apply_event, replay
from .interest import (
    InterestAccrualEngine,
    InterestSchedule,
    accrue_interest,
    prorate_interest,
)

__all__ = [
    "resolve_allocation",
    "ReplayResult",
    "apply_event",
    "replay",
    "InterestAccrualEngine",
    "InterestSchedule",
    "accrue_interest",
    "prorate_interest",
]
