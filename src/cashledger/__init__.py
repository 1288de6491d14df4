# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
cashledger - Cash-Flow Ledger & Returns Engine for Leveraged Real Estate

Replays dated cash-flow events for a leveraged property investment to track
the outstanding loan, split receipts between debt paydown and investor return,
prorate interest on the debt by day count, and derive an annualized
money-weighted return (XIRR).

Key Entry Points:
- cashledger.analysis.analyze() - Full pipeline over a list of events
- cashledger.analysis.LedgerSession - Mutable front end that recomputes on edit
- cashledger.ledger.parse_events() - Validating ingestion boundary
- cashledger.ledger.* - Event types and the immutable ledger

Example Usage:
    ```python
    from datetime import date

    from cashledger.analysis import analyze
    from cashledger.core.primitives import InterestSettings, LedgerSettings
    from cashledger.ledger import DrawdownEvent, PaymentEvent, ReturnEvent

    events = [
        DrawdownEvent(id="d1", date=date(2024, 1, 1), amount=100_000),
        PaymentEvent(id="p1", date=date(2024, 1, 15), amount=50_000),
        ReturnEvent(id="r1", date=date(2024, 2, 1), amount=150_000),
    ]
    settings = LedgerSettings(interest=InterestSettings(annual_rate=12))

    results = analyze(events, settings)
    print(f"XIRR: {results.summary.xirr_percent:.2f}%")
    ```
"""

# Library logging: applications configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "debt",
    "ledger",
    "reporting",
]


_LAZY_MODULES = {
    "analysis": "cashledger.analysis",
    "core": "cashledger.core",
    "debt": "cashledger.debt",
    "ledger": "cashledger.ledger",
    "reporting": "cashledger.reporting",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'cashledger' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
