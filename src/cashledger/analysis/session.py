# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Editable front end over an immutable ledger.

A ``LedgerSession`` holds the current ``CashFlowLedger`` and settings. Every
edit swaps in a new ledger and drops the cached analysis, so the next read of
``results`` replays the whole ledger from scratch.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Iterable, Mapping, Optional

from ..core.primitives import LedgerSettings
from ..ledger.events import CashFlowEventBase
from ..ledger.ingest import IngestionResult, parse_events
from ..ledger.ledger import CashFlowLedger
from .orchestrator import analyze
from .results import LedgerAnalysisResult

logger = logging.getLogger(__name__)


class LedgerSession:
    """
    Mutable wrapper that recomputes on demand.

    Example:
        ```python
        session = LedgerSession(settings=LedgerSettings(
            interest=InterestSettings(annual_rate=12),
        ))
        session.append(DrawdownEvent(id="d1", date=date(2024, 1, 1), amount=100_000))
        session.append(ReturnEvent(id="r1", date=date(2024, 3, 1), amount=120_000))
        print(session.results.summary.net_profit)
        ```
    """

    def __init__(
        self,
        ledger: Optional[CashFlowLedger] = None,
        settings: Optional[LedgerSettings] = None,
        horizon_end: Optional[datetime.date] = None,
    ):
        self._ledger = ledger if ledger is not None else CashFlowLedger()
        self._settings = settings or LedgerSettings()
        self._horizon_end = horizon_end
        self._results: Optional[LedgerAnalysisResult] = None

    @property
    def ledger(self) -> CashFlowLedger:
        return self._ledger

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    @property
    def horizon_end(self) -> Optional[datetime.date]:
        return self._horizon_end

    @property
    def results(self) -> LedgerAnalysisResult:
        """Analysis of the current ledger, recomputed after any edit."""
        if self._results is None:
            self._results = analyze(self._ledger, self._settings, self._horizon_end)
        return self._results

    # --------------------------------------------------------------------------
    # Edits
    # --------------------------------------------------------------------------

    def append(self, event: CashFlowEventBase) -> None:
        self._swap(self._ledger.append(event))

    def remove(self, event_id: str) -> None:
        self._swap(self._ledger.remove(event_id))

    def replace(self, event: CashFlowEventBase) -> None:
        self._swap(self._ledger.replace(event))

    def set_settings(self, settings: LedgerSettings) -> None:
        self._settings = settings
        self._invalidate()

    def set_horizon_end(self, horizon_end: Optional[datetime.date]) -> None:
        self._horizon_end = horizon_end
        self._invalidate()

    def ingest(self, records: Iterable[Mapping[str, Any]]) -> IngestionResult:
        """
        Validate raw records and append the ones that pass.

        Ids already in the ledger count as duplicates. Rejected records are
        returned in ``IngestionResult.errors`` and leave the ledger untouched.
        """
        result = parse_events(
            records,
            settings=self._settings.ingest,
            existing_ids=[event.id for event in self._ledger],
        )
        if result.events:
            ledger = self._ledger
            for event in result.events:
                ledger = ledger.append(event)
            self._swap(ledger)
        return result

    def _swap(self, ledger: CashFlowLedger) -> None:
        self._ledger = ledger
        self._invalidate()

    def _invalidate(self) -> None:
        if self._results is not None:
            logger.debug(f"Ledger changed ({len(self._ledger)} events); results invalidated")
        self._results = None

    def __repr__(self) -> str:
        return f"LedgerSession(events={len(self._ledger)})"
