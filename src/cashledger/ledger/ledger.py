# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Immutable event ledger.

``CashFlowLedger`` holds the raw events a user has entered. Mutations return a
new ledger; nothing derived (balances, interest, returns) is stored here, so a
recomputation always starts from the events alone.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from .events import CashFlowEventBase, is_interest, sort_events

logger = logging.getLogger(__name__)


class CashFlowLedger:
    """
    Ordered, id-unique collection of cash-flow events.

    Events keep their insertion order internally; ``sorted_events()`` applies
    the chronological ordering used by every replay.

    Example:
        ```python
        ledger = CashFlowLedger()
        ledger = ledger.append(DrawdownEvent(id="d1", date=date(2024, 1, 1), amount=1e5))
        ledger = ledger.replace(DrawdownEvent(id="d1", date=date(2024, 1, 2), amount=1e5))
        ledger = ledger.remove("d1")
        ```
    """

    __slots__ = ("_events",)

    def __init__(self, events: Optional[Iterable[CashFlowEventBase]] = None):
        collected: Tuple[CashFlowEventBase, ...] = tuple(events or ())
        seen = set()
        for event in collected:
            if event.id in seen:
                raise ValueError(f"Duplicate event id '{event.id}'")
            seen.add(event.id)
        self._events = collected

    # ==========================================================================
    # MUTATIONS (return a new ledger)
    # ==========================================================================

    def append(self, event: CashFlowEventBase) -> "CashFlowLedger":
        """Return a ledger with ``event`` added; its id must be new."""
        if event.id in self:
            raise ValueError(f"Event id '{event.id}' already exists in the ledger")
        logger.debug(f"Appending {event.kind} '{event.id}' on {event.date}")
        return CashFlowLedger(self._events + (event,))

    def remove(self, event_id: str) -> "CashFlowLedger":
        """Return a ledger without the event ``event_id``."""
        if event_id not in self:
            raise KeyError(event_id)
        logger.debug(f"Removing event '{event_id}'")
        return CashFlowLedger(e for e in self._events if e.id != event_id)

    def replace(self, event: CashFlowEventBase) -> "CashFlowLedger":
        """Return a ledger where the event sharing ``event.id`` is swapped for ``event``."""
        if event.id not in self:
            raise KeyError(event.id)
        logger.debug(f"Replacing event '{event.id}'")
        return CashFlowLedger(event if e.id == event.id else e for e in self._events)

    # ==========================================================================
    # ACCESS
    # ==========================================================================

    def get(self, event_id: str) -> Optional[CashFlowEventBase]:
        for event in self._events:
            if event.id == event_id:
                return event
        return None

    @property
    def events(self) -> Tuple[CashFlowEventBase, ...]:
        """Events in insertion order."""
        return self._events

    def sorted_events(self) -> List[CashFlowEventBase]:
        """Events in replay order (date, kind priority, insertion)."""
        return sort_events(self._events)

    def without_interest(self) -> "CashFlowLedger":
        """Ledger with every Interest event dropped."""
        return CashFlowLedger(e for e in self._events if not is_interest(e))

    def to_dataframe(self) -> pd.DataFrame:
        """Raw events as a DataFrame, one row per event in replay order."""
        columns = ["id", "date", "kind", "amount", "description"]
        rows = [
            {
                "id": e.id,
                "date": e.date,
                "kind": e.event_kind.value,
                "amount": e.amount,
                "description": e.description,
            }
            for e in self.sorted_events()
        ]
        return pd.DataFrame(rows, columns=columns)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[CashFlowEventBase]:
        return iter(self._events)

    def __contains__(self, event_id: object) -> bool:
        return any(e.id == event_id for e in self._events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CashFlowLedger):
            return NotImplemented
        return self._events == other._events

    def __hash__(self) -> int:
        return hash(self._events)

    def __repr__(self) -> str:
        return f"CashFlowLedger({len(self._events)} events)"
