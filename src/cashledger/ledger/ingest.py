# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Ingestion boundary for candidate events.

Import sources (CSV, pasted text, extraction services) hand over loosely typed
mappings. ``parse_events`` turns each one into a validated event or a
collected ``IngestionError``; one bad row never blocks the rest of the batch.
"""

from __future__ import annotations

import datetime
import hashlib
import logging
import numbers
import re
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from dateutil import parser as date_parser
from pydantic import ValidationError

from ..core.primitives import EventKindEnum, IngestSettings
from .events import EVENT_TYPES, CashFlowEventBase
from .records import IngestionError

logger = logging.getLogger(__name__)

_AMOUNT_NOISE = re.compile(r"[^\d.\-]")
_MANUAL_FIELDS = (
    "manual_loan_allocation",
    "manualLoanAllocation",
    "manual_net_return",
    "manualNetReturn",
)

# Keys written by the earlier web client: the split fields map onto the manual
# overrides, the rest were derived display state and are dropped
_LEGACY_SPLIT_FIELDS = {
    "loanAdjustment": ("manual_loan_allocation", "manualLoanAllocation"),
    "netReturn": ("manual_net_return", "manualNetReturn"),
}
_LEGACY_DROPPED_FIELDS = ("month", "debtFunded", "isPartialLoanPayment")


@dataclass(frozen=True, slots=True)
class IngestionResult:
    """
    Outcome of a batch ingestion.

    Attributes:
        events: Records that passed validation, in submission order
        errors: One entry per rejected record
    """

    events: Tuple[CashFlowEventBase, ...]
    errors: Tuple[IngestionError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_amount(value: Any) -> float:
    """
    Coerce a numeric or currency-formatted value into a magnitude.

    Accepts numbers and strings such as ``"₹1,00,000.50"`` or ``"-2,500"``;
    the sign is dropped because direction comes from the event kind.

    Raises:
        ValueError: If the value is empty, boolean, or not numeric
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Amount must be numeric, got {value!r}")
    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _AMOUNT_NOISE.sub("", value.strip())
        if cleaned in ("", "-", ".", "-."):
            raise ValueError(f"Amount must be numeric, got {value!r}")
        number = float(cleaned)
    else:
        raise ValueError(f"Amount must be numeric, got {type(value).__name__}")

    if number != number or number in (float("inf"), float("-inf")):
        raise ValueError(f"Amount must be finite, got {value!r}")
    return abs(number)


def parse_date(value: Any, day_first: bool = False) -> datetime.date:
    """
    Coerce a date-like value into a calendar date.

    Raises:
        ValueError: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.parse(value.strip(), dayfirst=day_first).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Unparseable date {value!r}") from e
    raise ValueError(f"Date is required, got {value!r}")


def stable_event_id(
    kind: EventKindEnum,
    date: datetime.date,
    amount: float,
    description: str,
    occurrence: int = 0,
) -> str:
    """Deterministic id for a record that arrived without one."""
    key = f"{kind.value}|{date.isoformat()}|{amount:.2f}|{description}|{occurrence}"
    return f"entry-{hashlib.sha1(key.encode('utf-8')).hexdigest()[:12]}"


def parse_events(
    records: Iterable[Mapping[str, Any]],
    settings: Optional[IngestSettings] = None,
    existing_ids: Iterable[str] = (),
) -> IngestionResult:
    """
    Validate a batch of candidate events.

    Args:
        records: Mappings with snake_case or camelCase keys; ``type`` is
            accepted as an alias of ``kind``
        settings: Date parsing and interest acceptance rules
        existing_ids: Ids already in the target ledger; reusing one is an error

    Returns:
        IngestionResult with accepted events and per-record errors

    Example:
        ```python
        result = parse_events([
            {"type": "drawdown", "date": "2024-01-01", "amount": "1,00,000"},
            {"type": "payment", "date": "not a date", "amount": 500},
        ])
        assert len(result.events) == 1 and len(result.errors) == 1
        ```
    """
    settings = settings or IngestSettings()
    taken = set(existing_ids)
    content_seen: Counter = Counter()
    events: List[CashFlowEventBase] = []
    errors: List[IngestionError] = []

    for index, record in enumerate(records):
        try:
            event = _parse_record(record, settings, content_seen)
        except _RecordError as e:
            errors.append(IngestionError(index=index, message=e.message, event_id=e.event_id, field=e.field))
            continue

        if event.id in taken:
            errors.append(
                IngestionError(
                    index=index,
                    message=f"Duplicate event id '{event.id}'",
                    event_id=event.id,
                    field="id",
                )
            )
            continue

        taken.add(event.id)
        events.append(event)

    if errors:
        logger.warning(f"Rejected {len(errors)} of {len(events) + len(errors)} candidate events")
    logger.debug(f"Accepted {len(events)} candidate events")
    return IngestionResult(events=tuple(events), errors=tuple(errors))


class _RecordError(Exception):
    def __init__(self, message: str, field: Optional[str] = None, event_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.event_id = event_id


def _parse_record(
    record: Mapping[str, Any], settings: IngestSettings, content_seen: Counter
) -> CashFlowEventBase:
    if not isinstance(record, Mapping):
        raise _RecordError(f"Record must be a mapping, got {type(record).__name__}")

    data = dict(record)
    raw_id = data.pop("id", None)
    event_id = str(raw_id).strip() if raw_id not in (None, "") else None

    raw_kind = data.pop("kind", None)
    alias_kind = data.pop("type", None)
    raw_kind = raw_kind if raw_kind is not None else alias_kind
    if raw_kind is None:
        raise _RecordError("Event kind is required", field="kind", event_id=event_id)
    kind = EventKindEnum.from_label(str(raw_kind))
    if kind is None:
        raise _RecordError(f"Unknown event kind {raw_kind!r}", field="kind", event_id=event_id)
    if kind is EventKindEnum.INTEREST and not settings.allow_interest:
        raise _RecordError(
            "Interest events are computed, not imported", field="kind", event_id=event_id
        )

    try:
        date = parse_date(data.pop("date", None), day_first=settings.day_first)
    except ValueError as e:
        raise _RecordError(str(e), field="date", event_id=event_id) from e

    try:
        amount = parse_amount(data.pop("amount", None))
    except ValueError as e:
        raise _RecordError(str(e), field="amount", event_id=event_id) from e

    _map_legacy_fields(data, kind, event_id)

    for name in _MANUAL_FIELDS:
        value = data.get(name)
        if isinstance(value, str):
            try:
                data[name] = parse_amount(value)
            except ValueError as e:
                raise _RecordError(str(e), field=name, event_id=event_id) from e
        elif isinstance(value, numbers.Real) and not isinstance(value, bool):
            data[name] = float(value)

    description = data.pop("description", None) or ""
    if event_id is None:
        content_key = (kind, date, round(amount, 2), description)
        event_id = stable_event_id(kind, date, amount, description, content_seen[content_key])
        content_seen[content_key] += 1

    payload = {
        **data,
        "id": event_id,
        "kind": kind.value,
        "date": date,
        "amount": amount,
        "description": str(description),
    }
    try:
        return EVENT_TYPES[kind].model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise _RecordError(first.get("msg", str(e)), field=field, event_id=event_id) from e


def _map_legacy_fields(data: dict, kind: EventKindEnum, event_id: Optional[str]) -> None:
    """Translate earlier web-client keys in place."""
    for name in _LEGACY_DROPPED_FIELDS:
        data.pop(name, None)

    split = {name: data.pop(name) for name in _LEGACY_SPLIT_FIELDS if name in data}
    # An all-zero split is the client's "not set" default
    if not any(split.values()):
        return

    model_fields = EVENT_TYPES[kind].model_fields
    for legacy, (field_name, alias) in _LEGACY_SPLIT_FIELDS.items():
        value = split.get(legacy)
        if value is None:
            continue
        if field_name not in model_fields:
            if value:
                raise _RecordError(
                    f"{legacy} is not allowed on {kind.value} events",
                    field=legacy,
                    event_id=event_id,
                )
            continue
        if field_name not in data and alias not in data:
            data[field_name] = value
