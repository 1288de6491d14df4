# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Cash-flow event models.

Every event is a frozen Pydantic model tagged by ``kind``. The tag selects
the concrete class, so the optional override fields exist only on the kinds
where they mean something (e.g. a RentalIncome event cannot carry a loan
allocation). ``AnyCashFlowEvent`` is the discriminated union used for parsing.
"""

from __future__ import annotations

import datetime
from typing import Annotated, Dict, Iterable, List, Literal, Optional, Tuple, Type, Union
from uuid import uuid4

from pydantic import AliasChoices, Field, TypeAdapter

from ..core.primitives import EventKindEnum, Model, PositiveFloat, PositiveInt


def generate_event_id(prefix: str = "entry") -> str:
    """Generate a fresh event id such as ``entry-3f9c2a1b7d4e``."""
    return f"{prefix}-{uuid4().hex[:12]}"


class InterestPeriod(Model):
    """
    One stretch of constant principal inside an interest month.

    Attributes:
        from_date: First day of the stretch
        to_date: Last day of the stretch (inclusive)
        days: Number of days in the stretch
        principal: Outstanding balance charged during the stretch
        rate: Annual nominal rate as a percentage
        interest: Interest for the stretch, rounded for display
    """

    from_date: datetime.date
    to_date: datetime.date
    days: PositiveInt
    principal: PositiveFloat
    rate: PositiveFloat
    interest: PositiveFloat


class CashFlowEventBase(Model):
    """
    Fields shared by every event.

    ``amount`` is always a magnitude; the effect on the loan and on investor
    totals is derived from ``kind``.
    """

    id: str = Field(default_factory=generate_event_id, min_length=1)
    date: datetime.date
    amount: PositiveFloat
    description: str = ""

    @property
    def event_kind(self) -> EventKindEnum:
        return EventKindEnum(self.kind)

    @property
    def sort_key(self) -> Tuple[datetime.date, int, int]:
        """Chronological key with the same-day kind priority applied."""
        return (self.date, self.event_kind.sort_priority, 0)


_MANUAL_LOAN_ALLOCATION = dict(
    default=None,
    validation_alias=AliasChoices("manual_loan_allocation", "manualLoanAllocation"),
    description="Portion of the amount the user wants applied to the loan.",
)
_MANUAL_NET_RETURN = dict(
    default=None,
    validation_alias=AliasChoices("manual_net_return", "manualNetReturn"),
    description="Portion of the amount the user wants counted as investor return.",
)


class PaymentEvent(CashFlowEventBase):
    """Investor outflow. Pays down the loan only through an explicit allocation."""

    kind: Literal["Payment"] = "Payment"
    manual_loan_allocation: Optional[PositiveFloat] = Field(**_MANUAL_LOAN_ALLOCATION)

    @property
    def sort_key(self) -> Tuple[datetime.date, int, int]:
        # A paydown runs after same-day drawdowns so it sees the new balance
        reduces_loan = 1 if self.manual_loan_allocation is not None else 0
        return (self.date, self.event_kind.sort_priority, reduces_loan)


class DrawdownEvent(CashFlowEventBase):
    """Loan disbursement."""

    kind: Literal["Drawdown"] = "Drawdown"


class RepaymentEvent(CashFlowEventBase):
    """Receipt earmarked for the loan; any surplus is investor return."""

    kind: Literal["Repayment"] = "Repayment"
    manual_loan_allocation: Optional[PositiveFloat] = Field(**_MANUAL_LOAN_ALLOCATION)
    manual_net_return: Optional[PositiveFloat] = Field(**_MANUAL_NET_RETURN)


class ReturnEvent(CashFlowEventBase):
    """Investor inflow such as sale proceeds, possibly part-applied to the loan."""

    kind: Literal["Return"] = "Return"
    manual_loan_allocation: Optional[PositiveFloat] = Field(**_MANUAL_LOAN_ALLOCATION)
    manual_net_return: Optional[PositiveFloat] = Field(**_MANUAL_NET_RETURN)


class RentalIncomeEvent(CashFlowEventBase):
    """Rent received; always counted in full as investor return."""

    kind: Literal["RentalIncome"] = "RentalIncome"


class InterestEvent(CashFlowEventBase):
    """Monthly interest charge synthesized by the accrual engine."""

    kind: Literal["Interest"] = "Interest"
    breakdown: Tuple[InterestPeriod, ...] = ()


# The discriminated union for any event type
AnyCashFlowEvent = Annotated[
    Union[
        PaymentEvent,
        DrawdownEvent,
        RepaymentEvent,
        ReturnEvent,
        RentalIncomeEvent,
        InterestEvent,
    ],
    Field(discriminator="kind"),
]

CashFlowEventAdapter: TypeAdapter = TypeAdapter(AnyCashFlowEvent)

EVENT_TYPES: Dict[EventKindEnum, Type[CashFlowEventBase]] = {
    EventKindEnum.PAYMENT: PaymentEvent,
    EventKindEnum.DRAWDOWN: DrawdownEvent,
    EventKindEnum.REPAYMENT: RepaymentEvent,
    EventKindEnum.RETURN: ReturnEvent,
    EventKindEnum.RENTAL_INCOME: RentalIncomeEvent,
    EventKindEnum.INTEREST: InterestEvent,
}


def sort_events(events: Iterable[CashFlowEventBase]) -> List[CashFlowEventBase]:
    """
    Order events by date, then kind priority, then insertion order.

    Drawdowns and payments land before interest, and interest before
    receipts, so same-day balances do not depend on how the list was built.
    A payment carrying a loan allocation follows same-day drawdowns.
    """
    return sorted(events, key=lambda event: event.sort_key)


def is_interest(event: CashFlowEventBase) -> bool:
    return event.event_kind is EventKindEnum.INTEREST
