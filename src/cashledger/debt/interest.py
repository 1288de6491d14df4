# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Interest accrual on the outstanding loan.

The engine walks calendar months from the first event to the horizon, splits
each month into stretches of constant principal, prorates the nominal rate by
day count and emits one ``InterestEvent`` per month with a positive charge.

Interest is simple: charges are cash expenses and never added to principal,
so a month's interest depends only on drawdowns and repayments.
"""

from __future__ import annotations

import bisect
import datetime
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from dateutil.relativedelta import relativedelta

from ..core.primitives import DayCountConvention, InterestSettings
from ..ledger.events import InterestEvent, InterestPeriod, is_interest
from ..ledger.records import ProcessedEvent

logger = logging.getLogger(__name__)

_ONE_DAY = datetime.timedelta(days=1)


@dataclass(frozen=True, slots=True)
class InterestSchedule:
    """
    Interest charges for a ledger.

    Attributes:
        events: One InterestEvent per month with a positive charge
        horizon_end: Last date considered, or None when nothing accrued
    """

    events: Tuple[InterestEvent, ...]
    horizon_end: Optional[datetime.date]

    @property
    def total_interest(self) -> float:
        return sum(event.amount for event in self.events)


def prorate_interest(
    principal: float,
    annual_rate: float,
    days: int,
    days_in_month: int,
    convention: DayCountConvention = DayCountConvention.ACTUAL_PER_MONTH,
) -> float:
    """
    Interest on ``principal`` for ``days`` days.

    Args:
        principal: Balance outstanding over the stretch
        annual_rate: Nominal annual rate as a percentage
        days: Days in the stretch
        days_in_month: Actual days in the calendar month containing the stretch
        convention: Day count convention

    Returns:
        Unrounded interest amount

    Example:
        >>> prorate_interest(120_000, 12, 15, 30)
        600.0
    """
    if principal <= 0 or days <= 0 or annual_rate <= 0:
        return 0.0
    if convention is DayCountConvention.ACTUAL_PER_MONTH:
        return principal * (annual_rate / 100) / 12 / days_in_month * days
    if convention is DayCountConvention.ACTUAL_365:
        return principal * (annual_rate / 100) / 365 * days
    raise ValueError(f"Unsupported day count convention: {convention}")


def month_end(day: datetime.date) -> datetime.date:
    return (pd.Period(pd.Timestamp(day), freq="M").end_time).date()


class InterestAccrualEngine:
    """
    Monthly interest calculator over replayed events.

    The engine is stateless apart from its settings; ``accrue`` can be called
    any number of times and always recomputes from the processed events.

    Example:
        ```python
        engine = InterestAccrualEngine(InterestSettings(annual_rate=12))
        schedule = engine.accrue(replay(events).events)
        for charge in schedule.events:
            print(charge.date, charge.amount)
        ```
    """

    def __init__(self, settings: Optional[InterestSettings] = None):
        self.settings = settings or InterestSettings()

    def resolve_horizon(
        self,
        processed: Sequence[ProcessedEvent],
        horizon_end: Optional[datetime.date] = None,
    ) -> Optional[datetime.date]:
        """
        Pick the last date interest accrues through.

        Order of precedence: the ``horizon_end`` argument, the configured
        ``horizon_end_date``, then the month end of the latest non-interest
        event pushed out by ``horizon_extension_months``.
        """
        if horizon_end is not None:
            return horizon_end
        if self.settings.horizon_end_date is not None:
            return self.settings.horizon_end_date

        dates = [p.date for p in processed if not is_interest(p.event)]
        if not dates:
            return None
        latest = max(dates) + relativedelta(months=self.settings.horizon_extension_months)
        return month_end(latest)

    def accrue(
        self,
        processed: Sequence[ProcessedEvent],
        horizon_end: Optional[datetime.date] = None,
    ) -> InterestSchedule:
        """
        Compute monthly interest events.

        Args:
            processed: Replayed events; any Interest entries are ignored
            horizon_end: Overrides the configured project end

        Returns:
            InterestSchedule with the synthesized events in date order
        """
        base = [p for p in processed if not is_interest(p.event)]
        horizon = self.resolve_horizon(base, horizon_end)
        if not base or horizon is None:
            return InterestSchedule(events=(), horizon_end=horizon)

        first_date = min(p.date for p in base)
        if horizon < first_date:
            logger.debug(f"Horizon {horizon} precedes first event {first_date}; no interest")
            return InterestSchedule(events=(), horizon_end=horizon)

        change_dates, balances = self._end_of_day_balances(base)
        months = pd.period_range(
            start=pd.Period(pd.Timestamp(first_date), freq="M"),
            end=pd.Period(pd.Timestamp(horizon), freq="M"),
            freq="M",
        )

        charges: List[InterestEvent] = []
        for month in months:
            charge = self._accrue_month(month, change_dates, balances)
            if charge is not None:
                charges.append(charge)

        logger.debug(
            f"Accrued interest over {len(months)} months through {horizon}: "
            f"{len(charges)} charges"
        )
        return InterestSchedule(events=tuple(charges), horizon_end=horizon)

    # --------------------------------------------------------------------------

    @staticmethod
    def _end_of_day_balances(
        processed: Sequence[ProcessedEvent],
    ) -> Tuple[List[datetime.date], List[float]]:
        """Outstanding balance after the last event of each event date."""
        by_date: Dict[datetime.date, float] = {}
        for p in processed:
            by_date[p.date] = p.balance_after.outstanding
        dates = sorted(by_date)
        return dates, [by_date[d] for d in dates]

    @staticmethod
    def _principal_on(
        day: datetime.date, change_dates: List[datetime.date], balances: List[float]
    ) -> float:
        index = bisect.bisect_right(change_dates, day) - 1
        return balances[index] if index >= 0 else 0.0

    def _accrue_month(
        self,
        month: pd.Period,
        change_dates: List[datetime.date],
        balances: List[float],
    ) -> Optional[InterestEvent]:
        start = month.start_time.date()
        end = month.end_time.date()
        days_in_month = month.days_in_month
        rate = self.settings.annual_rate
        precision = self.settings.rounding_precision

        # Maximal stretches of constant principal
        lo = bisect.bisect_right(change_dates, start)
        hi = bisect.bisect_right(change_dates, end)
        starts = [start] + change_dates[lo:hi]
        stretches: List[List] = []
        for i, stretch_start in enumerate(starts):
            stretch_end = starts[i + 1] - _ONE_DAY if i + 1 < len(starts) else end
            principal = self._principal_on(stretch_start, change_dates, balances)
            if stretches and math.isclose(stretches[-1][2], principal, abs_tol=1e-9):
                stretches[-1][1] = stretch_end
            else:
                stretches.append([stretch_start, stretch_end, principal])

        periods: List[InterestPeriod] = []
        total = 0.0
        for stretch_start, stretch_end, principal in stretches:
            if principal <= 0:
                continue
            days = (stretch_end - stretch_start).days + 1
            interest = prorate_interest(
                principal, rate, days, days_in_month, self.settings.day_count_convention
            )
            total += interest
            periods.append(
                InterestPeriod(
                    from_date=stretch_start,
                    to_date=stretch_end,
                    days=days,
                    principal=principal,
                    rate=rate,
                    interest=round(interest, precision),
                )
            )

        amount = round(total, precision)
        if amount <= 0:
            return None

        return InterestEvent(
            id=f"interest-{month.year:04d}-{month.month:02d}",
            date=end,
            amount=amount,
            description=f"Interest @ {rate:g}% for {month.strftime('%b %Y')}",
            breakdown=tuple(periods),
        )


def accrue_interest(
    processed: Sequence[ProcessedEvent],
    settings: Optional[InterestSettings] = None,
    horizon_end: Optional[datetime.date] = None,
) -> InterestSchedule:
    """Convenience wrapper around ``InterestAccrualEngine(settings).accrue``."""
    return InterestAccrualEngine(settings).accrue(processed, horizon_end)
