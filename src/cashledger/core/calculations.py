# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for the return metric. These functions are pure
(math-only) and independent of the ledger; the analysis layer builds the
signed investor flows and delegates the solve here.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

import numpy as np
from pyxirr import InvalidPaymentsError, xirr, xnpv

from .primitives import SolverSettings, XirrStatusEnum

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class XirrResult:
    """
    Outcome of an XIRR solve.

    Attributes:
        rate: Annualized rate as a decimal (0.0 unless CONVERGED)
        status: Whether a root was found, or why not
        method: Solver that produced the rate ("pyxirr", "bisection" or None)
    """

    rate: float
    status: XirrStatusEnum
    method: Optional[str] = None

    @property
    def percent(self) -> float:
        """Rate expressed as a percentage."""
        return self.rate * 100.0

    @property
    def converged(self) -> bool:
        return self.status is XirrStatusEnum.CONVERGED


class FinancialCalculations:
    """
    Pure mathematical functions for financial calculations.

    Static methods for core financial metrics, independent of ledger structure
    or business logic.
    """

    @staticmethod
    def calculate_xirr(
        dates: Sequence[date],
        amounts: Sequence[float],
        settings: Optional[SolverSettings] = None,
    ) -> XirrResult:
        """
        Calculate the annualized money-weighted return of dated cash flows.

        Solves ``sum(a_i / (1 + r) ** (d_i / 365)) == 0`` where ``d_i`` is
        the day count from the earliest flow. PyXIRR is tried first; when it
        cannot produce a finite root a bounded bisection on XNPV takes over.

        Args:
            dates: Flow dates (any order, duplicates allowed)
            amounts: Signed flows; negative = investor outflow
            settings: Solver bounds (defaults to SolverSettings())

        Returns:
            XirrResult; never raises for degenerate input

        Edge Cases Handled:
            - Empty input → 0, NO_DATA
            - All negative / all positive flows → 0, NO_DATA
            - No root in the search bracket → 0, DID_NOT_CONVERGE
            - PyXIRR landing on or below the lower bound (e.g. -100%) → bisection

        Example:
            ```python
            result = FinancialCalculations.calculate_xirr(
                [date(2023, 1, 1), date(2024, 1, 1)], [-100.0, 110.0]
            )
            print(f"XIRR: {result.percent:.2f}%")  # XIRR: 10.00%
            ```
        """
        settings = settings or SolverSettings()
        if len(dates) != len(amounts):
            raise ValueError("dates and amounts must have the same length")

        values = np.asarray(amounts, dtype=float)
        if values.size == 0 or not np.isfinite(values).all():
            return XirrResult(rate=0.0, status=XirrStatusEnum.NO_DATA)

        # Need both an investment and a return
        if not ((values < 0).any() and (values > 0).any()):
            return XirrResult(rate=0.0, status=XirrStatusEnum.NO_DATA)

        flow_dates = list(dates)
        try:
            rate = xirr(flow_dates, values, guess=settings.guess)
        except InvalidPaymentsError as e:
            logger.debug(f"PyXIRR rejected cash flows: {e}")
            rate = None

        # NPV is undefined at -100%, so a boundary answer is not a root
        if rate is not None and math.isfinite(rate) and rate > settings.lower_bound:
            return XirrResult(rate=float(rate), status=XirrStatusEnum.CONVERGED, method="pyxirr")

        logger.warning(f"PyXIRR gave no usable root ({rate!r}); falling back to bisection")
        rate = FinancialCalculations._bisect_xirr(flow_dates, values, settings)
        if rate is None:
            return XirrResult(rate=0.0, status=XirrStatusEnum.DID_NOT_CONVERGE)
        return XirrResult(rate=rate, status=XirrStatusEnum.CONVERGED, method="bisection")

    @staticmethod
    def _bisect_xirr(
        dates: Sequence[date], values: np.ndarray, settings: SolverSettings
    ) -> Optional[float]:
        """Bounded bisection on XNPV; None when no sign change is found."""

        def npv(rate: float) -> float:
            value = xnpv(rate, dates, values)
            return math.nan if value is None else float(value)

        low, high = settings.lower_bound, settings.upper_bound
        npv_low = npv(low)
        npv_high = npv(high)
        if not (math.isfinite(npv_low) and math.isfinite(npv_high)):
            return None

        expansions = 0
        while npv_low * npv_high > 0:
            if expansions >= settings.max_bracket_expansions:
                return None
            high *= 2.0
            npv_high = npv(high)
            expansions += 1
            if not math.isfinite(npv_high):
                return None

        for _ in range(settings.max_iterations):
            mid = (low + high) / 2.0
            npv_mid = npv(mid)
            if npv_mid == 0 or (high - low) / 2.0 < settings.tolerance:
                return mid
            if npv_low * npv_mid < 0:
                high, npv_high = mid, npv_mid
            else:
                low, npv_low = mid, npv_mid

        return None
