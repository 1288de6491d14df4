# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from .enums import DayCountConvention
from .model import Model
from .types import PositiveFloat, PositiveInt


class InterestSettings(Model):
    """
    Terms used by the interest accrual engine.

    Interest is simple and non-compounding: each month's charge is a cash
    expense and never becomes part of the outstanding principal.

    Usage Examples:
        # 12% nominal, per-month day count, horizon derived from the ledger
        interest = InterestSettings(annual_rate=12)

        # Fixed project end, Actual/365 day count
        interest = InterestSettings(
            annual_rate=9.5,
            day_count_convention=DayCountConvention.ACTUAL_365,
            horizon_end_date=date(2026, 3, 31),
        )
    """

    annual_rate: PositiveFloat = Field(
        default=0.0,
        description="Nominal annual interest rate as a percentage (e.g., 12 for 12%).",
    )
    day_count_convention: DayCountConvention = Field(
        default=DayCountConvention.ACTUAL_PER_MONTH,
        description="How a month's interest is prorated across its days.",
    )
    horizon_end_date: Optional[date] = Field(
        default=None,
        description="Project end; interest accrues through the month containing it.",
    )
    horizon_extension_months: PositiveInt = Field(
        default=0,
        description=(
            "Months added past the latest non-interest event when no explicit "
            "horizon is given."
        ),
    )
    rounding_precision: PositiveInt = Field(
        default=2,
        description="Decimal places for monthly interest charges and breakdown lines.",
    )


class AllocationSettings(Model):
    """Policy for splitting receipts between loan paydown and net return."""

    auto_apply_returns_to_loan: bool = Field(
        default=True,
        description="Apply Return receipts to the outstanding loan before counting them as net return.",
    )
    tolerance: PositiveFloat = Field(
        default=0.01,
        description="Allowed rounding gap between loan adjustment + net return and the amount.",
    )
    strict: bool = Field(
        default=False,
        description="If True, raise on an invalid manual allocation; otherwise clamp and warn.",
    )


class SolverSettings(Model):
    """Bounds for the XIRR root search."""

    guess: float = Field(default=0.1, description="Starting rate for the primary solver.")
    max_iterations: PositiveInt = Field(
        default=200, description="Cap on bisection steps in the fallback search."
    )
    tolerance: PositiveFloat = Field(
        default=1e-9, description="Bracket width at which bisection stops."
    )
    lower_bound: float = Field(
        default=-0.9999, gt=-1.0, description="Lowest rate considered (must exceed -100%)."
    )
    upper_bound: float = Field(
        default=1.0, gt=0, description="Initial upper edge of the bisection bracket."
    )
    max_bracket_expansions: PositiveInt = Field(
        default=20, description="Times the upper edge may double while hunting a sign change."
    )

    @model_validator(mode="after")
    def check_bracket(self) -> "SolverSettings":
        """Ensure the bracket is ordered."""
        if self.upper_bound <= self.lower_bound:
            raise ValueError("upper_bound must be greater than lower_bound")
        return self


class IngestSettings(Model):
    """Rules for accepting candidate events from import sources."""

    day_first: bool = Field(
        default=False,
        description="Read ambiguous string dates such as 03-04-2024 as day-month-year.",
    )
    allow_interest: bool = Field(
        default=False,
        description="Accept Interest records; by default interest is always recomputed.",
    )


class ReportingSettings(Model):
    """Settings related to tabular output and display."""

    decimal_precision: PositiveInt = Field(
        default=2, description="Number of decimal places for currency values."
    )
    currency_symbol: str = Field(default="₹", description="Symbol used by format_currency.")


# --- Main Settings Class ---


class LedgerSettings(Model):
    """Ledger settings

    Groups every tunable of the pipeline by functional area. The defaults
    reproduce the standard policy: auto-applied returns, non-compounding
    interest with per-month day count, horizon derived from the ledger.
    """

    interest: InterestSettings = Field(default_factory=InterestSettings)
    allocation: AllocationSettings = Field(default_factory=AllocationSettings)
    solver: SolverSettings = Field(default_factory=SolverSettings)
    ingest: IngestSettings = Field(default_factory=IngestSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)
