# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""Read-only tabular views and display helpers for analysis results."""

from .tables import (
    events_table,
    format_currency,
    interest_schedule_table,
    monthly_cash_flow_table,
)

__all__ = [
    "events_table",
    "format_currency",
    "interest_schedule_table",
    "monthly_cash_flow_table",
]
