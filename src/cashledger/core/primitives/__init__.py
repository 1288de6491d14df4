# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
cashledger Core Primitives

Building blocks shared by the ledger, debt and analysis layers: the frozen
base model, enumerations, constrained types and pipeline settings.
"""

from .enums import (
    AdjustmentCodeEnum,
    AllocationSourceEnum,
    DayCountConvention,
    EventKindEnum,
    XirrStatusEnum,
)
from .model import Model
from .settings import (
    AllocationSettings,
    IngestSettings,
    InterestSettings,
    LedgerSettings,
    ReportingSettings,
    SolverSettings,
)
from .types import PositiveFloat, PositiveInt

__all__ = [
    # Core models
    "Model",
    # Settings
    "LedgerSettings",
    "InterestSettings",
    "AllocationSettings",
    "SolverSettings",
    "IngestSettings",
    "ReportingSettings",
    # Enums
    "EventKindEnum",
    "AllocationSourceEnum",
    "AdjustmentCodeEnum",
    "XirrStatusEnum",
    "DayCountConvention",
    # Types
    "PositiveFloat",
    "PositiveInt",
]
