# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
cashledger Core Framework

Foundational building blocks: primitives (settings, enums, base model) and
the pure financial calculations used by the returns engine.
"""

from . import primitives
from .calculations import FinancialCalculations, XirrResult

__all__ = [
    "primitives",
    "FinancialCalculations",
    "XirrResult",
]
