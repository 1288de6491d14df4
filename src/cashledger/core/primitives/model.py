# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model shared by events and settings.

    Events and settings never change after construction; an edit produces a
    new instance (``model_copy(update=...)``) that replaces the old one by id.
    Unknown fields are refused so a misspelled allocation override cannot be
    silently dropped.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
        populate_by_name=True,  # field names and camelCase aliases both accepted
    )
