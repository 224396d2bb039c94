# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Shared base for settings and the raw-source batch.

    Instances are read-only once validated; ledger accumulation happens in
    plain dataclasses instead.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",  # misspelled settings keys fail at construction
        arbitrary_types_allowed=True,
    )
