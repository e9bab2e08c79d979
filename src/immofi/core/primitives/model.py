# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models: every input struct and every derived result is frozen.
    The only state carried between years lives in explicit accumulator values
    (see ``TaxCarryForward``) that callers thread themselves.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable models; results are recomputed, never patched
        extra="forbid",  # Catches typos and missing field definitions immediately
    )
