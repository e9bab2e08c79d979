# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Immofi Core Primitives

Building blocks shared by the loan, tax and valuation engines: the immutable
model base, constrained types, enums, settings and the error taxonomy.
"""

from .enums import (
    AppreciationTypeEnum,
    AssetClassEnum,
    DeferralKindEnum,
    TaxRegimeEnum,
)
from .model import Model
from .settings import (
    CalculationSettings,
    FiscalSettings,
    GlobalSettings,
    ReportingSettings,
)
from .types import FloatBetween0And1, PositiveFloat, PositiveInt
from .validation import (
    ConfigurationError,
    IncompleteDataWarning,
    NumericNonConvergence,
    round_currency,
    warn_incomplete,
    warn_non_convergence,
)

__all__ = [
    # Core models
    "Model",
    # Settings
    "GlobalSettings",
    "CalculationSettings",
    "FiscalSettings",
    "ReportingSettings",
    # Enums
    "AppreciationTypeEnum",
    "AssetClassEnum",
    "DeferralKindEnum",
    "TaxRegimeEnum",
    # Types
    "FloatBetween0And1",
    "PositiveFloat",
    "PositiveInt",
    # Errors
    "ConfigurationError",
    "IncompleteDataWarning",
    "NumericNonConvergence",
    "round_currency",
    "warn_incomplete",
    "warn_non_convergence",
]
