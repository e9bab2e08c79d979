# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .depreciation import (
    AssetLedger,
    DepreciationLedger,
    DepreciationLedgerEntry,
    DepreciationStep,
    advance_year,
    depreciation_table,
    replay_depreciation,
)
from .expenses import (
    ExpenseProjection,
    YearlyExpenseRecord,
    expenses_for_year,
    with_loan_costs,
)
from .parameters import TaxParameters
from .regimes import (
    TaxCarryForward,
    TaxResult,
    YearTaxOutcome,
    compute_regime,
    compute_year,
    is_eligible,
    recommended_regime,
    replay_years,
    results_table,
)

__all__ = [
    # Inputs
    "TaxParameters",
    "YearlyExpenseRecord",
    "ExpenseProjection",
    "expenses_for_year",
    "with_loan_costs",
    # Depreciation
    "AssetLedger",
    "DepreciationLedger",
    "DepreciationLedgerEntry",
    "DepreciationStep",
    "advance_year",
    "replay_depreciation",
    "depreciation_table",
    # Regimes
    "TaxCarryForward",
    "TaxResult",
    "YearTaxOutcome",
    "compute_regime",
    "compute_year",
    "replay_years",
    "is_eligible",
    "recommended_regime",
    "results_table",
]
