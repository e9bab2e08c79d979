# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .allowances import (
    holding_period_allowances,
    income_tax_allowance,
    social_charges_allowance,
)
from .capital_gain import (
    CapitalGainResult,
    SaleParameters,
    compute_sale,
    holding_years_between,
    sale_balance,
)

__all__ = [
    "SaleParameters",
    "CapitalGainResult",
    "compute_sale",
    "holding_years_between",
    "sale_balance",
    "holding_period_allowances",
    "income_tax_allowance",
    "social_charges_allowance",
]
