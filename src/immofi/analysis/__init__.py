# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .api import (
    calculate_all_capital_gain_regimes,
    calculate_all_tax_regimes,
    calculate_capital_gain,
    calculate_cash_flows,
    calculate_financial_metrics,
    calculate_gross_yields,
    calculate_irr,
    calculate_monthly_payment,
    effective_annual_rate_pct,
    generate_amortization_schedule,
    irr_by_sale_year,
    project_records,
    replay_investment,
    resolve_schedule,
)
from .investment import Investment
from .metrics import (
    FinancialMetrics,
    cash_flow_table,
    gross_yield,
    gross_yield_table,
    internal_rate_of_return,
    irr_cash_flows,
)

__all__ = [
    "Investment",
    "FinancialMetrics",
    # Entry points
    "generate_amortization_schedule",
    "calculate_monthly_payment",
    "calculate_all_tax_regimes",
    "calculate_all_capital_gain_regimes",
    "calculate_capital_gain",
    "calculate_financial_metrics",
    "calculate_cash_flows",
    "calculate_gross_yields",
    "calculate_irr",
    "irr_by_sale_year",
    # Building blocks
    "resolve_schedule",
    "effective_annual_rate_pct",
    "project_records",
    "replay_investment",
    "cash_flow_table",
    "gross_yield",
    "gross_yield_table",
    "internal_rate_of_return",
    "irr_cash_flows",
]
