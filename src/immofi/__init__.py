# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import logging

"""
Immofi - Leveraged Rental Property Simulation

Models the life of a French buy-to-let investment financed by a bank loan:
amortization with deferral, annual taxation under the four rental regimes
(micro-foncier, reel-foncier, micro-BIC, reel-BIC) with depreciation carried
forward, and capital-gain taxation at a simulated resale.

Key Entry Points:
- immofi.generate_amortization_schedule() - Loan schedule and deferred interest
- immofi.calculate_all_tax_regimes() - Tax of every regime for one year
- immofi.calculate_all_capital_gain_regimes() - Resale taxation per regime
- immofi.calculate_financial_metrics() - Whole-project summary

Example Usage:
    ```python
    from datetime import date

    from immofi import Investment, LoanTerms, calculate_financial_metrics

    investment = Investment(
        project_start_date=date(2024, 1, 1),
        project_end_date=date(2034, 12, 31),
        purchase_price=200_000.0,
        loan=LoanTerms(principal=180_000.0, annual_rate_pct=3.5, term_years=20),
    )
    metrics = calculate_financial_metrics(investment)
    print(f"Gross yield: {metrics.gross_yield:.2%}")
    ```
"""

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .analysis import (  # noqa: E402
    FinancialMetrics,
    Investment,
    calculate_all_capital_gain_regimes,
    calculate_all_tax_regimes,
    calculate_capital_gain,
    calculate_cash_flows,
    calculate_financial_metrics,
    calculate_gross_yields,
    calculate_irr,
    calculate_monthly_payment,
    generate_amortization_schedule,
    irr_by_sale_year,
)
from .core.primitives import (  # noqa: E402
    ConfigurationError,
    GlobalSettings,
    IncompleteDataWarning,
    NumericNonConvergence,
    TaxRegimeEnum,
)
from .debt import AmortizationRow, LoanTerms  # noqa: E402
from .tax import TaxParameters, YearlyExpenseRecord  # noqa: E402
from .valuation import SaleParameters  # noqa: E402

__all__ = [
    # Inputs
    "Investment",
    "LoanTerms",
    "AmortizationRow",
    "YearlyExpenseRecord",
    "TaxParameters",
    "SaleParameters",
    "GlobalSettings",
    "TaxRegimeEnum",
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
    "FinancialMetrics",
    # Errors
    "ConfigurationError",
    "IncompleteDataWarning",
    "NumericNonConvergence",
]
