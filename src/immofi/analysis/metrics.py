# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Whole-project profitability metrics.

Pure helpers over already computed tax outcomes and expense records: yearly
cash flows per regime, yields, cash-on-cash return and internal rate of
return. Ratios are decimals (0.05 for 5%).
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Optional, Sequence

import pandas as pd
from pyxirr import InvalidPaymentsError, irr

from ..core.primitives import Model, TaxRegimeEnum, round_currency
from ..tax import YearlyExpenseRecord, YearTaxOutcome, expenses_for_year

logger = logging.getLogger(__name__)


CURRENCY_FIELDS = (
    "total_investment_cost",
    "monthly_payment",
    "monthly_insurance",
    "monthly_costs",
    "monthly_cash_flow",
    "annual_cash_flow",
    "outstanding_balance_at_sale",
    "deferred_interest",
)


class FinancialMetrics(Model):
    """
    Headline figures of an investment.

    Attributes:
        total_investment_cost: Price plus every acquisition cost
        monthly_payment: Loan instalment including borrower insurance
        monthly_insurance: Borrower insurance per month
        monthly_costs: Operating costs of the first year, per month
        gross_yield: First-year collected rent over the acquisition cost
        net_yield: First-year collected rent net of operating costs over the acquisition cost
        monthly_cash_flow: Rent minus operating costs and loan instalment, per month
        annual_cash_flow: ``monthly_cash_flow`` over twelve months
        roi: Annual cash flow over the down payment
        outstanding_balance_at_sale: Loan balance at the end of the sale year
        deferred_interest: Interest capitalized during a total deferral
        sale_year: Year of the simulated resale
        sale_balance: Net proceeds at sale per regime
        irr: Internal rate of return per regime for ``sale_year``
        recommended_regime: Eligible regime with the highest first-year net income
    """

    total_investment_cost: float
    monthly_payment: float
    monthly_insurance: float = 0.0
    monthly_costs: float = 0.0
    gross_yield: float = 0.0
    net_yield: float = 0.0
    monthly_cash_flow: float = 0.0
    annual_cash_flow: float = 0.0
    roi: float = 0.0
    outstanding_balance_at_sale: float = 0.0
    deferred_interest: float = 0.0
    sale_year: Optional[int] = None
    sale_balance: Dict[TaxRegimeEnum, float] = {}
    irr: Dict[TaxRegimeEnum, float] = {}
    recommended_regime: Optional[TaxRegimeEnum] = None

    def rounded(self, decimals: int = 2) -> "FinancialMetrics":
        """Copy with currency amounts rounded for display; ratios are left as is."""
        update = {name: round_currency(getattr(self, name), decimals) for name in CURRENCY_FIELDS}
        update["sale_balance"] = {
            regime: round_currency(value, decimals) for regime, value in self.sale_balance.items()
        }
        return self.model_copy(update=update)


def safe_ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def gross_yield(
    record: YearlyExpenseRecord,
    regime: TaxRegimeEnum,
    basis: float,
    vacancy_rate: float = 0.0,
) -> float:
    """Everything collected under ``regime`` over the acquisition basis."""
    return safe_ratio(record.collected_revenue(TaxRegimeEnum(regime), vacancy_rate), basis)


def gross_yield_table(
    records: Sequence[YearlyExpenseRecord],
    years: Sequence[int],
    basis: float,
    vacancy_rate: float = 0.0,
) -> pd.DataFrame:
    """Gross yield per year (rows) and regime (columns)."""
    data = {
        regime.value: [
            gross_yield(_record(records, year), regime, basis, vacancy_rate)
            for year in years
        ]
        for regime in TaxRegimeEnum.ordered()
    }
    return pd.DataFrame(data, index=pd.Index(list(years), name="year"))


def _record(records: Sequence[YearlyExpenseRecord], year: int) -> YearlyExpenseRecord:
    for record in records:
        if record.year == year:
            return record
    return YearlyExpenseRecord(year=year)


def yearly_cash_flow(
    outcome: YearTaxOutcome,
    record: YearlyExpenseRecord,
    regime: TaxRegimeEnum,
    vacancy_rate: float = 0.0,
) -> float:
    """
    Net income after tax minus loan instalments and borrower insurance.

    Vacancy reduces the rent cashed; the tax stays that of the declared revenue.
    """
    vacancy_loss = record.gross_revenue(regime) - record.collected_revenue(regime, vacancy_rate)
    return (
        outcome[regime].net_income
        - vacancy_loss
        - (record.loan_payment + record.loan_insurance)
    )


def cash_flow_table(
    outcomes: Sequence[YearTaxOutcome],
    records: Sequence[YearlyExpenseRecord],
    regime: TaxRegimeEnum,
    vacancy_rate: float = 0.0,
) -> pd.DataFrame:
    """
    Yearly cash flows of one regime.

    Args:
        outcomes: Replayed tax outcomes, one per year, in order
        records: Expense records of the same years
        regime: Regime whose tax treatment is applied
        vacancy_rate: Share of the revenue lost to vacancy, as a decimal

    Returns:
        DataFrame indexed by year with revenue, tax and cash-flow columns
    """
    regime = TaxRegimeEnum(regime)
    rows = []
    for outcome in outcomes:
        record = expenses_for_year(records, outcome.year)
        result = outcome[regime]
        rows.append(
            {
                "year": outcome.year,
                "Revenue": record.collected_revenue(regime, vacancy_rate),
                "Taxable Income": result.taxable_income,
                "Total Tax": result.total_tax,
                "Net Income": result.net_income,
                "Loan Payment": record.loan_payment,
                "Loan Insurance": record.loan_insurance,
                "Cash Flow": yearly_cash_flow(outcome, record, regime, vacancy_rate),
            }
        )
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows).set_index("year")
    df["Cumulative Cash Flow"] = df["Cash Flow"].cumsum()
    return df


def irr_cash_flows(
    initial_equity: float, yearly_flows: Sequence[float], sale_balance: float
) -> list:
    """
    Annual flow vector: equity out at year 0, yearly flows, sale proceeds last.
    """
    return [-initial_equity, *yearly_flows, sale_balance]


def internal_rate_of_return(cash_flows: Sequence[float]) -> float:
    """
    IRR of evenly spaced annual cash flows, as a decimal.

    Returns 0.0 when the IRR is undefined: fewer than two flows, no sign
    change, or no root found.
    """
    if len(cash_flows) < 2:
        return 0.0
    try:
        rate = irr(list(cash_flows))
    except InvalidPaymentsError as e:
        logger.debug(f"IRR undefined: {e}")
        return 0.0
    if rate is None or not math.isfinite(rate):
        logger.debug("IRR solver found no root; reporting 0")
        return 0.0
    return float(rate)


def cash_on_cash_return(annual_cash_flow: float, down_payment: float) -> float:
    return safe_ratio(annual_cash_flow, down_payment)
