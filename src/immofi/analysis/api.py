# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Public entry points.

Stateless functions over an ``Investment``: every call recomputes from the
inputs it is given, replaying the tax years from the first project year so
that carry-forward state is never cached between calls. Settings are passed
explicitly; a changed parameter is simply a new ``Investment`` or
``GlobalSettings`` value.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pandas as pd

from ..core.primitives import GlobalSettings, TaxRegimeEnum
from ..debt import (
    AmortizationSchedule,
    LoanTerms,
    generate_schedule,
    infer_annual_rate_pct,
    schedule_from_rows,
    statutory_early_repayment_penalty,
)
from ..debt import calculate_monthly_payment as _loan_monthly_payment
from ..tax import (
    TaxResult,
    YearlyExpenseRecord,
    YearTaxOutcome,
    expenses_for_year,
    recommended_regime,
    replay_years,
    with_loan_costs,
)
from ..valuation import CapitalGainResult, compute_sale, holding_years_between
from .investment import Investment
from .metrics import (
    FinancialMetrics,
    cash_flow_table,
    cash_on_cash_return,
    gross_yield_table,
    internal_rate_of_return,
    irr_cash_flows,
    safe_ratio,
    yearly_cash_flow,
)

logger = logging.getLogger(__name__)


def generate_amortization_schedule(loan_terms: LoanTerms) -> AmortizationSchedule:
    """
    Monthly schedule of a loan and the interest capitalized during deferral.

    Unset terms give an empty schedule; a deferral covering the whole term
    raises ``ConfigurationError``.
    """
    return generate_schedule(loan_terms)


def calculate_monthly_payment(loan_terms: LoanTerms) -> float:
    """Instalment of the amortizing phase; 0 for unset terms."""
    return _loan_monthly_payment(loan_terms)


def resolve_schedule(investment: Investment) -> AmortizationSchedule:
    """
    The imported schedule when one is supplied, the generated one otherwise.

    A loan without a start date is dated from the project start date.
    """
    if investment.amortization_override:
        return schedule_from_rows(investment.amortization_override)
    loan = investment.loan
    if loan.start_date is None and investment.project_start_date is not None:
        loan = loan.model_copy(update={"start_date": investment.project_start_date})
    return generate_schedule(loan)


def effective_annual_rate_pct(
    investment: Investment, settings: Optional[GlobalSettings] = None
) -> float:
    """
    Nominal loan rate in percent.

    An imported schedule without a rate on the loan terms has it inferred
    from its rows.
    """
    settings = settings or GlobalSettings()
    if investment.loan.annual_rate_pct > 0:
        return investment.loan.annual_rate_pct
    if investment.amortization_override:
        rate = infer_annual_rate_pct(investment.amortization_override, settings.calculation)
        logger.debug(f"Inferred {rate:.4f}% from the imported schedule of {investment.name}")
        return rate
    return 0.0


def project_records(
    investment: Investment, schedule: Optional[AmortizationSchedule] = None
) -> List[YearlyExpenseRecord]:
    """
    One expense record per project year.

    Records whose financing fields are all zero are filled from the
    amortization schedule.
    """
    schedule = schedule if schedule is not None else resolve_schedule(investment)
    records = []
    for year in investment.project_years:
        record = expenses_for_year(investment.expenses, year)
        if record.loan_payment == 0 and record.loan_interest == 0 and record.loan_insurance == 0:
            record = with_loan_costs([record], schedule, investment.loan.monthly_insurance)[0]
        records.append(record)
    return records


def replay_investment(
    investment: Investment,
    through_year: Optional[int] = None,
    settings: Optional[GlobalSettings] = None,
) -> List[YearTaxOutcome]:
    """Tax outcomes of every project year up to ``through_year`` inclusive."""
    settings = settings or GlobalSettings()
    through_year = investment.end_year if through_year is None else through_year
    records = project_records(investment)
    years = list(range(investment.purchase_year, through_year + 1)) or [through_year]
    extra = [r for r in investment.expenses if r.year not in investment.project_years]
    return replay_years(years, records + extra, investment.tax_parameters, settings.fiscal)


def calculate_all_tax_regimes(
    investment: Investment, year: int, settings: Optional[GlobalSettings] = None
) -> Dict[TaxRegimeEnum, TaxResult]:
    """
    Tax result of every regime for ``year``.

    Earlier project years are replayed first so that deficits and
    depreciation backlog are carried into ``year``. A missing expense record
    is treated as zero and raises an ``IncompleteDataWarning``.
    """
    outcomes = replay_investment(investment, year, settings)
    return dict(outcomes[-1].results)


def _penalty(
    investment: Investment, balance: float, rate_pct: float, settings: GlobalSettings
) -> float:
    sale = investment.sale
    if sale.apply_statutory_penalty:
        return statutory_early_repayment_penalty(balance, rate_pct, settings.fiscal)
    return sale.early_repayment_penalty if balance > 0 else 0.0


def calculate_capital_gain(
    investment: Investment,
    regime: TaxRegimeEnum,
    sale_year: Optional[int] = None,
    settings: Optional[GlobalSettings] = None,
    outcomes: Optional[List[YearTaxOutcome]] = None,
    schedule: Optional[AmortizationSchedule] = None,
) -> CapitalGainResult:
    """
    Capital-gain taxation of one regime for a sale in ``sale_year``.

    Defaults to a sale at the end of the project. ``outcomes`` and
    ``schedule`` may be passed to reuse an existing replay.

    Raises:
        ConfigurationError: If the project dates are unset or the sale year
            is not after the purchase year
    """
    settings = settings or GlobalSettings()
    sale_year = investment.end_year if sale_year is None else sale_year
    holding_years_between(investment.purchase_year, sale_year)

    schedule = schedule if schedule is not None else resolve_schedule(investment)
    if outcomes is None:
        outcomes = replay_investment(investment, sale_year, settings)

    sale = investment.sale_parameters()
    if sale.accumulated_depreciation is not None:
        used_depreciation = sale.accumulated_depreciation
    else:
        used_depreciation = _outcome_for(outcomes, sale_year).carry_forward.depreciation.cumulative_used

    balance = schedule.outstanding_balance_at_year_end(sale_year)
    penalty = _penalty(investment, balance, effective_annual_rate_pct(investment, settings), settings)

    return compute_sale(
        regime=regime,
        purchase_year=investment.purchase_year,
        sale_year=sale_year,
        sale=sale,
        marginal_tax_rate=investment.tax_parameters.marginal_tax_rate,
        cumulative_used_depreciation=used_depreciation,
        outstanding_loan_balance=balance,
        early_repayment_penalty=penalty,
        fiscal=settings.fiscal,
    )


def _outcome_for(outcomes: List[YearTaxOutcome], year: int) -> YearTaxOutcome:
    for outcome in outcomes:
        if outcome.year == year:
            return outcome
    return outcomes[-1]


def calculate_all_capital_gain_regimes(
    investment: Investment,
    sale_year: Optional[int] = None,
    settings: Optional[GlobalSettings] = None,
) -> Dict[TaxRegimeEnum, CapitalGainResult]:
    """
    Capital-gain taxation of every regime, by default for a sale at project end.

    Raises:
        ConfigurationError: If the project dates are unset or the sale year
            is not after the purchase year
    """
    settings = settings or GlobalSettings()
    sale_year = investment.end_year if sale_year is None else sale_year
    holding_years_between(investment.purchase_year, sale_year)
    schedule = resolve_schedule(investment)
    outcomes = replay_investment(investment, sale_year, settings)
    return {
        regime: calculate_capital_gain(
            investment, regime, sale_year, settings, outcomes=outcomes, schedule=schedule
        )
        for regime in TaxRegimeEnum.ordered()
    }


def calculate_irr(
    investment: Investment,
    regime: TaxRegimeEnum,
    sale_year: Optional[int] = None,
    settings: Optional[GlobalSettings] = None,
) -> float:
    """
    Internal rate of return of one regime for a sale in ``sale_year``.

    Flows: equity at year 0, the cash flow of every year before the sale,
    then the sale balance.
    """
    settings = settings or GlobalSettings()
    sale_year = investment.end_year if sale_year is None else sale_year
    if sale_year <= investment.purchase_year:
        return 0.0
    schedule = resolve_schedule(investment)
    outcomes = replay_investment(investment, sale_year, settings)
    return _irr(investment, regime, sale_year, outcomes, schedule, settings)


def _irr(
    investment: Investment,
    regime: TaxRegimeEnum,
    sale_year: int,
    outcomes: List[YearTaxOutcome],
    schedule: AmortizationSchedule,
    settings: GlobalSettings,
) -> float:
    records = project_records(investment, schedule)
    flows = [
        yearly_cash_flow(
            outcome, expenses_for_year(records, outcome.year), regime, investment.vacancy_rate
        )
        for outcome in outcomes
        if outcome.year < sale_year
    ]
    gain = calculate_capital_gain(
        investment, regime, sale_year, settings, outcomes=outcomes, schedule=schedule
    )
    return internal_rate_of_return(
        irr_cash_flows(investment.initial_equity, flows, gain.sale_balance)
    )


def irr_by_sale_year(
    investment: Investment, settings: Optional[GlobalSettings] = None
) -> pd.DataFrame:
    """
    IRR of every regime for each candidate sale year after the purchase year.

    Returns:
        DataFrame indexed by sale year with one column per regime
    """
    settings = settings or GlobalSettings()
    schedule = resolve_schedule(investment)
    outcomes = replay_investment(investment, investment.end_year, settings)
    sale_years = [year for year in investment.project_years if year > investment.purchase_year]
    data = {
        regime.value: [
            _irr(investment, regime, year, outcomes, schedule, settings) for year in sale_years
        ]
        for regime in TaxRegimeEnum.ordered()
    }
    return pd.DataFrame(data, index=pd.Index(sale_years, name="sale_year"))


def calculate_cash_flows(
    investment: Investment,
    regime: Optional[TaxRegimeEnum] = None,
    settings: Optional[GlobalSettings] = None,
    rounded: bool = False,
) -> pd.DataFrame:
    """
    Yearly cash-flow table of ``regime`` (the selected regime by default).

    With ``rounded`` set, amounts are rounded to
    ``settings.reporting.decimal_precision`` for display.
    """
    settings = settings or GlobalSettings()
    regime = investment.selected_regime if regime is None else regime
    schedule = resolve_schedule(investment)
    outcomes = replay_investment(investment, investment.end_year, settings)
    df = cash_flow_table(
        outcomes, project_records(investment, schedule), regime, investment.vacancy_rate
    )
    if rounded:
        df = df.round(settings.reporting.decimal_precision)
    return df


def calculate_gross_yields(investment: Investment) -> pd.DataFrame:
    """
    Gross yield of every regime for each project year, as decimals.

    Revenue collected under the regime, net of vacancy, over the purchase
    price plus agency fees and renovation costs.

    Returns:
        DataFrame indexed by year with one column per regime
    """
    return gross_yield_table(
        project_records(investment),
        investment.project_years,
        investment.yield_basis,
        investment.vacancy_rate,
    )


def calculate_financial_metrics(
    investment: Investment, settings: Optional[GlobalSettings] = None
) -> FinancialMetrics:
    """
    Whole-project summary: costs, yields, cash flow, sale balance and IRR.

    First-year figures use the selected regime's rent net of vacancy and the
    first project year's operating costs. Yields are taken over
    ``Investment.acquisition_cost``. Sale figures are for a sale at project end, and
    are left empty when the project ends in its purchase year.
    """
    settings = settings or GlobalSettings()
    schedule = resolve_schedule(investment)
    records = project_records(investment, schedule)
    outcomes = replay_investment(investment, investment.end_year, settings)

    first = records[0]
    regime = investment.selected_regime
    annual_rent = first.collected_revenue(regime, investment.vacancy_rate)
    annual_costs = first.operating_expenses
    total_cost = investment.total_investment_cost
    yield_cost = investment.acquisition_cost

    monthly_insurance = investment.loan.monthly_insurance
    monthly_payment = schedule.monthly_payment + monthly_insurance
    monthly_cash_flow = (annual_rent - annual_costs) / 12 - monthly_payment

    sale_year = investment.end_year
    sale_balance: Dict[TaxRegimeEnum, float] = {}
    irr: Dict[TaxRegimeEnum, float] = {}
    if sale_year > investment.purchase_year:
        for r in TaxRegimeEnum.ordered():
            gain = calculate_capital_gain(
                investment, r, sale_year, settings, outcomes=outcomes, schedule=schedule
            )
            sale_balance[r] = gain.sale_balance
            irr[r] = _irr(investment, r, sale_year, outcomes, schedule, settings)
    else:
        sale_year = None

    metrics = FinancialMetrics(
        total_investment_cost=total_cost,
        monthly_payment=monthly_payment,
        monthly_insurance=monthly_insurance,
        monthly_costs=annual_costs / 12,
        gross_yield=safe_ratio(annual_rent, yield_cost),
        net_yield=safe_ratio(annual_rent - annual_costs, yield_cost),
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=monthly_cash_flow * 12,
        roi=cash_on_cash_return(monthly_cash_flow * 12, investment.down_payment),
        outstanding_balance_at_sale=schedule.outstanding_balance_at_year_end(investment.end_year),
        deferred_interest=schedule.deferred_interest_total,
        sale_year=sale_year,
        sale_balance=sale_balance,
        irr=irr,
        recommended_regime=recommended_regime(outcomes[0], first, settings.fiscal),
    )
    logger.info(
        f"{investment.name}: gross yield {metrics.gross_yield:.2%}, "
        f"monthly cash flow {metrics.monthly_cash_flow:,.2f}"
    )
    return metrics
