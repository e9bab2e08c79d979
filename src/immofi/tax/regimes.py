# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Annual taxation of rental income under the four regimes.

Every regime is computed independently from the same read-only inputs, so a
regime requested alone gives the same figures as the whole batch. The only
state shared across years is the ``TaxCarryForward`` accumulator: reel-foncier
deficits, reel-BIC operating deficits and the depreciation ledger. Callers
thread it from year to year, or use ``replay_years`` to drive it from the
first project year.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import Field

from ..core.primitives import FiscalSettings, Model, TaxRegimeEnum, warn_incomplete
from .depreciation import (
    DepreciationLedger,
    DepreciationLedgerEntry,
    advance_year,
)
from .expenses import YearlyExpenseRecord, expenses_for_year
from .parameters import TaxParameters

logger = logging.getLogger(__name__)


class TaxCarryForward(Model):
    """
    Amounts carried from one year into the next.

    Attributes:
        land_deficit: Reel-foncier deficit awaiting future property income
        bic_deficit: Reel-BIC operating deficit awaiting future BIC profit
        depreciation: Depreciation ledger (cumulative used and backlog)
    """

    land_deficit: float = 0.0
    bic_deficit: float = 0.0
    depreciation: DepreciationLedger = Field(default_factory=DepreciationLedger)

    @classmethod
    def initial(cls, params: TaxParameters) -> "TaxCarryForward":
        """State before the first project year."""
        return cls(
            land_deficit=params.previous_deficit,
            depreciation=DepreciationLedger.from_parameters(params),
        )


class TaxResult(Model):
    """Tax outcome of one regime for one year. Derived, never mutated."""

    regime: TaxRegimeEnum
    year: int
    revenue: float
    deductible_expenses: float = 0.0
    taxable_income: float
    tax: float
    social_charges: float
    total_tax: float
    net_income: float

    # Deficits
    deficit_used: float = 0.0
    deficit_imputed: float = 0.0
    deficit_carried_forward: float = 0.0

    # Depreciation (reel-BIC)
    depreciation_theoretical: float = 0.0
    depreciation_used: float = 0.0
    depreciation_backlog: float = 0.0


class YearTaxOutcome(Model):
    """All four regimes for one year, plus the state carried into the next year."""

    year: int
    results: Dict[TaxRegimeEnum, TaxResult]
    carry_forward: TaxCarryForward
    depreciation_entries: Tuple[DepreciationLedgerEntry, ...] = ()

    def __getitem__(self, regime: TaxRegimeEnum) -> TaxResult:
        return self.results[TaxRegimeEnum(regime)]


def _taxes(taxable_income: float, params: TaxParameters) -> Tuple[float, float]:
    tax = max(0.0, taxable_income * params.marginal_tax_rate)
    social_charges = max(0.0, taxable_income * params.social_charges_rate)
    return tax, social_charges


def _result(
    regime: TaxRegimeEnum,
    expenses: YearlyExpenseRecord,
    taxable_income: float,
    params: TaxParameters,
    **details,
) -> TaxResult:
    tax, social_charges = _taxes(taxable_income, params)
    total_tax = tax + social_charges
    if taxable_income > 0 and total_tax == 0:
        logger.warning(
            f"Zero tax on a positive taxable income ({taxable_income:,.2f}) "
            f"for {regime.value} in {expenses.year}; check the tax rates"
        )
    return TaxResult(
        regime=regime,
        year=expenses.year,
        revenue=expenses.rental_revenue(regime),
        taxable_income=taxable_income,
        tax=tax,
        social_charges=social_charges,
        total_tax=total_tax,
        net_income=expenses.gross_revenue(regime) - total_tax,
        **details,
    )


def _micro(
    regime: TaxRegimeEnum,
    expenses: YearlyExpenseRecord,
    params: TaxParameters,
    fiscal: FiscalSettings,
) -> TaxResult:
    allowance = params.micro_allowance(regime.is_furnished, fiscal)
    taxable_income = expenses.rental_revenue(regime) * (1 - allowance)
    return _result(regime, expenses, taxable_income, params)


def _reel_foncier(
    expenses: YearlyExpenseRecord, carry: TaxCarryForward, params: TaxParameters
) -> Tuple[TaxResult, float]:
    """
    Rent minus real expenses.

    A positive result first absorbs the carried-forward deficit. A negative
    result is imputed on global income up to ``params.deficit_ceiling``; the
    excess joins the carried-forward deficit.
    """
    deductible = expenses.deductible_expenses
    result = expenses.rent - deductible
    previous = carry.land_deficit

    if result >= 0:
        used = min(previous, result)
        taxable_income = result - used
        imputed = 0.0
        carried = previous - used
    else:
        deficit = -result
        used = 0.0
        taxable_income = 0.0
        imputed = min(deficit, params.deficit_ceiling)
        carried = previous + deficit - imputed

    tax_result = _result(
        TaxRegimeEnum.REEL_FONCIER,
        expenses,
        taxable_income,
        params,
        deductible_expenses=deductible,
        deficit_used=used,
        deficit_imputed=imputed,
        deficit_carried_forward=carried,
    )
    return tax_result, carried


def _reel_bic(
    expenses: YearlyExpenseRecord, carry: TaxCarryForward, params: TaxParameters
) -> Tuple[TaxResult, float, DepreciationLedger, Tuple[DepreciationLedgerEntry, ...]]:
    """
    Furnished rent minus real expenses minus depreciation used.

    An operating deficit is carried forward without ceiling. Depreciation
    cannot create a deficit: it only absorbs what is left of the base, the
    remainder feeding the ledger backlog.
    """
    if expenses.furnished_rent > 0 and not params.has_depreciable_assets:
        warn_incomplete(
            f"Reel-BIC for {expenses.year} has furnished rent but no depreciable "
            f"building, furniture or works value; depreciation treated as zero"
        )
    deductible = expenses.deductible_expenses
    result = expenses.furnished_rent - deductible
    previous = carry.bic_deficit

    if result >= 0:
        deficit_used = min(previous, result)
        base = result - deficit_used
        carried = previous - deficit_used
    else:
        deficit_used = 0.0
        base = 0.0
        carried = previous - result

    step = advance_year(carry.depreciation, base)
    taxable_income = base - step.used

    tax_result = _result(
        TaxRegimeEnum.REEL_BIC,
        expenses,
        taxable_income,
        params,
        deductible_expenses=deductible,
        deficit_used=deficit_used,
        deficit_carried_forward=carried,
        depreciation_theoretical=step.theoretical,
        depreciation_used=step.used,
        depreciation_backlog=step.ledger.backlog,
    )
    return tax_result, carried, step.ledger, step.entries


def compute_regime(
    regime: TaxRegimeEnum,
    expenses: YearlyExpenseRecord,
    carry: TaxCarryForward,
    params: TaxParameters,
    fiscal: Optional[FiscalSettings] = None,
) -> TaxResult:
    """Tax result of a single regime for the year of ``expenses``."""
    fiscal = fiscal or FiscalSettings()
    regime = TaxRegimeEnum(regime)
    if regime.is_micro:
        return _micro(regime, expenses, params, fiscal)
    if regime == TaxRegimeEnum.REEL_FONCIER:
        return _reel_foncier(expenses, carry, params)[0]
    return _reel_bic(expenses, carry, params)[0]


def compute_year(
    expenses: YearlyExpenseRecord,
    carry: TaxCarryForward,
    params: TaxParameters,
    fiscal: Optional[FiscalSettings] = None,
) -> YearTaxOutcome:
    """
    All four regimes for one year and the carry-forward state after it.

    Args:
        expenses: Income and expense record of the year
        carry: State at the end of the previous year
        params: Investor tax parameters
        fiscal: Jurisdiction constants (defaults apply when omitted)
    """
    fiscal = fiscal or FiscalSettings()
    foncier, land_deficit = _reel_foncier(expenses, carry, params)
    bic, bic_deficit, ledger, entries = _reel_bic(expenses, carry, params)

    results = {
        TaxRegimeEnum.MICRO_FONCIER: _micro(TaxRegimeEnum.MICRO_FONCIER, expenses, params, fiscal),
        TaxRegimeEnum.REEL_FONCIER: foncier,
        TaxRegimeEnum.MICRO_BIC: _micro(TaxRegimeEnum.MICRO_BIC, expenses, params, fiscal),
        TaxRegimeEnum.REEL_BIC: bic,
    }
    next_carry = TaxCarryForward(
        land_deficit=land_deficit, bic_deficit=bic_deficit, depreciation=ledger
    )
    return YearTaxOutcome(
        year=expenses.year,
        results=results,
        carry_forward=next_carry,
        depreciation_entries=entries,
    )


def replay_years(
    years: Sequence[int],
    records: Sequence[YearlyExpenseRecord],
    params: TaxParameters,
    fiscal: Optional[FiscalSettings] = None,
) -> List[YearTaxOutcome]:
    """
    Compute every year in order, threading the carry-forward state.

    Years without a record are computed on an all-zero record and raise an
    ``IncompleteDataWarning``.
    """
    years = list(years)
    if years != sorted(years):
        raise ValueError(f"Years must be replayed in chronological order, got {years}")

    carry = TaxCarryForward.initial(params)
    outcomes = []
    for year in years:
        outcome = compute_year(expenses_for_year(records, year), carry, params, fiscal)
        outcomes.append(outcome)
        carry = outcome.carry_forward
    return outcomes


def is_eligible(
    regime: TaxRegimeEnum,
    expenses: YearlyExpenseRecord,
    fiscal: Optional[FiscalSettings] = None,
) -> bool:
    """Micro regimes are only open below their revenue threshold."""
    fiscal = fiscal or FiscalSettings()
    regime = TaxRegimeEnum(regime)
    if regime == TaxRegimeEnum.MICRO_FONCIER:
        return expenses.rent <= fiscal.micro_foncier_threshold
    if regime == TaxRegimeEnum.MICRO_BIC:
        return expenses.furnished_rent <= fiscal.micro_bic_threshold
    return True


def recommended_regime(
    outcome: YearTaxOutcome,
    expenses: YearlyExpenseRecord,
    fiscal: Optional[FiscalSettings] = None,
) -> TaxRegimeEnum:
    """Eligible regime with the highest net income; ties go to display order."""
    best = None
    for regime in TaxRegimeEnum.ordered():
        if not is_eligible(regime, expenses, fiscal):
            continue
        if best is None or outcome[regime].net_income > outcome[best].net_income:
            best = regime
    return best


def results_table(outcomes: Sequence[YearTaxOutcome]) -> pd.DataFrame:
    """Long-format table: one row per year and regime."""
    records = []
    for outcome in outcomes:
        for regime in TaxRegimeEnum.ordered():
            row = outcome[regime].model_dump()
            row["regime"] = regime.value
            records.append(row)
    if not records:
        return pd.DataFrame(columns=list(TaxResult.model_fields))
    return pd.DataFrame.from_records(records).set_index(["year", "regime"])
