# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Capital-gain taxation at a simulated resale.

Bare-letting regimes and micro-BIC follow the private real-estate gain rules
(flat income tax and social charges, both reduced by holding-period
allowances). Reel-BIC adds the recapture of the depreciation used, taxed at
the marginal rate, for a non-professional lessor (LMNP); a professional
lessor (LMP) splits the gain into short-term and long-term parts instead.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import Field, model_validator

from ..core.primitives import (
    AppreciationTypeEnum,
    ConfigurationError,
    FiscalSettings,
    FloatBetween0And1,
    Model,
    PositiveFloat,
    TaxRegimeEnum,
)
from .allowances import holding_period_allowances

logger = logging.getLogger(__name__)


class SaleParameters(Model):
    """
    Purchase costs and resale assumptions of a property.

    Attributes:
        purchase_price: Price paid for the property
        notary_fees: Notary fees paid at acquisition
        acquisition_agency_fees: Agency fees paid at acquisition
        improvement_works: Works not already deducted as running expenses
        appreciation_type: How the sale value is projected
        appreciation_rate: Annual or global appreciation (decimal)
        sale_price: Explicit sale price, required for ``AppreciationTypeEnum.AMOUNT``
        sale_agency_fees: Agency fees paid by the seller
        early_repayment_penalty: Penalty charged when the loan is repaid at sale
        apply_statutory_penalty: Use the legal penalty ceiling instead of the explicit amount
        is_professional_lessor: LMP status (furnished letting)
        accumulated_depreciation: Used depreciation to recapture; replayed from the ledger when unset
    """

    purchase_price: PositiveFloat = 0.0
    notary_fees: PositiveFloat = 0.0
    acquisition_agency_fees: PositiveFloat = 0.0
    improvement_works: PositiveFloat = 0.0

    appreciation_type: AppreciationTypeEnum = AppreciationTypeEnum.ANNUAL
    appreciation_rate: float = Field(
        default=0.0, gt=-1, description="Appreciation as a decimal (0.02 for 2%)"
    )
    sale_price: Optional[PositiveFloat] = None
    sale_agency_fees: PositiveFloat = 0.0

    early_repayment_penalty: PositiveFloat = 0.0
    apply_statutory_penalty: bool = False

    is_professional_lessor: bool = False
    accumulated_depreciation: Optional[PositiveFloat] = None

    @model_validator(mode="after")
    def validate_sale_price(self) -> "SaleParameters":
        """An explicit sale price is needed for the amount appreciation type."""
        if self.appreciation_type == AppreciationTypeEnum.AMOUNT and self.sale_price is None:
            raise ValueError("sale_price is required when appreciation_type is 'amount'")
        return self

    @property
    def corrected_acquisition_cost(self) -> float:
        return (
            self.purchase_price
            + self.notary_fees
            + self.acquisition_agency_fees
            + self.improvement_works
        )

    def projected_value(self, holding_years: int) -> float:
        """Sale value after ``holding_years`` years of ownership."""
        if self.appreciation_type == AppreciationTypeEnum.AMOUNT:
            return self.sale_price
        if self.appreciation_type == AppreciationTypeEnum.GLOBAL:
            return self.purchase_price * (1 + self.appreciation_rate)
        return self.purchase_price * (1 + self.appreciation_rate) ** holding_years

    def net_selling_price(self, holding_years: int) -> float:
        return self.projected_value(holding_years) - self.sale_agency_fees


class CapitalGainResult(Model):
    """Capital-gain taxation of one regime for one sale year. Derived, never mutated."""

    regime: TaxRegimeEnum
    sale_year: int
    holding_years: int

    projected_value: float
    net_selling_price: float
    corrected_acquisition_cost: float
    gross_capital_gain: float

    ir_allowance: FloatBetween0And1 = 0.0
    ps_allowance: FloatBetween0And1 = 0.0
    taxable_capital_gain_ir: float
    taxable_capital_gain_ps: float
    income_tax: float
    social_charges: float

    depreciation_taxable: float = 0.0
    depreciation_tax: float = 0.0

    # LMP only
    short_term_gain: Optional[float] = None
    long_term_gain: Optional[float] = None
    short_term_tax: Optional[float] = None
    long_term_income_tax: Optional[float] = None
    long_term_social_charges: Optional[float] = None

    total_tax: float
    net_capital_gain: float

    # Net proceeds
    outstanding_loan_balance: float = 0.0
    early_repayment_penalty: float = 0.0
    sale_balance: float = 0.0


def holding_years_between(purchase_year: int, sale_year: int) -> int:
    """
    Whole years of ownership.

    Raises:
        ConfigurationError: If the sale does not happen after the purchase year
    """
    if sale_year <= purchase_year:
        raise ConfigurationError(
            f"Sale year {sale_year} must come after purchase year {purchase_year}"
        )
    return sale_year - purchase_year


def sale_balance(
    net_selling_price: float,
    outstanding_loan_balance: float,
    early_repayment_penalty: float,
    total_tax: float,
) -> float:
    """Cash left to the seller once the loan is repaid and the gain taxed."""
    return net_selling_price - (outstanding_loan_balance + early_repayment_penalty) - total_tax


def compute_sale(
    regime: TaxRegimeEnum,
    purchase_year: int,
    sale_year: int,
    sale: SaleParameters,
    marginal_tax_rate: float,
    cumulative_used_depreciation: float = 0.0,
    outstanding_loan_balance: float = 0.0,
    early_repayment_penalty: float = 0.0,
    fiscal: Optional[FiscalSettings] = None,
) -> CapitalGainResult:
    """
    Tax the capital gain of a sale in ``sale_year`` under ``regime``.

    Args:
        regime: Tax regime of the rental activity
        purchase_year: Year of acquisition
        sale_year: Year of resale
        sale: Purchase costs and appreciation assumptions
        marginal_tax_rate: Marginal income tax rate (decimal)
        cumulative_used_depreciation: Depreciation used through ``sale_year`` (reel-BIC)
        outstanding_loan_balance: Loan balance repaid from the sale proceeds
        early_repayment_penalty: Penalty due on the early repayment
        fiscal: Jurisdiction constants (defaults apply when omitted)

    Returns:
        CapitalGainResult with the tax breakdown and the net sale balance

    Raises:
        ConfigurationError: If the sale year is not after the purchase year
    """
    fiscal = fiscal or FiscalSettings()
    regime = TaxRegimeEnum(regime)
    holding_years = holding_years_between(purchase_year, sale_year)

    projected_value = sale.projected_value(holding_years)
    net_selling_price = projected_value - sale.sale_agency_fees
    acquisition_cost = sale.corrected_acquisition_cost
    gross_gain = max(0.0, net_selling_price - acquisition_cost)

    common = dict(
        regime=regime,
        sale_year=sale_year,
        holding_years=holding_years,
        projected_value=projected_value,
        net_selling_price=net_selling_price,
        corrected_acquisition_cost=acquisition_cost,
        gross_capital_gain=gross_gain,
        outstanding_loan_balance=outstanding_loan_balance,
        early_repayment_penalty=early_repayment_penalty,
    )

    if regime == TaxRegimeEnum.REEL_BIC and sale.is_professional_lessor:
        details = _professional_gain(
            gross_gain, holding_years, cumulative_used_depreciation, marginal_tax_rate, fiscal
        )
    else:
        details = _private_gain(gross_gain, holding_years, fiscal)
        if regime == TaxRegimeEnum.REEL_BIC:
            # Recapture is taxed at the marginal rate, on top of the private gain tax
            depreciation_taxable = min(cumulative_used_depreciation, gross_gain)
            depreciation_tax = depreciation_taxable * marginal_tax_rate
            details["depreciation_taxable"] = depreciation_taxable
            details["depreciation_tax"] = depreciation_tax
            details["total_tax"] += depreciation_tax

    total_tax = details["total_tax"]
    logger.debug(
        f"{regime.value} sale in {sale_year} after {holding_years} years: "
        f"gain {gross_gain:,.2f}, tax {total_tax:,.2f}"
    )
    return CapitalGainResult(
        **common,
        **details,
        net_capital_gain=gross_gain - total_tax,
        sale_balance=sale_balance(
            net_selling_price, outstanding_loan_balance, early_repayment_penalty, total_tax
        ),
    )


def _private_gain(gross_gain: float, holding_years: int, fiscal: FiscalSettings) -> dict:
    ir_allowance, ps_allowance = holding_period_allowances(holding_years, fiscal)
    taxable_ir = gross_gain * (1 - ir_allowance)
    taxable_ps = gross_gain * (1 - ps_allowance)
    income_tax = taxable_ir * fiscal.capital_gain_income_tax_rate
    social_charges = taxable_ps * fiscal.capital_gain_social_charges_rate
    return dict(
        ir_allowance=ir_allowance,
        ps_allowance=ps_allowance,
        taxable_capital_gain_ir=taxable_ir,
        taxable_capital_gain_ps=taxable_ps,
        income_tax=income_tax,
        social_charges=social_charges,
        total_tax=income_tax + social_charges,
    )


def _professional_gain(
    gross_gain: float,
    holding_years: int,
    cumulative_used_depreciation: float,
    marginal_tax_rate: float,
    fiscal: FiscalSettings,
) -> dict:
    """
    LMP gain: no holding-period allowance.

    Up to the short-term threshold the whole gain is short-term. Beyond it the
    part matching the depreciation used is short-term and the rest long-term.
    """
    if holding_years <= fiscal.lmp_short_term_max_years:
        short_term = gross_gain
    else:
        short_term = min(cumulative_used_depreciation, gross_gain)
    long_term = gross_gain - short_term

    short_term_tax = short_term * marginal_tax_rate
    long_term_income_tax = long_term * fiscal.lmp_long_term_income_tax_rate
    long_term_social = long_term * fiscal.capital_gain_social_charges_rate
    return dict(
        taxable_capital_gain_ir=gross_gain,
        taxable_capital_gain_ps=long_term,
        income_tax=short_term_tax + long_term_income_tax,
        social_charges=long_term_social,
        short_term_gain=short_term,
        long_term_gain=long_term,
        short_term_tax=short_term_tax,
        long_term_income_tax=long_term_income_tax,
        long_term_social_charges=long_term_social,
        total_tax=short_term_tax + long_term_income_tax + long_term_social,
    )
