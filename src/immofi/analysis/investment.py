# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investment input model.

Groups everything the engines need for one property: acquisition costs, the
loan (or an imported schedule replacing it), yearly income and expense
records, investor tax parameters and resale assumptions.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from pydantic import Field, model_validator

from ..core.primitives import (
    ConfigurationError,
    FloatBetween0And1,
    Model,
    PositiveFloat,
    TaxRegimeEnum,
)
from ..debt import AmortizationRow, LoanTerms
from ..tax import TaxParameters, YearlyExpenseRecord
from ..valuation import SaleParameters

logger = logging.getLogger(__name__)


class Investment(Model):
    """
    A leveraged rental property over its project horizon.

    Attributes:
        name: Display name of the property
        project_start_date: Acquisition date; its year is the purchase year
        project_end_date: Last date of the projection; its year is the default sale year
        purchase_price: Price paid for the property
        agency_fees: Agency fees paid at acquisition
        notary_fees: Notary fees paid at acquisition
        bank_fees: Loan arrangement fees
        bank_guarantee_fees: Loan guarantee fees
        mandatory_diagnostics: Mandatory surveys paid by the buyer
        renovation_costs: Works carried out at acquisition
        down_payment: Equity brought by the investor
        loan: Loan terms
        amortization_override: Imported schedule replacing the generated one
        expenses: One income and expense record per project year
        vacancy_rate: Share of the revenue lost to vacancy, as a decimal
        tax_parameters: Investor tax parameters
        sale: Resale assumptions
        selected_regime: Regime used for headline cash-flow figures
    """

    name: str = "Investment"
    project_start_date: Optional[date] = None
    project_end_date: Optional[date] = None

    # === ACQUISITION ===
    purchase_price: PositiveFloat = 0.0
    agency_fees: PositiveFloat = 0.0
    notary_fees: PositiveFloat = 0.0
    bank_fees: PositiveFloat = 0.0
    bank_guarantee_fees: PositiveFloat = 0.0
    mandatory_diagnostics: PositiveFloat = 0.0
    renovation_costs: PositiveFloat = 0.0
    down_payment: PositiveFloat = 0.0

    # === FINANCING ===
    loan: LoanTerms = Field(default_factory=LoanTerms)
    amortization_override: Optional[Tuple[AmortizationRow, ...]] = None

    # === OPERATIONS AND TAX ===
    expenses: Tuple[YearlyExpenseRecord, ...] = ()
    vacancy_rate: FloatBetween0And1 = 0.0
    tax_parameters: TaxParameters = Field(default_factory=TaxParameters)
    sale: SaleParameters = Field(default_factory=SaleParameters)
    selected_regime: TaxRegimeEnum = TaxRegimeEnum.MICRO_FONCIER

    @model_validator(mode="after")
    def validate_dates(self) -> "Investment":
        """The projection cannot end before it starts."""
        if (
            self.project_start_date is not None
            and self.project_end_date is not None
            and self.project_end_date < self.project_start_date
        ):
            raise ValueError(
                f"project_end_date {self.project_end_date} is before "
                f"project_start_date {self.project_start_date}"
            )
        return self

    @property
    def purchase_year(self) -> int:
        self.check_dates()
        return self.project_start_date.year

    @property
    def end_year(self) -> int:
        self.check_dates()
        return self.project_end_date.year

    @property
    def project_years(self) -> List[int]:
        return list(range(self.purchase_year, self.end_year + 1))

    @property
    def total_investment_cost(self) -> float:
        """Acquisition price plus every cost paid at purchase."""
        return (
            self.purchase_price
            + self.agency_fees
            + self.notary_fees
            + self.bank_fees
            + self.bank_guarantee_fees
            + self.mandatory_diagnostics
            + self.renovation_costs
        )

    @property
    def acquisition_cost(self) -> float:
        """Price, agency, notary and bank fees and renovation; the headline yield basis."""
        return (
            self.purchase_price
            + self.agency_fees
            + self.notary_fees
            + self.bank_fees
            + self.renovation_costs
        )

    @property
    def yield_basis(self) -> float:
        """Cost used as denominator of the yearly gross yield per regime."""
        return self.purchase_price + self.agency_fees + self.renovation_costs

    @property
    def initial_equity(self) -> float:
        """Cash put in at purchase: total cost not covered by the loan."""
        return self.total_investment_cost - self.loan.principal

    def check_dates(self) -> None:
        """Raise ``ConfigurationError`` unless both project dates are set."""
        if self.project_start_date is None or self.project_end_date is None:
            raise ConfigurationError(
                f"{self.name}: project_start_date and project_end_date are required"
            )

    def sale_parameters(self) -> SaleParameters:
        """
        Resale assumptions, defaulting the purchase costs to the acquisition.

        Costs left at zero on ``sale`` are taken from the investment.
        """
        updates = {}
        if self.sale.purchase_price == 0:
            updates["purchase_price"] = self.purchase_price
        if self.sale.notary_fees == 0:
            updates["notary_fees"] = self.notary_fees
        if self.sale.acquisition_agency_fees == 0:
            updates["acquisition_agency_fees"] = self.agency_fees
        return self.sale.model_copy(update=updates) if updates else self.sale
