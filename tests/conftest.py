# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for Immofi testing.

Factories build valid inputs with sensible defaults so that each test only
spells out the fields it is about.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from immofi.analysis import Investment
from immofi.core.primitives import DeferralKindEnum, GlobalSettings
from immofi.debt import LoanTerms
from immofi.tax import ExpenseProjection, TaxParameters, YearlyExpenseRecord
from immofi.valuation import SaleParameters


def create_loan(
    principal: float = 200_000.0,
    annual_rate_pct: float = 3.0,
    term_years: int = 20,
    deferral_kind: DeferralKindEnum = DeferralKindEnum.NONE,
    deferral_months: int = 0,
    start_date: date = date(2024, 1, 1),
    insurance_rate_pct: float = 0.0,
) -> LoanTerms:
    """
    Create loan terms for testing.

    Example:
        >>> create_loan(deferral_kind=DeferralKindEnum.TOTAL, deferral_months=12).total_months
        240
    """
    return LoanTerms(
        principal=principal,
        annual_rate_pct=annual_rate_pct,
        term_years=term_years,
        deferral_kind=deferral_kind,
        deferral_months=deferral_months,
        start_date=start_date,
        insurance_rate_pct=insurance_rate_pct,
    )


def create_record(year: int = 2024, **fields) -> YearlyExpenseRecord:
    """Create a yearly record; unspecified fields are zero."""
    return YearlyExpenseRecord(year=year, **fields)


def create_investment(
    start: date = date(2024, 1, 1),
    end: date = date(2034, 12, 31),
    loan: Optional[LoanTerms] = None,
    rent: float = 12_000.0,
    furnished_rent: float = 14_400.0,
    tax_parameters: Optional[TaxParameters] = None,
    sale: Optional[SaleParameters] = None,
    **kwargs,
) -> Investment:
    """
    Create a typical small rental investment.

    A 200k purchase financed at 90% over 20 years, with rents and costs
    growing 2% a year over the whole project.
    """
    projection = ExpenseProjection(
        base=YearlyExpenseRecord(
            year=start.year,
            rent=rent,
            furnished_rent=furnished_rent,
            property_tax=1_000.0,
            condo_fees=1_200.0,
            property_insurance=200.0,
        ),
        increases={
            "rent": 0.02,
            "furnished_rent": 0.02,
            "property_tax": 0.02,
            "condo_fees": 0.02,
        },
    )
    return Investment(
        name=kwargs.pop("name", "Test Flat"),
        project_start_date=start,
        project_end_date=end,
        purchase_price=kwargs.pop("purchase_price", 200_000.0),
        agency_fees=kwargs.pop("agency_fees", 5_000.0),
        notary_fees=kwargs.pop("notary_fees", 15_000.0),
        down_payment=kwargs.pop("down_payment", 40_000.0),
        loan=loan or create_loan(principal=180_000.0, annual_rate_pct=3.5, start_date=start),
        expenses=tuple(projection.project(start.year, end.year)),
        tax_parameters=tax_parameters
        or TaxParameters(
            marginal_tax_rate=0.30,
            building_value=160_000.0,
            building_amortization_years=25,
            furniture_value=8_000.0,
            furniture_amortization_years=5,
        ),
        sale=sale or SaleParameters(appreciation_rate=0.02),
        **kwargs,
    )


@pytest.fixture
def settings() -> GlobalSettings:
    return GlobalSettings()


@pytest.fixture
def standard_loan() -> LoanTerms:
    """200k at 3% over 20 years, no deferral."""
    return create_loan()


@pytest.fixture
def investment() -> Investment:
    return create_investment()
