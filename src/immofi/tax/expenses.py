# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Yearly income and expense records, and their projection over a project horizon.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from pydantic import Field, field_validator

from ..core.primitives import Model, PositiveFloat, TaxRegimeEnum, warn_incomplete
from ..debt.amortization import AmortizationSchedule

logger = logging.getLogger(__name__)

DEDUCTIBLE_FIELDS: Tuple[str, ...] = (
    "property_tax",
    "condo_fees",
    "property_insurance",
    "management_fees",
    "unpaid_rent_insurance",
    "repairs",
    "other_deductible",
    "loan_insurance",
    "loan_interest",
)

OPERATING_FIELDS: Tuple[str, ...] = (
    "property_tax",
    "condo_fees",
    "property_insurance",
    "management_fees",
    "unpaid_rent_insurance",
    "repairs",
    "other_deductible",
    "other_non_deductible",
)

PROJECTABLE_FIELDS: Tuple[str, ...] = (
    "rent",
    "furnished_rent",
    "tenant_charges",
    "tax_benefit",
) + OPERATING_FIELDS


class YearlyExpenseRecord(Model):
    """
    Income and costs of one calendar year of the project.

    Tenant charges are the part of the condo fees recharged to the tenant:
    they are collected as revenue and netted out of the deductible expenses.
    """

    year: int

    # === INCOME ===
    rent: PositiveFloat = Field(default=0.0, description="Bare-letting rent")
    furnished_rent: PositiveFloat = Field(default=0.0, description="Furnished-letting rent")
    tenant_charges: PositiveFloat = Field(default=0.0, description="Charges recharged to the tenant")
    tax_benefit: PositiveFloat = Field(default=0.0, description="Bare-letting tax aid received")

    # === OPERATING COSTS ===
    property_tax: PositiveFloat = 0.0
    condo_fees: PositiveFloat = 0.0
    property_insurance: PositiveFloat = 0.0
    management_fees: PositiveFloat = 0.0
    unpaid_rent_insurance: PositiveFloat = 0.0
    repairs: PositiveFloat = 0.0
    other_deductible: PositiveFloat = 0.0
    other_non_deductible: PositiveFloat = 0.0

    # === FINANCING ===
    loan_interest: PositiveFloat = 0.0
    loan_insurance: PositiveFloat = 0.0
    loan_payment: PositiveFloat = 0.0

    def rental_revenue(self, regime: TaxRegimeEnum) -> float:
        """Taxable rent of the regime: furnished rent for BIC, bare rent otherwise."""
        return self.furnished_rent if regime.is_furnished else self.rent

    def gross_revenue(self, regime: TaxRegimeEnum) -> float:
        """Everything collected under the regime, tenant charges and tax aid included."""
        revenue = self.rental_revenue(regime) + self.tenant_charges
        if not regime.is_furnished:
            revenue += self.tax_benefit
        return revenue

    def collected_revenue(self, regime: TaxRegimeEnum, vacancy_rate: float = 0.0) -> float:
        """Gross revenue of the regime actually cashed once vacancy is taken out."""
        return self.gross_revenue(regime) * (1 - vacancy_rate)

    @property
    def deductible_expenses(self) -> float:
        """Real deductible expenses net of the charges recharged to the tenant."""
        return sum(getattr(self, name) for name in DEDUCTIBLE_FIELDS) - self.tenant_charges

    @property
    def operating_expenses(self) -> float:
        return sum(getattr(self, name) for name in OPERATING_FIELDS)


def expenses_for_year(
    records: Sequence[YearlyExpenseRecord], year: int
) -> YearlyExpenseRecord:
    """
    Record of ``year``, or an all-zero record with an ``IncompleteDataWarning``.
    """
    for record in records:
        if record.year == year:
            return record
    warn_incomplete(f"No expense record for {year}; income and expenses treated as zero")
    return YearlyExpenseRecord(year=year)


class ExpenseProjection(Model):
    """
    Generates yearly records from a base year and per-field annual increases.

    Attributes:
        base: Values of the first project year (its ``year`` is ignored)
        increases: Annual growth per field name, as decimals (0.02 for 2%)

    Example:
        >>> projection = ExpenseProjection(
        ...     base=YearlyExpenseRecord(year=0, rent=9_600.0, property_tax=900.0),
        ...     increases={"rent": 0.02, "property_tax": 0.03},
        ... )
        >>> records = projection.project(2024, 2026)
        >>> round(records[2].rent, 2)
        9987.84
    """

    base: YearlyExpenseRecord
    increases: Dict[str, float] = Field(default_factory=dict)

    @field_validator("increases")
    @classmethod
    def validate_increases(cls, v: Dict[str, float]) -> Dict[str, float]:
        unknown = sorted(set(v) - set(PROJECTABLE_FIELDS))
        if unknown:
            raise ValueError(f"Cannot project fields {unknown}; expected a subset of {PROJECTABLE_FIELDS}")
        for name, rate in v.items():
            if rate <= -1:
                raise ValueError(f"Annual increase for {name} must be above -100%, got {rate}")
        return v

    def project(self, start_year: int, end_year: int) -> List[YearlyExpenseRecord]:
        """One record per year from ``start_year`` to ``end_year`` inclusive."""
        records = []
        for year in range(start_year, end_year + 1):
            elapsed = year - start_year
            values = {
                name: getattr(self.base, name) * (1 + self.increases.get(name, 0.0)) ** elapsed
                for name in PROJECTABLE_FIELDS
            }
            records.append(YearlyExpenseRecord(year=year, **values))
        logger.debug(f"Projected {len(records)} expense records from {start_year} to {end_year}")
        return records


def with_loan_costs(
    records: Sequence[YearlyExpenseRecord],
    schedule: AmortizationSchedule,
    monthly_insurance: float = 0.0,
) -> List[YearlyExpenseRecord]:
    """
    Fill the financing fields of each record from an amortization schedule.

    Interest is the interest actually paid in the year (capitalized interest
    of a total deferral is not deductible until paid); insurance is charged for
    every scheduled month of the year.
    """
    filled = []
    for record in records:
        months = len(schedule.rows_in_year(record.year))
        filled.append(
            record.model_copy(
                update={
                    "loan_interest": schedule.interest_paid_in_year(record.year),
                    "loan_payment": schedule.payments_in_year(record.year),
                    "loan_insurance": monthly_insurance * months,
                }
            )
        )
    return filled
