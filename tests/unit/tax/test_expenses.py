# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Yearly expense record, projection and loan-cost fill tests.
"""

import pytest
from pydantic import ValidationError

from immofi.core.primitives import IncompleteDataWarning, TaxRegimeEnum
from immofi.debt import generate_schedule
from immofi.tax import (
    ExpenseProjection,
    YearlyExpenseRecord,
    expenses_for_year,
    with_loan_costs,
)
from tests.conftest import create_loan, create_record


class TestYearlyExpenseRecord:
    def test_deductible_expenses_net_of_tenant_charges(self):
        record = create_record(
            property_tax=900.0,
            condo_fees=1_500.0,
            repairs=300.0,
            other_non_deductible=400.0,
            loan_interest=4_000.0,
            loan_insurance=240.0,
            tenant_charges=600.0,
        )

        assert record.deductible_expenses == pytest.approx(900 + 1_500 + 300 + 4_000 + 240 - 600)
        assert record.operating_expenses == pytest.approx(900 + 1_500 + 300 + 400)

    def test_revenue_by_regime(self):
        record = create_record(rent=9_000.0, furnished_rent=11_000.0, tenant_charges=600.0, tax_benefit=1_000.0)

        assert record.rental_revenue(TaxRegimeEnum.MICRO_FONCIER) == 9_000.0
        assert record.rental_revenue(TaxRegimeEnum.REEL_BIC) == 11_000.0
        assert record.gross_revenue(TaxRegimeEnum.REEL_FONCIER) == 10_600.0
        assert record.gross_revenue(TaxRegimeEnum.MICRO_BIC) == 11_600.0

    def test_negative_amounts_rejected(self):
        with pytest.raises(ValidationError):
            create_record(rent=-1.0)


class TestExpensesForYear:
    def test_found(self):
        records = [create_record(2024, rent=1.0), create_record(2025, rent=2.0)]

        assert expenses_for_year(records, 2025).rent == 2.0

    def test_missing_year_is_zero(self):
        with pytest.warns(IncompleteDataWarning, match="2026"):
            record = expenses_for_year([create_record(2024)], 2026)

        assert record.year == 2026
        assert record.rent == 0.0
        assert record.deductible_expenses == 0.0


class TestExpenseProjection:
    def test_compounds_increases(self):
        projection = ExpenseProjection(
            base=YearlyExpenseRecord(year=0, rent=9_600.0, property_tax=900.0, repairs=250.0),
            increases={"rent": 0.02, "property_tax": 0.03},
        )

        records = projection.project(2024, 2026)

        assert [r.year for r in records] == [2024, 2025, 2026]
        assert records[2].rent == pytest.approx(9_600.0 * 1.02**2)
        assert records[2].property_tax == pytest.approx(900.0 * 1.03**2)
        assert records[2].repairs == 250.0

    def test_unknown_field(self):
        with pytest.raises(ValidationError):
            ExpenseProjection(base=create_record(), increases={"loan_interest": 0.01})

    def test_increase_below_minus_hundred_percent(self):
        with pytest.raises(ValidationError):
            ExpenseProjection(base=create_record(), increases={"rent": -1.0})


class TestWithLoanCosts:
    def test_fills_financing_fields(self):
        loan = create_loan(insurance_rate_pct=0.36)
        schedule = generate_schedule(loan)
        records = [create_record(2024, rent=10_000.0), create_record(2025)]

        filled = with_loan_costs(records, schedule, loan.monthly_insurance)

        assert filled[0].rent == 10_000.0
        assert filled[0].loan_interest == pytest.approx(sum(r.interest for r in schedule.rows[:12]))
        assert filled[0].loan_payment == pytest.approx(12 * schedule.monthly_payment)
        assert filled[1].loan_insurance == pytest.approx(200_000.0 * 0.0036)
