# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Imported schedule tests: verbatim replacement and rate reconstruction.
"""

import pytest

from immofi.core.primitives import CalculationSettings, DeferralKindEnum
from immofi.debt import (
    AmortizationRow,
    generate_schedule,
    infer_annual_rate_pct,
    schedule_from_rows,
)
from tests.conftest import create_loan


def lender_rows(annual_rate_pct: float = 3.4, **loan_kwargs):
    """Rows as a lender document would list them."""
    return generate_schedule(create_loan(annual_rate_pct=annual_rate_pct, **loan_kwargs)).rows


class TestScheduleFromRows:
    def test_rows_kept_verbatim(self):
        rows = lender_rows()
        schedule = schedule_from_rows(rows)

        assert schedule.is_override
        assert schedule.rows == tuple(rows)
        assert schedule.monthly_payment == rows[0].payment

    def test_deferred_interest_of_total_deferral(self):
        rows = lender_rows(deferral_kind=DeferralKindEnum.TOTAL, deferral_months=6)
        schedule = schedule_from_rows(rows)

        assert schedule.deferred_interest_total == pytest.approx(
            sum(row.interest for row in rows[:6])
        )
        assert schedule.monthly_payment == rows[6].payment


class TestInferRate:
    @pytest.mark.parametrize("annual_rate_pct", [1.2, 3.4, 5.75])
    def test_recovers_rate(self, annual_rate_pct):
        rows = lender_rows(annual_rate_pct)

        assert infer_annual_rate_pct(rows) == pytest.approx(annual_rate_pct, rel=1e-5)

    def test_ignores_deferral_rows(self):
        rows = lender_rows(2.9, deferral_kind=DeferralKindEnum.TOTAL, deferral_months=18)

        assert infer_annual_rate_pct(rows) == pytest.approx(2.9, rel=1e-5)

    def test_too_few_rows(self):
        assert infer_annual_rate_pct(lender_rows()[:2]) == 0.0

    def test_minimum_row_count_is_configurable(self):
        settings = CalculationSettings(min_schedule_rows=12)

        assert infer_annual_rate_pct(lender_rows()[:6], settings) == 0.0
        assert infer_annual_rate_pct(lender_rows(), settings) == pytest.approx(3.4, rel=1e-5)

    def test_opening_balance_rebuilt_from_principal(self):
        """Documents often omit the opening balance column."""
        rows = [
            AmortizationRow(
                month=row.month,
                due_date=row.due_date,
                payment=row.payment,
                principal_paid=row.principal_paid,
                interest=row.interest,
                balance_after=row.balance_after,
            )
            for row in lender_rows()
        ]

        assert infer_annual_rate_pct(rows) == pytest.approx(3.4, rel=1e-5)
