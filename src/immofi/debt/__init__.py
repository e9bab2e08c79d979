# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from .amortization import (
    AmortizationRow,
    AmortizationSchedule,
    LoanTerms,
    calculate_monthly_payment,
    generate_schedule,
    statutory_early_repayment_penalty,
)
from .imported import infer_annual_rate_pct, schedule_from_rows
from .payment import annuity_payment, solve_monthly_rate

__all__ = [
    # Loan inputs and schedule
    "LoanTerms",
    "AmortizationRow",
    "AmortizationSchedule",
    "generate_schedule",
    "calculate_monthly_payment",
    "statutory_early_repayment_penalty",
    # Payment calculations
    "annuity_payment",
    "solve_monthly_rate",
    # Imported schedules
    "schedule_from_rows",
    "infer_annual_rate_pct",
]
